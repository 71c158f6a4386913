import discord
from dependency_injector import containers, providers
from dotenv import load_dotenv

from src.bot.application.dispatcher import SessionEventDispatcher
from src.bot.application.lifecycle import LifecycleCoordinator
from src.bot.application.normalizer import EventNormalizer
from src.bot.application.rename import RenameHandler
from src.bot.application.retry import RetryPolicy
from src.bot.application.session_store import SessionStore
from src.bot.infrastructure.discord_platform import DiscordPlatformClient
from src.bot.settings import VcThreadSettings

load_dotenv()


def _create_bot() -> discord.Bot:
    intents = discord.Intents.default()
    intents.voice_states = True
    return discord.Bot(intents=intents)


class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    settings = providers.Singleton(
        VcThreadSettings,
        vc_category_id=config.vc_category_id,
        vc_ignored_channels=config.vc_ignored_channels,
        thread_channel_id=config.thread_channel_id,
    )
    retry_policy = providers.Singleton(
        RetryPolicy,
        attempts=config.retry_attempts,
        base_wait=config.retry_base_wait,
        max_wait=config.retry_max_wait,
    )

    bot = providers.Singleton(_create_bot)
    platform_client = providers.Singleton(DiscordPlatformClient, bot=bot)

    session_store = providers.Singleton(SessionStore)
    normalizer = providers.Singleton(
        EventNormalizer, settings=settings, store=session_store
    )
    coordinator = providers.Singleton(
        LifecycleCoordinator,
        store=session_store,
        platform=platform_client,
        thread_channel_id=config.thread_channel_id,
        retry_policy=retry_policy,
    )
    dispatcher = providers.Singleton(
        SessionEventDispatcher, handler=coordinator.provided.handle
    )
    rename_handler = providers.Singleton(
        RenameHandler,
        store=session_store,
        platform=platform_client,
        retry_policy=retry_policy,
    )


container = Container()
container.config.discord_bot_token.from_env("DISCORD_BOT_TOKEN", required=True)
container.config.log_level.from_env("LOG_LEVEL", default="INFO", as_=str)
container.config.vc_category_id.from_env("VC_CATEGORY_ID", required=True, as_=int)
container.config.vc_ignored_channels.from_env("VC_IGNORED_CHANNELS", default="")
container.config.thread_channel_id.from_env("THREAD_CHANNEL_ID", required=True, as_=int)
container.config.retry_attempts.from_env("RETRY_ATTEMPTS", default=3, as_=int)
container.config.retry_base_wait.from_env("RETRY_BASE_WAIT", default=1.0, as_=float)
container.config.retry_max_wait.from_env("RETRY_MAX_WAIT", default=10.0, as_=float)
