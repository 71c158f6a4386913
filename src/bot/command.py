from logging import getLogger
from os import getenv

import discord

from container import container
from src.bot.domain.raw import RawChannelDelete, RawChannelUpdate, RawVoiceStateUpdate
from src.bot.infrastructure.discord_platform import to_raw_channel
from src.ui.view.rename import RenameView

from .application.notification import (
    DiscordNotificationService,
    NoopNotificationService,
)

logger = getLogger(__name__)

# Bot
bot: discord.Bot = container.bot()

# Services
normalizer = container.normalizer()
dispatcher = container.dispatcher()
notification_service = (
    DiscordNotificationService(bot, int(channel_id), container.session_store())
    if (channel_id := getenv("SYSTEM_CHANNEL_ID")) is not None and channel_id.isdigit()
    else NoopNotificationService()
)

_persistent_view_added = False


@bot.event
async def on_ready():
    global _persistent_view_added
    logger.info(f"Logged in as {bot.user}")
    if not _persistent_view_added:
        # 再起動前に送ったボタンも反応できるようにする
        bot.add_view(RenameView())
        _persistent_view_added = True
    await notification_service.send_ready_notification()


@bot.event
async def on_disconnect():
    await notification_service.send_disconnect_notification()


@bot.event
async def on_resumed():
    await notification_service.send_resumed_notification()


@bot.event
async def on_voice_state_update(
    member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
):
    raw = RawVoiceStateUpdate(
        member_id=member.id,
        before=to_raw_channel(before.channel),
        after=to_raw_channel(after.channel),
    )
    dispatcher.dispatch_all(normalizer.voice_state_update(raw))


@bot.event
async def on_guild_channel_delete(channel: discord.abc.GuildChannel):
    if (raw := to_raw_channel(channel)) is not None:
        dispatcher.dispatch_all(normalizer.channel_delete(RawChannelDelete(raw)))


@bot.event
async def on_guild_channel_update(
    before: discord.abc.GuildChannel, after: discord.abc.GuildChannel
):
    raw_before, raw_after = to_raw_channel(before), to_raw_channel(after)
    if raw_before is not None and raw_after is not None:
        dispatcher.dispatch_all(
            normalizer.channel_update(RawChannelUpdate(raw_before, raw_after))
        )
