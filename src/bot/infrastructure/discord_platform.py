import asyncio
from contextlib import asynccontextmanager
from logging import getLogger
from typing import AsyncIterator

import aiohttp
import discord

from src.bot.application.platform import (
    PlatformClient,
    PlatformError,
    TransientPlatformError,
)
from src.bot.domain.raw import ChannelKind, RawChannel

logger = getLogger(__name__)

_CHANNEL_KINDS = {
    discord.ChannelType.voice: ChannelKind.VOICE,
    discord.ChannelType.stage_voice: ChannelKind.STAGE,
}


def to_raw_channel(channel: object | None) -> RawChannel | None:
    """py-cordのチャンネルをRawChannelに変換する"""
    if not isinstance(channel, discord.abc.GuildChannel):
        return None
    members = getattr(channel, "members", None) or []
    return RawChannel(
        id=channel.id,
        name=channel.name,
        kind=_CHANNEL_KINDS.get(channel.type, ChannelKind.OTHER),
        category_id=getattr(channel, "category_id", None),
        member_ids=tuple(m.id for m in members),
    )


@asynccontextmanager
async def _translate_errors(action: str) -> AsyncIterator[None]:
    try:
        yield
    except discord.Forbidden as e:
        raise PlatformError(f"{action}: forbidden") from e
    except discord.NotFound as e:
        raise PlatformError(f"{action}: not found") from e
    except discord.HTTPException as e:
        if e.status == 429 or e.status >= 500:
            raise TransientPlatformError(f"{action}: HTTP {e.status}") from e
        raise PlatformError(f"{action}: HTTP {e.status}") from e
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransientPlatformError(f"{action}: {e!r}") from e


class DiscordPlatformClient(PlatformClient):
    def __init__(self, bot: discord.Bot, auto_archive_duration: int = 1440):
        self.bot = bot
        self.auto_archive_duration = auto_archive_duration

    async def create_thread(self, parent_channel_id: int, name: str) -> int:
        async with _translate_errors(f"create thread in {parent_channel_id}"):
            parent = await self._channel(parent_channel_id)
            if not isinstance(parent, discord.TextChannel):
                raise PlatformError(f"Channel {parent_channel_id} is not a text channel")
            thread = await parent.create_thread(
                name=name,
                auto_archive_duration=self.auto_archive_duration,
                type=discord.ChannelType.public_thread,
            )
            return thread.id

    async def send_message(self, channel_id: int, content: str) -> None:
        async with _translate_errors(f"send message to {channel_id}"):
            channel = await self._messageable(channel_id)
            await channel.send(
                content, allowed_mentions=discord.AllowedMentions(users=False)
            )

    async def send_rename_control(self, thread_id: int, content: str) -> None:
        from src.ui.view.rename import RenameView

        async with _translate_errors(f"send rename control to {thread_id}"):
            channel = await self._messageable(thread_id)
            await channel.send(content, view=RenameView())

    async def archive_thread(self, thread_id: int) -> None:
        async with _translate_errors(f"archive thread {thread_id}"):
            thread = await self._channel(thread_id)
            if not isinstance(thread, discord.Thread):
                raise PlatformError(f"Channel {thread_id} is not a thread")
            await thread.edit(archived=True)

    async def rename_channel(self, channel_id: int, new_name: str) -> None:
        async with _translate_errors(f"rename channel {channel_id}"):
            channel = await self._channel(channel_id)
            if not isinstance(channel, (discord.abc.GuildChannel, discord.Thread)):
                raise PlatformError(f"Channel {channel_id} cannot be renamed")
            await channel.edit(name=new_name)

    async def can_manage_channel(self, channel_id: int, member_id: int) -> bool:
        async with _translate_errors(f"check permissions on {channel_id}"):
            channel = await self._channel(channel_id)
            if not isinstance(channel, discord.abc.GuildChannel):
                return False
            guild = channel.guild
            member = guild.get_member(member_id) or await guild.fetch_member(member_id)
            return channel.permissions_for(member).manage_channels

    async def _channel(self, channel_id: int):
        if (channel := self.bot.get_channel(channel_id)) is not None:
            return channel
        logger.debug(f"Channel {channel_id} not cached, fetching")
        return await self.bot.fetch_channel(channel_id)

    async def _messageable(self, channel_id: int) -> discord.abc.Messageable:
        channel = await self._channel(channel_id)
        if isinstance(channel, discord.abc.Messageable):
            return channel
        raise PlatformError(f"Channel {channel_id} is not messageable")
