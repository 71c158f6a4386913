import logging

import discord

from container import container
from src.bot.application.rename import (
    MAX_CHANNEL_NAME_LENGTH,
    InvalidChannelNameError,
    RenamePermissionError,
    RenameRequest,
)
from src.bot.application.session_store import SessionNotFoundError
from src.ui import messages

logger = logging.getLogger(__name__)


class RenameModal(discord.ui.Modal):
    def __init__(self) -> None:
        super().__init__(title="✏️チャンネル名を変える", custom_id="rename_title")
        self.name_input = discord.ui.InputText(
            label="VCのテーマは？",
            placeholder="フォートナイト, しりとり, カラオケ,...",
            style=discord.InputTextStyle.short,
            max_length=MAX_CHANNEL_NAME_LENGTH,
            custom_id="rename_text",
        )
        self.add_item(self.name_input)

    async def callback(self, interaction: discord.Interaction):
        if interaction.channel_id is None or interaction.user is None:
            return
        # レート制限で待たされることがあるため先に応答を保留する
        await interaction.response.defer(ephemeral=True)

        request = RenameRequest(
            thread_id=interaction.channel_id,
            member_id=interaction.user.id,
            new_name=self.name_input.value or "",
        )
        try:
            await container.rename_handler().rename(request)
        except SessionNotFoundError:
            await interaction.followup.send(messages.SESSION_CLOSED, ephemeral=True)
        except RenamePermissionError:
            await interaction.followup.send(messages.OWNER_ONLY, ephemeral=True)
        except InvalidChannelNameError:
            await interaction.followup.send(messages.INVALID_NAME, ephemeral=True)
        except Exception:
            logger.exception("RenameModal failed in thread %s", interaction.channel_id)
            await interaction.followup.send(messages.RENAME_FAILED, ephemeral=True)
        else:
            await interaction.followup.send(messages.RENAMED, ephemeral=True)
