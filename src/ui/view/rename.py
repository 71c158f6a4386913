import logging

import discord

from container import container
from src.bot.application.rename import RenamePermissionError
from src.bot.application.session_store import SessionNotFoundError
from src.ui import messages

from ..modal.rename import RenameModal

logger = logging.getLogger(__name__)

RENAME_BUTTON_ID = "rename_button"


class RenameView(discord.ui.View):
    def __init__(self):
        super().__init__(timeout=None)

    @discord.ui.button(
        label="📝チャンネル名を変える",
        style=discord.ButtonStyle.success,
        custom_id=RENAME_BUTTON_ID,
    )
    async def rename_button_callback(
        self, button: discord.ui.Button, interaction: discord.Interaction
    ):
        handler = container.rename_handler()
        if interaction.channel_id is None or interaction.user is None:
            return
        try:
            await handler.authorize(interaction.channel_id, interaction.user.id)
        except SessionNotFoundError:
            await interaction.response.send_message(
                messages.SESSION_CLOSED, ephemeral=True
            )
            return
        except RenamePermissionError:
            await interaction.response.send_message(messages.OWNER_ONLY, ephemeral=True)
            return
        except Exception:
            logger.exception("Rename button failed in thread %s", interaction.channel_id)
            await interaction.response.send_message(
                messages.RENAME_FAILED, ephemeral=True
            )
            return

        await interaction.response.send_modal(RenameModal())
