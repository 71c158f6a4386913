import logging

from container import container
from logging_config import load_logging_config


def handle_run_command() -> None:
    load_logging_config(container.config.log_level())

    from src.bot.command import bot

    logging.getLogger(__name__).info("Starting Discord bot...")
    bot.run(container.config.discord_bot_token())
