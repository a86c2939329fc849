"""Telegram adapter — expose extractor commands on a python-telegram-bot Application.

Each configured command becomes /<name>; the group id is the chat id.
Introspection commands are /extractor_tags and /extractor_commands
(Telegram command names cannot contain dots).
"""

import logging
import re
from typing import Callable, Optional

from telegram import BotCommand, Update
from telegram.ext import Application, CommandHandler, ContextTypes

from ..plugin import ExtractorPlugin

logger = logging.getLogger("chatextract.channels.telegram")

TAGS_COMMAND = "extractor_tags"
COMMANDS_COMMAND = "extractor_commands"

# Telegram: 1-32 chars, lowercase letters, digits, underscores
_VALID_COMMAND = re.compile(r"^[\da-z_]{1,32}$")


def is_valid_command(name: str) -> bool:
    return bool(_VALID_COMMAND.match(name))


def chat_group_id(update: Update) -> Optional[str]:
    """Group id for an update: the chat id as a string."""
    chat = update.effective_chat
    if chat is None:
        return None
    return str(chat.id)


def _reply_handler(reply: Callable[[Optional[str]], str]):
    async def _handle(update: Update, context: ContextTypes.DEFAULT_TYPE):
        message = update.effective_message
        if message is None:
            return
        await message.reply_text(reply(chat_group_id(update)))
    return _handle


def _usable_commands(plugin: ExtractorPlugin):
    """Yield (telegram_name, command) for commands Telegram accepts.

    Names are lowercased; the first command wins when two collide.
    """
    seen = {TAGS_COMMAND, COMMANDS_COMMAND}
    for cmd in plugin.settings.commands:
        name = cmd.name.lower()
        if not is_valid_command(name):
            logger.warning(f"Skipping command '{cmd.name}': not usable as a Telegram command")
            continue
        if name in seen:
            logger.warning(f"Skipping command '{cmd.name}': /{name} is already registered")
            continue
        seen.add(name)
        yield name, cmd


def register_commands(application: Application, plugin: ExtractorPlugin) -> list[str]:
    """Add a CommandHandler per configured command plus the introspection commands.

    Returns:
        Names of the commands that were registered.
    """
    registered = []
    for name, cmd in _usable_commands(plugin):
        application.add_handler(CommandHandler(name, _reply_handler(plugin.command_handler(cmd))))
        registered.append(name)

    application.add_handler(CommandHandler(TAGS_COMMAND, _reply_handler(lambda _gid: plugin.describe_tags())))
    application.add_handler(CommandHandler(COMMANDS_COMMAND, _reply_handler(lambda _gid: plugin.describe_commands())))
    registered += [TAGS_COMMAND, COMMANDS_COMMAND]

    logger.info(f"Registered Telegram commands: {', '.join(registered)}")
    return registered


def bot_commands(plugin: ExtractorPlugin) -> list[BotCommand]:
    """Build the "/" menu entries for the registered commands."""
    entries = []
    for name, cmd in _usable_commands(plugin):
        first_line = cmd.format.strip().splitlines()[0] if cmd.format.strip() else cmd.name
        entries.append(BotCommand(name, first_line[:256]))
    entries.append(BotCommand(TAGS_COMMAND, "查看当前配置的所有标签"))
    entries.append(BotCommand(COMMANDS_COMMAND, "查看当前配置的所有指令"))
    return entries


async def publish_bot_commands(application: Application, plugin: ExtractorPlugin):
    """Register the command menu with Telegram."""
    await application.bot.set_my_commands(bot_commands(plugin))
