"""chatextract configuration management."""

import logging
import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger("chatextract.config")

DEFAULT_TAGS = ["think", "memory", "relationship"]


class CommandConfig(BaseModel):
    """A chat command and the format it renders."""

    name: str = Field(description="Command name")
    format: str = Field(
        default="{name}在想：\n{think}",
        description="Output format. Variables: {name} (character name) and every configured tag, e.g. {think}",
    )

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("command name must not be empty")
        return v


DEFAULT_COMMANDS = [
    CommandConfig(name="think", format="{name}在想：\n{think}"),
    CommandConfig(
        name="extract",
        format="{name}在想：\n{think}\n记忆是：\n{memory}\n我们现在的关系是：\n{relationship}",
    ),
]


class ExtractorSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    character_name: str = Field(
        default="AI",
        description="Character name, available in formats as {name}",
    )
    tags: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TAGS),
        description="Tags to extract (without angle brackets). Each one becomes a variable, e.g. {think}",
    )
    commands: list[CommandConfig] = Field(
        default_factory=lambda: [c.model_copy() for c in DEFAULT_COMMANDS],
        description="Command list",
    )
    show_logs: bool = Field(default=False, description="Log extraction events at INFO")

    # Telegram
    telegram_bot_token: Optional[str] = Field(default=None, description="Telegram bot token")

    model_config = {"env_prefix": "CHATEXTRACT_", "env_file": ".env", "extra": "ignore"}

    @field_validator("tags")
    @classmethod
    def _tags_not_blank(cls, v: list[str]) -> list[str]:
        cleaned = []
        for tag in v:
            tag = tag.strip()
            if not tag:
                raise ValueError("tag names must not be empty")
            cleaned.append(tag)
        return cleaned

    @field_validator("commands")
    @classmethod
    def _unique_command_names(cls, v: list[CommandConfig]) -> list[CommandConfig]:
        seen = set()
        for cmd in v:
            if cmd.name in seen:
                raise ValueError(f"duplicate command name: {cmd.name}")
            seen.add(cmd.name)
        return v

    def get_command(self, name: str) -> Optional[CommandConfig]:
        for cmd in self.commands:
            if cmd.name == name:
                return cmd
        return None


def unknown_variables(fmt: str, tags: list[str]) -> list[str]:
    """Return brace variables in fmt that are neither {name} nor a configured tag."""
    known = {"name", *tags}
    return [v for v in re.findall(r"\{([^{}\s]+)\}", fmt) if v not in known]


def load_settings(**overrides) -> ExtractorSettings:
    """Load settings from environment (keyword overrides win)."""
    settings = ExtractorSettings(**overrides)

    for cmd in settings.commands:
        unknown = unknown_variables(cmd.format, settings.tags)
        if unknown:
            logger.warning(
                f"Command '{cmd.name}' uses unknown variables {unknown}; "
                f"they will be output verbatim"
            )

    return settings
