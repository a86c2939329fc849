"""Shared utilities for chatextract CLI commands."""

import click
from rich.console import Console

from chatextract.config import ExtractorSettings, load_settings

console = Console()


def _load_settings_or_exit() -> ExtractorSettings:
    """Load settings, turning validation errors into a CLI error."""
    from pydantic import ValidationError

    try:
        return load_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration:\n{e}")


def _read_text(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()
