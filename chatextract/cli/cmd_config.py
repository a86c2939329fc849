"""Configuration introspection commands."""

from rich.markdown import Markdown
from rich.table import Table
from rich.text import Text

from . import cli
from .shared import console, _load_settings_or_exit
from chatextract.plugin import ExtractorPlugin


@cli.command()
def tags():
    """List configured tags."""
    plugin = ExtractorPlugin(_load_settings_or_exit())
    console.print(plugin.describe_tags(), markup=False)


@cli.command()
def commands():
    """List configured commands and their formats."""
    settings = _load_settings_or_exit()
    if not settings.commands:
        console.print(ExtractorPlugin(settings).describe_commands(), markup=False)
        return

    table = Table(title="Commands")
    table.add_column("Name", style="bold")
    table.add_column("Format")
    for cmd in settings.commands:
        table.add_row(Text(cmd.name), Text(cmd.format))
    console.print(table)


@cli.command()
def usage():
    """Show variable reference."""
    plugin = ExtractorPlugin(_load_settings_or_exit())
    console.print(Markdown(plugin.usage))
