"""Offline preview: run a saved model response through the pipeline."""

import click
from rich.table import Table
from rich.text import Text

from . import cli
from .shared import console, _load_settings_or_exit, _read_text
from chatextract.errors import UnknownCommandError
from chatextract.extraction import extract_tag_content
from chatextract.plugin import ExtractorPlugin

PREVIEW_GROUP = "preview"


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--tag", "-t", "tag_names", multiple=True, help="Tag to extract (repeatable; default: configured tags)")
def extract(file, tag_names):
    """Extract tags from a response FILE."""
    settings = _load_settings_or_exit()
    text = _read_text(file)

    table = Table(title="Extracted")
    table.add_column("Tag", style="bold")
    table.add_column("Content")
    for tag in (tag_names or settings.tags):
        content = extract_tag_content(text, tag)
        table.add_row(tag, Text(content) if content is not None else Text("—", style="dim"))
    console.print(table)


@cli.command()
@click.argument("command_name")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--group", "-g", default=PREVIEW_GROUP, show_default=True, help="Group id to ingest under")
def render(command_name, file, group):
    """Render COMMAND_NAME against a response FILE."""
    plugin = ExtractorPlugin(_load_settings_or_exit())
    plugin.ingestor.ingest(group, _read_text(file))

    try:
        output = plugin.run_command(command_name, group)
    except UnknownCommandError as e:
        raise click.ClickException(str(e))
    console.print(output, markup=False, highlight=False)
