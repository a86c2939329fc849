"""chatextract CLI — inspect configuration and preview extraction offline."""

import logging

import click
from chatextract import __version__
from .shared import console

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="chatextract")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, debug):
    """chatextract — tagged content from model replies, served as chat commands"""
    logging.basicConfig(level=logging.WARNING, format=_log_format)
    if debug:
        logging.getLogger("chatextract").setLevel(logging.DEBUG)
    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands."""
    console.print(f"[bold]chatextract v{__version__}[/bold]\n")

    commands = [
        ("tags", "List configured tags"),
        ("commands", "List configured commands and their formats"),
        ("usage", "Show variable reference"),
        ("extract", "Extract configured tags from a response file"),
        ("render", "Render a command against a response file"),
    ]
    for name, desc in commands:
        console.print(f"    [bold]chatextract {name:10s}[/bold] {desc}")
    console.print()
    console.print("[dim]Run 'chatextract <command> --help' for details on a specific command.[/dim]")


# Import all command modules (registers commands onto cli group)
from . import cmd_config  # noqa: E402, F401
from . import cmd_preview  # noqa: E402, F401


def main():
    cli()
