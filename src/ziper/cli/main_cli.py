"""
Top-level CLI entry point for ziper.
"""

import typer

from ziper import __version__
from ziper.cli import archive_cli


def _show_version(value: bool):
    if value:
        typer.echo(f"ziper {__version__}")
        raise typer.Exit()


main_app = typer.Typer(help="ziper: a fast compression tool")

# Archive commands sit at the top level: `ziper create`, `ziper list`
main_app.command("create")(archive_cli.create)
main_app.command("list")(archive_cli.list_entries)


@main_app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_show_version, is_eager=True, help="Show the version and exit"
    ),
):
    """ziper: a fast compression tool."""


def main():
    main_app()

if __name__ == "__main__":
    main()
