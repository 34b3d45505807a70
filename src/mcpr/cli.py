"""mcpr CLI entrypoint."""

from __future__ import annotations

import click

from mcpr import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mcpr")
def main() -> None:
    """mcpr — serve Python functions over the Model Context Protocol."""


# Register subcommands
from mcpr.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
