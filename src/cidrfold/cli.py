"""
Command line entry point for cidrfold.
"""

import click
from rich.console import Console

from cidrfold import __version__
from cidrfold.config import get_config
from cidrfold.ip.cli import ip
from cidrfold.logging_config import configure_logging


@click.group()
@click.version_option(__version__, prog_name="cidrfold")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None,
              help="Also write logs to this file")
def main(debug: bool, log_file: str | None):
    """cidrfold - IP address, range and CIDR toolkit."""
    try:
        config = get_config()
    except ValueError as e:
        Console().print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    configure_logging(
        debug=debug,
        log_file=log_file or config.log_file,
        level=config.log_level,
    )


main.add_command(ip)


if __name__ == "__main__":
    main()
