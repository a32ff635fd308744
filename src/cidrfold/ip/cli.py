"""
IP/CIDR CLI commands.
"""

import itertools
import logging

import click
from rich.console import Console
from rich.table import Table

from cidrfold.config import get_config
from cidrfold.ip.codec import from_integer
from cidrfold.ip.collapse import collapse_ranges
from cidrfold.ip.errors import AddressError
from cidrfold.ip.models import SLASH, Cidr, IpRange
from cidrfold.ip.parser import DASH, parse_ip_or_range, parse_ip_range

logger = logging.getLogger(__name__)


def _token_to_range(token: str) -> IpRange:
    """Read an address, CIDR or range literal as an inclusive range."""
    if DASH in token and SLASH not in token:
        return parse_ip_range(token)
    return Cidr.parse(token).to_ip_range()


@click.group()
def ip():
    """IP address, range and CIDR utilities."""
    pass


@ip.command()
@click.argument("tokens", nargs=-1, required=True)
def expand(tokens: tuple[str, ...]):
    """Expand addresses, CIDRs and ranges into individual addresses.

    CIDR blocks expand to their usable hosts. Anything larger than
    65536 addresses is refused.

    Examples:
        cidrfold ip expand 192.168.1.0/30
        cidrfold ip expand 10.0.0.1-5
        cidrfold ip expand 10.0.0.1-10.0.0.5 ::1-5
    """
    console = Console()

    for token in tokens:
        try:
            addresses = parse_ip_or_range(token)
        except AddressError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)

        for address in addresses:
            console.print(str(address), highlight=False)


@ip.command()
@click.argument("tokens", nargs=-1)
@click.option("--gap", "-g", type=click.IntRange(min=0), default=None,
              help="Merge ranges separated by up to this many addresses (over-approximates)")
@click.option("--file", "-f", "infile", type=click.File("r"), default=None,
              help="Read tokens from a file, one per line ('-' for stdin)")
def collapse(tokens: tuple[str, ...], gap: int | None, infile):
    """Collapse addresses, CIDRs and ranges into a minimal CIDR list.

    Reads tokens from stdin when none are given on the command line.

    Examples:
        cidrfold ip collapse 192.168.0.0/24 192.168.1.0/24
        cidrfold ip collapse 10.0.0.0/8 10.1.2.0/24
        cidrfold ip collapse --gap 2 172.16.0.8 172.16.0.11 172.16.0.13 172.16.0.15
        cat blocklist.txt | cidrfold ip collapse
    """
    console = Console()

    if gap is None:
        gap = get_config().max_gap

    items = list(tokens)
    if infile is not None:
        items.extend(infile.read().split())
    elif not items:
        items = click.get_text_stream("stdin").read().split()

    try:
        ranges = [_token_to_range(token) for token in items]
        result = collapse_ranges(ranges, max_gap=gap)
    except AddressError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    logger.info("Collapsed %d tokens into %d CIDRs", len(items), len(result))

    for cidr in result:
        console.print(str(cidr), highlight=False)


@ip.command()
@click.argument("cidr")
def info(cidr: str):
    """Show the range covered by a CIDR block.

    Examples:
        cidrfold ip info 10.0.0.0/8
        cidrfold ip info 192.168.1.77/24
        cidrfold ip info 2001:db8::/32
    """
    console = Console()

    try:
        block = Cidr.parse(cidr)
    except AddressError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    r = block.to_range()

    table = Table(title=f"CIDR Information: {cidr}", show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Family", f"IPv{int(block.family)}")
    table.add_row("Address", str(block.address))
    table.add_row("Network", str(block.network()))
    table.add_row("First Address", str(from_integer(r.family, r.beg)))
    table.add_row("Last Address", str(from_integer(r.family, r.end)))
    table.add_row("Prefix Length", f"/{block.prefix}")
    table.add_row("Total Addresses", f"{block.length():,}")
    table.add_row("Host", "[green]Yes[/green]" if block.is_host() else "No")

    console.print(table)


@ip.command()
@click.argument("token")
@click.option("--limit", "-n", type=click.IntRange(min=0), default=None,
              help="Stop after this many addresses")
def iterate(token: str, limit: int | None):
    """Lazily list every address of a CIDR or range.

    Unlike expand, CIDRs include their network and broadcast addresses
    and no size limit applies beyond --limit.

    Examples:
        cidrfold ip iterate 10.0.0.0/8 --limit 20
        cidrfold ip iterate 2001:db8::1-ff
    """
    console = Console()

    if limit is None:
        limit = get_config().iter_limit

    try:
        ip_range = _token_to_range(token)
    except AddressError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    for address in itertools.islice(ip_range.iter(), limit):
        console.print(str(address), highlight=False)

    total = ip_range.length()
    if total > limit:
        console.print(f"[dim]... {total - limit:,} more[/dim]")
