"""Allow-list CLI - root, proof, proofs, leaf and verify commands.

Results go to stdout without a trailing newline so they can be captured
directly by deployment scripts; errors and logs go to stderr.
"""
import json
import sys

import click
from eth_utils import decode_hex, encode_hex

from . import __version__
from .core.config import settings
from .core.logging import LOG_LEVELS, setup_logging
from .crypto.abi import encode_proof_hex
from .crypto.errors import AllowListError
from .crypto.merkle import HASH_SIZE
from .services import AllowListService


def print_error(message: str) -> None:
    """Print error message in red to stderr."""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)


def _hash_param(ctx: click.Context, param: click.Parameter, value):
    """Parse one or more 0x-prefixed 32-byte hashes."""
    if value is None:
        return None
    values = value if isinstance(value, tuple) else (value,)

    parsed = []
    for item in values:
        try:
            raw = decode_hex(item)
        except ValueError as e:
            raise click.BadParameter(f"{item!r} is not hex: {e}") from e
        if len(raw) != HASH_SIZE:
            raise click.BadParameter(f"{item!r} is not a {HASH_SIZE}-byte hash")
        parsed.append(raw)

    return tuple(parsed) if isinstance(value, tuple) else parsed[0]


def _read_entries(entries: tuple[str, ...], entries_file) -> list[str]:
    """Positional entries followed by file entries (blank lines and # comments skipped)."""
    collected = list(entries)
    if entries_file is not None:
        try:
            for line in entries_file:
                line = line.strip()
                if line and not line.startswith("#"):
                    collected.append(line)
        except UnicodeDecodeError as e:
            print_error(f"{entries_file.name} is not UTF-8 text: {e.reason}")
            sys.exit(2)
    return collected


def entry_options(func):
    """Options shared by commands that build a tree."""
    func = click.option(
        "--unsorted-leaves",
        is_flag=True,
        default=False,
        help="Keep input order at the leaf level (legacy, order-dependent roots).",
    )(func)
    func = click.option(
        "--entries-file",
        type=click.File("r", encoding="utf-8"),
        help="File with one address:id entry per line.",
    )(func)
    func = click.argument("entries", nargs=-1)(func)
    return func


def _service(unsorted_leaves: bool) -> AllowListService:
    sort_leaves = False if unsorted_leaves else None
    return AllowListService(sort_leaves=sort_leaves)


def _fail(e: AllowListError) -> None:
    print_error(str(e))
    sys.exit(2)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help=f"Log level for stderr output (default {settings.LOG_LEVEL}).",
)
def cli(log_level: str | None):
    """Build Merkle allow-lists of address:id pairs."""
    try:
        setup_logging(log_level)
    except ValueError as e:
        print_error(str(e))
        sys.exit(2)


@cli.command()
@entry_options
def root(entries: tuple[str, ...], entries_file, unsorted_leaves: bool):
    """Print the Merkle root of ENTRIES."""
    try:
        result = _service(unsorted_leaves).root(_read_entries(entries, entries_file))
    except AllowListError as e:
        _fail(e)
    click.echo(encode_hex(result), nl=False)


@cli.command()
@entry_options
@click.option("--input", "target", required=True, help="Entry to prove, as address:id.")
def proof(entries: tuple[str, ...], entries_file, unsorted_leaves: bool, target: str):
    """Print the ABI-encoded bytes32[] proof of --input within ENTRIES."""
    try:
        result = _service(unsorted_leaves).proof(_read_entries(entries, entries_file), target)
    except AllowListError as e:
        _fail(e)
    click.echo(encode_proof_hex(result), nl=False)


@cli.command()
@entry_options
def proofs(entries: tuple[str, ...], entries_file, unsorted_leaves: bool):
    """Print root and every entry's proof as JSON."""
    try:
        result = _service(unsorted_leaves).distribution(_read_entries(entries, entries_file))
    except AllowListError as e:
        _fail(e)
    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.argument("entry")
def leaf(entry: str):
    """Print the leaf hash of ENTRY."""
    try:
        result = AllowListService().leaf(entry)
    except AllowListError as e:
        _fail(e)
    click.echo(encode_hex(result), nl=False)


@cli.command()
@click.argument("entry")
@click.option("--root", "root_hash", required=True, callback=_hash_param, help="Expected Merkle root.")
@click.option("--proof", "siblings", multiple=True, callback=_hash_param, help="Sibling hash, leaf-most first. Repeatable.")
def verify(entry: str, root_hash: bytes, siblings: tuple[bytes, ...]):
    """Check that ENTRY is committed to by --root."""
    try:
        valid = AllowListService().verify(root_hash, entry, siblings)
    except AllowListError as e:
        _fail(e)

    if valid:
        click.echo("valid")
        sys.exit(0)
    click.echo("invalid")
    sys.exit(1)


if __name__ == "__main__":
    cli()
