"""Main entry point for the cardview CLI tool."""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import NoReturn

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import CardViewConfig, load_config
from ..documents import Document, DocumentReadError
from ..search import SearchSession
from ..vault import Vault, VaultError, rank_tags
from .parser import create_parser

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=verbose)],
        force=True,
    )


def _print_error(message: str) -> None:
    error_console.print(f"[bold red]Error:[/bold red] {message}")


def _format_time(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M")


def _scan(vault: Vault) -> list[Document] | None:
    try:
        return vault.scan()
    except VaultError as e:
        _print_error(str(e))
        return None


def handle_search_command(args: argparse.Namespace, config: CardViewConfig) -> int:
    """Handle the 'search' command.

    Returns:
        The process exit code.
    """
    if args.sort is not None:
        config.sort = args.sort
    if args.case_sensitive is not None:
        config.case_sensitive = args.case_sensitive

    vault = Vault(args.directory, config.extensions)
    documents = _scan(vault)
    if documents is None:
        return 1

    session = SearchSession(vault, config)
    session.set_query(args.query)
    session.set_documents(documents)
    asyncio.run(session.evaluate())

    matches = session.matching_documents()
    shown = matches if args.limit is None else matches[: max(args.limit, 0)]

    table = Table(show_header=True, header_style="bold")
    table.add_column("Note", style="cyan", no_wrap=True)
    table.add_column("Modified", style="dim")
    for document in shown:
        table.add_row(document.path, _format_time(document.mtime))

    console.print(table)
    console.print(
        f"[dim]{len(matches)} of {len(session.documents)} notes matched[/dim]"
    )
    return 0


async def _read_tag_sets(vault: Vault, documents: list[Document]) -> list[frozenset[str]]:
    tag_sets: list[frozenset[str]] = []
    for document in documents:
        try:
            contents = await vault.read(document)
        except DocumentReadError as e:
            logger.warning("Skipping %s", e)
            continue
        tag_sets.append(contents.tags)
    return tag_sets


def handle_tags_command(args: argparse.Namespace, config: CardViewConfig) -> int:
    """Handle the 'tags' command.

    Returns:
        The process exit code.
    """
    vault = Vault(args.directory, config.extensions)
    documents = _scan(vault)
    if documents is None:
        return 1

    ranked = rank_tags(asyncio.run(_read_tag_sets(vault, documents)))
    if args.limit is not None:
        ranked = ranked[: max(args.limit, 0)]

    table = Table(show_header=True, header_style="bold")
    table.add_column("Tag", style="green", no_wrap=True)
    table.add_column("Notes", justify="right")
    for tag, count in ranked:
        table.add_row(f"#{tag}", str(count))

    console.print(table)
    return 0


def handle_ui_command(args: argparse.Namespace, config: CardViewConfig) -> int:
    """Handle the 'ui' command.

    Returns:
        The process exit code.
    """
    from ..tui import CardViewApp

    if args.refresh_interval is not None:
        config.refresh_interval = args.refresh_interval

    vault = Vault(args.directory, config.extensions)
    if _scan(vault) is None:
        return 1

    app = CardViewApp(vault, config=config, query=args.query)
    app.run()
    return 0


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the cardview CLI tool."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # The TUI owns the terminal, so only log for the plain-output commands
    if args.command != "ui":
        _configure_logging(args.verbose)

    config = load_config()

    # =========================================================================
    # COMMAND HANDLERS (keep sorted alphabetically to match parser order)
    # =========================================================================

    # --- search ---
    if args.command == "search":
        sys.exit(handle_search_command(args, config))

    # --- tags ---
    if args.command == "tags":
        sys.exit(handle_tags_command(args, config))

    # --- ui ---
    if args.command == "ui":
        sys.exit(handle_ui_command(args, config))

    print(f"Unknown command: {args.command}")
    sys.exit(1)
