"""Argument parser creation for the cardview CLI tool."""

import argparse

from ..search import SortOrder

_SORT_CHOICES = [order.value for order in SortOrder]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        description="cardview - browse a directory of markdown notes as cards",
        prog="cardview",
    )
    # Global options (keep sorted alphabetically by long option name)
    parser.add_argument(
        "-C",
        "--directory",
        default=".",
        help="Vault directory to browse (default: current directory).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log search progress and cache statistics to stderr.",
    )

    # Top-level subparsers
    top_level_subparsers = parser.add_subparsers(
        dest="command", help="Available commands", required=True
    )

    # =========================================================================
    # TOP-LEVEL SUBCOMMANDS (keep sorted alphabetically)
    # =========================================================================

    # --- search ---
    search_parser = top_level_subparsers.add_parser(
        "search",
        help="Print the notes matching a query",
    )
    search_parser.add_argument(
        "query",
        help="Query string (e.g., 'lorem -draft', 'tag:idea OR [status:done]').",
    )
    # Options for 'search' (keep sorted alphabetically by long option name)
    search_parser.add_argument(
        "--case-sensitive",
        action="store_true",
        default=None,
        help="Match plain terms case-sensitively (default: from config).",
    )
    search_parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=None,
        help="Print at most this many notes (default: all).",
    )
    search_parser.add_argument(
        "-s",
        "--sort",
        choices=_SORT_CHOICES,
        default=None,
        help="Sort order (default: from config, else modified-desc).",
    )

    # --- tags ---
    tags_parser = top_level_subparsers.add_parser(
        "tags",
        help="Print tags by number of notes that use them",
    )
    # Options for 'tags' (keep sorted alphabetically by long option name)
    tags_parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=None,
        help="Print at most this many tags (default: all).",
    )

    # --- ui ---
    ui_parser = top_level_subparsers.add_parser(
        "ui",
        help="Interactively browse notes matching a query",
    )
    ui_parser.add_argument(
        "query",
        nargs="?",
        default="",
        help="Initial query string (default: empty, which matches everything).",
    )
    # Options for 'ui' (keep sorted alphabetically by long option name)
    ui_parser.add_argument(
        "-r",
        "--refresh-interval",
        type=int,
        default=None,
        help="Rescan interval in seconds (default: from config, 0 to disable).",
    )

    return parser
