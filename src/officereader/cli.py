"""CLI entry point for Office Reader."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Literal, Optional, cast

from officereader.backends import all_backends
from officereader.config import ReaderSettings, get_settings
from officereader.models import DocumentKind
from officereader.reader import DocumentReader

logger = logging.getLogger(__name__)


def configure_logging(settings: ReaderSettings) -> None:
    """Log to stderr; stdout carries the MCP stdio channel and command output."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        stream=sys.stderr,
    )


def serve(settings: ReaderSettings, transport: str = "stdio") -> None:
    """Start the MCP server.

    Args:
        settings: Reader settings
        transport: Transport protocol (stdio, sse or streamable-http)
    """
    # Import here to avoid loading MCP unless needed
    from officereader.server import create_mcp_server

    if settings.project_root is not None:
        logger.info(f"Resolving relative paths against {settings.project_root}")
    logger.info(f"Serving office reader via {transport}")
    mcp = create_mcp_server(settings=settings)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def read(reader: DocumentReader, path: str, pages: Optional[str] = None) -> None:
    """Print a document's text, or only the selected pages."""
    result = reader.read_full(path, pages)
    if result.error is not None:
        logger.error(result.error)
        sys.exit(1)
    logger.info(
        f"{result.file_path}: pages {result.returned_pages} of {result.total_pages} "
        f"via {result.backend}"
    )
    print(result.content)


def read_range(reader: DocumentReader, path: str, offset: int, max_size: Optional[int]) -> None:
    """Print a character range of a document."""
    result = reader.read_range(path, offset, max_size)
    if result.error is not None:
        logger.error(result.error)
        sys.exit(1)
    logger.info(
        f"{result.file_path}: {result.offset}-{result.offset + result.returned_length} "
        f"of {result.total_length} (more: {result.has_more})"
    )
    print(result.content, end="")


def stream(
    reader: DocumentReader,
    path: str,
    chunk_size: Optional[int],
    word_boundary: Optional[bool],
) -> None:
    """Print a document chunk by chunk, logging progress to stderr."""
    for record in reader.iter_stream(path, chunk_size=chunk_size, word_boundary=word_boundary):
        if record.error is not None:
            logger.error(f"{record.error_kind}: {record.error}")
            sys.exit(1)
        print(record.chunk, end="", flush=True)
        logger.info(
            f"  {record.current_position}/{record.total_length} ({record.progress:.1f}%)"
        )
    print()


def info(reader: DocumentReader, path: str) -> None:
    """Show the size of a document without printing its text."""
    result = reader.probe(path)
    if result.error is not None:
        logger.error(result.error)
        sys.exit(1)

    print(f"Document: {result.file_path}")
    print(f"  Backend: {result.backend}")
    print(f"  Pages: {result.total_pages}")
    print(f"  Characters: {result.total_length}")


def backends(settings: ReaderSettings, kind: Optional[str] = None) -> None:
    """List extraction backends in priority order."""
    disabled = set(settings.disabled_backend_names)
    for descriptor in all_backends():
        if kind is not None and descriptor.kind.value != kind:
            continue
        if descriptor.name in disabled:
            state = "disabled"
        elif descriptor.available:
            state = "available"
        else:
            state = "missing"
        print(
            f"{descriptor.kind.value:<5} {descriptor.tier.name:<14} "
            f"{descriptor.name:<12} {state:<10} {descriptor.description}"
        )


def deck(settings: ReaderSettings) -> None:
    """Launch the Flight Deck TUI for interactive streaming."""
    from officereader.flight_deck import main as flight_deck_main

    flight_deck_main(settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="office-reader",
        description="Office Reader - cached text extraction for PDF and Office documents",
    )
    parser.add_argument(
        "--project-root",
        help="Directory relative document paths are resolved against",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the MCP server")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    # read command
    read_parser = subparsers.add_parser("read", help="Print a document's text")
    read_parser.add_argument("path", help="Document path")
    read_parser.add_argument(
        "--pages",
        help='Pages, sheets or slides to print, e.g. "1,3,5-7" (default: all)',
    )

    # range command
    range_parser = subparsers.add_parser("range", help="Print a character range")
    range_parser.add_argument("path", help="Document path")
    range_parser.add_argument("--offset", type=int, default=0, help="First character")
    range_parser.add_argument(
        "--max-size",
        type=int,
        help="Maximum characters to print (default: from settings)",
    )

    # stream command
    stream_parser = subparsers.add_parser("stream", help="Print a document in chunks")
    stream_parser.add_argument("path", help="Document path")
    stream_parser.add_argument(
        "--chunk-size",
        type=int,
        help="Characters per chunk (default: from settings)",
    )
    stream_parser.add_argument(
        "--no-word-boundary",
        action="store_true",
        help="Cut chunks exactly at the chunk size",
    )

    # info command
    info_parser = subparsers.add_parser("info", help="Show document size")
    info_parser.add_argument("path", help="Document path")

    # backends command
    backends_parser = subparsers.add_parser("backends", help="List extraction backends")
    backends_parser.add_argument(
        "--kind",
        choices=[kind.value for kind in DocumentKind],
        help="Only show backends for one document kind",
    )

    # deck command
    subparsers.add_parser("deck", help="Launch Flight Deck TUI")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.project_root:
        settings = settings.model_copy(update={"project_root": Path(args.project_root)})
    configure_logging(settings)

    if args.command == "serve":
        serve(settings, args.transport)
    elif args.command == "backends":
        backends(settings, args.kind)
    elif args.command == "deck":
        deck(settings)
    else:
        reader = DocumentReader(settings=settings)
        if args.command == "read":
            read(reader, args.path, args.pages)
        elif args.command == "range":
            read_range(reader, args.path, args.offset, args.max_size)
        elif args.command == "stream":
            stream(reader, args.path, args.chunk_size, False if args.no_word_boundary else None)
        elif args.command == "info":
            info(reader, args.path)


if __name__ == "__main__":
    main()
