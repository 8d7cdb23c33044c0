"""Command line entry point for pager."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from pager import __version__
from pager.build import build_site
from pager.config import OUTPUT_FILENAME, PAGER_HOST, PAGER_PORT
from pager.exceptions import BuildError, PagerError
from pager.scaffold import new_site
from pager.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

_COMMANDS = {"new", "build", "serve"}
_TOP_LEVEL_FLAGS = {"-h", "--help", "--version"}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pager",
        description="Build a single static page from content.html and serve it with live reload.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    new_parser = subparsers.add_parser("new", help="Create a new site from the starter files")
    new_parser.add_argument("name", help="Directory to create")

    build_parser = subparsers.add_parser("build", help="Production build of index.html and index.md")
    build_parser.add_argument("directory", nargs="?", default=".", help="Content directory")

    serve_parser = subparsers.add_parser("serve", help="Build, watch and serve with live reload")
    serve_parser.add_argument("directory", nargs="?", default=".", help="Content directory")
    serve_parser.add_argument("-p", "--port", type=int, default=PAGER_PORT, help="First port to try")
    serve_parser.add_argument("--host", default=PAGER_HOST, help="Interface to bind")
    serve_parser.add_argument("--no-browser", action="store_true", help="Do not open a browser")
    return parser


def _normalize_argv(argv: Sequence[str]) -> list[str]:
    """Treat a bare invocation, or one starting with serve options, as ``serve``."""
    args = list(argv)
    for index, arg in enumerate(args):
        if arg in ("-v", "--verbose"):
            continue
        if arg in _COMMANDS or arg in _TOP_LEVEL_FLAGS:
            return args
        return args[:index] + ["serve"] + args[index:]
    return args + ["serve"]


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(_normalize_argv(sys.argv[1:] if argv is None else argv))
    configure_logging(verbose=args.verbose)

    try:
        if args.command == "new":
            new_site(Path(args.name))
        elif args.command == "build":
            build_site(Path(args.directory), production=True)
            logger.info("Built %s", OUTPUT_FILENAME)
        else:
            # Imported here so `new` and `build` do not load the server stack.
            from pager.server import run_server

            run_server(
                Path(args.directory),
                host=args.host,
                port=args.port,
                open_browser=not args.no_browser,
            )
    except BuildError as exc:
        logger.error("Build error: %s", exc)
        return 1
    except PagerError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
