# src/main.py — v1
"""CLI entry point — serve, fingerprint, purge commands.

Usage:
    transformcache serve <source_root> [options]
    transformcache fingerprint <file>
    transformcache purge <cache_dir>
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from transformcache.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="transformcache",
        description=f"transformcache v{__version__} - caching transform server",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- serve ---
    p_serve = subparsers.add_parser(
        "serve", help="Serve a source directory through the cache",
    )
    p_serve.add_argument("source_root", type=Path, help="Directory of source files")
    p_serve.add_argument(
        "--cache", default=None,
        help="'memory' or a cache directory (default: from settings)",
    )
    p_serve.add_argument(
        "--prefix", default=None,
        help="URL prefix the sources are served under (default: /)",
    )
    p_serve.add_argument(
        "--exclude", action="append", default=[],
        help="Glob of paths served untransformed (repeatable)",
    )
    p_serve.add_argument(
        "--console-errors", action="store_true",
        help="Report transform errors as console.error scripts instead of HTTP 500",
    )
    p_serve.add_argument("--host", default=None, help="Bind address")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port")
    p_serve.set_defaults(func=_cmd_serve)

    # --- fingerprint ---
    p_fp = subparsers.add_parser(
        "fingerprint", help="Print the cache fingerprint of a file",
    )
    p_fp.add_argument("file", type=Path, help="Source file")
    p_fp.set_defaults(func=_cmd_fingerprint)

    # --- purge ---
    p_purge = subparsers.add_parser(
        "purge", help="Delete cached artifacts from a cache directory",
    )
    p_purge.add_argument("cache_dir", type=Path, help="Cache directory")
    p_purge.add_argument(
        "--extension", default=".js",
        help="Extension of cached artifacts (default: .js)",
    )
    p_purge.set_defaults(func=_cmd_purge)

    return parser


def _serve_overrides(args: argparse.Namespace) -> dict[str, object]:
    """Settings overrides from serve flags; unset flags keep .env values."""
    overrides: dict[str, object] = {"source_root": args.source_root}
    if args.cache is not None:
        overrides["cache_path"] = args.cache
    if args.prefix is not None:
        overrides["url_prefix"] = args.prefix
    if args.exclude:
        overrides["exclude_patterns"] = ",".join(args.exclude)
    if args.console_errors:
        overrides["error_mode"] = "console"
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.verbose:
        overrides["debug"] = True
    return overrides


def _cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP server."""
    import uvicorn

    from transformcache.app import create_app
    from transformcache.config.settings import load_settings
    from transformcache.logging.logger import setup_logging_from_settings

    if not args.source_root.is_dir():
        logger.error("Not a directory: %s", args.source_root)
        return 1

    settings = load_settings(**_serve_overrides(args))
    setup_logging_from_settings(settings)
    app = create_app(settings)

    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")
    return 0


def _cmd_fingerprint(args: argparse.Namespace) -> int:
    """Print the fingerprint the middleware would compute for a file."""
    from transformcache.cache.fingerprint import stat_fingerprint

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1

    print(stat_fingerprint(file_path.resolve()))
    return 0


def _cmd_purge(args: argparse.Namespace) -> int:
    """Remove every cached artifact from a cache directory."""
    from transformcache.cache.disk_store import DiskArtifactStore

    cache_dir: Path = args.cache_dir
    if not cache_dir.is_dir():
        logger.error("Not a directory: %s", cache_dir)
        return 1

    store = DiskArtifactStore(cache_root=cache_dir, extension=args.extension)
    removed = asyncio.run(store.clear())
    print(f"Removed {removed} cached artifact(s) from {store.root}")
    return 0


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
