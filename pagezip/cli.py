"""Command-line entry point for exporting pages as ZIP archives."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .config import DEFAULT_ARCHIVE_FILENAME, DEFAULT_USER_AGENT, REWRITE_MODES, ExportConfig
from .errors import ExportError
from .exporter import export_document
from .models import AuthCookie, ExportContext
from .render import render_page
from .storage import DirectoryStorage

logger = logging.getLogger("pagezip.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or (first.startswith("-") and first != "-"):
        return argv
    return ("export", *argv)


def _parse_cookie(value: str) -> tuple:
    name, sep, cookie_value = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {value!r}")
    return name.strip(), cookie_value


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--static-root",
        default=".",
        type=Path,
        help="Directory that application paths such as /img/a.png resolve under",
    )
    parser.add_argument(
        "--base",
        default="/",
        help="Virtual directory of the page, used for relative static paths",
    )
    parser.add_argument(
        "--output",
        default=DEFAULT_ARCHIVE_FILENAME,
        type=Path,
        help="Where to write the ZIP archive",
    )
    parser.add_argument(
        "--cookie",
        type=_parse_cookie,
        default=None,
        help="Session cookie to forward to dynamic fetches, as NAME=VALUE",
    )
    parser.add_argument(
        "--cookie-path",
        default="/",
        help="Path the session cookie is scoped to",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent sent with dynamic fetches",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Per-request timeout in seconds for dynamic fetches",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of dynamic fetches to run concurrently",
    )
    parser.add_argument(
        "--rewrite-mode",
        choices=REWRITE_MODES,
        default="attribute",
        help="Rewrite only href/src values (attribute) or every literal occurrence (text)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Bundle a rendered HTML page and the assets it references into a ZIP archive.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser(
        "export", help="Export an HTML file (or '-' for stdin)"
    )
    export_parser.add_argument("input", help="HTML document to export")
    export_parser.add_argument(
        "--root",
        required=True,
        help="Application root the page was served from, e.g. https://intranet:8443",
    )
    _add_common_arguments(export_parser)

    render_parser = subparsers.add_parser(
        "render", help="Render a URL with Playwright, then export it"
    )
    render_parser.add_argument("url", help="Page to render")
    render_parser.add_argument(
        "--root",
        default=None,
        help="Override the application root (defaults to the rendered page's origin)",
    )
    render_parser.add_argument(
        "--wait",
        type=float,
        default=1.0,
        help="Seconds to wait after network idle before reading HTML",
    )
    render_parser.add_argument(
        "--navigation-timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds",
    )
    _add_common_arguments(render_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> ExportConfig:
    config = ExportConfig(
        request_timeout=args.timeout,
        user_agent=args.user_agent,
        rewrite_mode=args.rewrite_mode,
        fetch_workers=args.workers,
    )
    if args.command == "render":
        config.navigation_timeout = args.navigation_timeout
        config.wait_after_load = args.wait
    return config


def _build_cookie(args: argparse.Namespace) -> Optional[AuthCookie]:
    if args.cookie is None:
        return None
    name, value = args.cookie
    return AuthCookie(name=name, value=value, path=args.cookie_path)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _run(args: argparse.Namespace) -> None:
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = _build_config(args)
    cookie = _build_cookie(args)

    if args.command == "render":
        html, final_url = asyncio.run(render_page(args.url, config, cookie))
        root_url = args.root or final_url
    else:
        html = _read_input(args.input)
        root_url = args.root

    context = ExportContext.from_url(root_url, user_agent=config.user_agent, cookie=cookie)
    storage = DirectoryStorage(args.static_root, base=args.base)
    output = Path(args.output).resolve()

    overall_start = time.perf_counter()
    result = export_document(html, context, storage, output, config)
    total_elapsed = time.perf_counter() - overall_start

    logger.info(
        "Wrote %s in %.2fs (%d static, %d dynamic, %d missing)",
        output,
        total_elapsed,
        len(result.static_names) - len(result.missing),
        len(result.dynamic_names),
        len(result.missing),
    )
    if args.verbose:
        for path, name in result.static_names + result.dynamic_names:
            logger.debug("%s -> %s", path, name)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        _run(args)
    except (ExportError, ValueError, OSError) as exc:
        logger.error("Export failed: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
