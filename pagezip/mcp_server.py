"""MCP server exposing the page export as a tool."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import ExportConfig
from .exporter import export_document
from .models import AuthCookie, ExportContext
from .storage import DirectoryStorage

logger = logging.getLogger("pagezip.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="pagezip")


def _summarize(output: Path, result) -> str:
    lines = [
        f"Archive: {output} ({result.size} bytes)",
        f"Static assets: {len(result.static_names) - len(result.missing)}",
        f"Dynamic assets: {len(result.dynamic_names)}",
    ]
    if result.missing:
        lines.append("Missing static assets: " + ", ".join(result.missing))
    return "\n".join(lines)


@mcp.tool()
def export_html(
    html_path: str,
    root_url: str,
    static_root: str,
    output_path: str,
    cookie_name: Optional[str] = None,
    cookie_value: Optional[str] = None,
) -> str:
    """Bundle a saved HTML page and its referenced assets into a ZIP archive."""

    source = Path(html_path).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"HTML document does not exist: {source}")

    cookie = None
    if cookie_name:
        cookie = AuthCookie(name=cookie_name, value=cookie_value or "")

    config = ExportConfig()
    context = ExportContext.from_url(root_url, user_agent=config.user_agent, cookie=cookie)
    output = Path(output_path).expanduser().resolve()
    result = export_document(
        source.read_text(encoding="utf-8"),
        context,
        DirectoryStorage(Path(static_root).expanduser()),
        output,
        config,
    )
    return _summarize(output, result)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
