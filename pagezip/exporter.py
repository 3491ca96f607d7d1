"""High-level orchestration: scan, fetch, rewrite, assemble."""

from __future__ import annotations

import io
import logging
import time
from typing import Optional

import requests

from .archive import Destination, assemble_archive
from .assets import Assets
from .config import ExportConfig
from .fetcher import fetch_dynamic_assets
from .models import ArchiveDownload, ExportContext, ExportResult
from .rewriter import rewrite_document
from .scanner import scan_document
from .storage import StorageResolver

logger = logging.getLogger("pagezip")


def export_document(
    html: str,
    context: ExportContext,
    storage: StorageResolver,
    destination: Destination,
    config: Optional[ExportConfig] = None,
    session: Optional[requests.Session] = None,
) -> ExportResult:
    """Bundle ``html`` and every asset it references into a ZIP at ``destination``.

    A failed dynamic fetch raises before anything is written to
    ``destination``.
    """
    config = config or ExportConfig()
    start = time.perf_counter()
    assets = Assets()

    scan_document(html, assets)
    fetch_dynamic_assets(assets.dynamic, context, config, session)
    document = rewrite_document(html, assets, config.rewrite_mode)
    report = assemble_archive(document, assets, storage, destination, config)

    logger.info(
        "Exported %d static and %d dynamic asset(s) in %.2fs",
        len(assets.static) - len(report.missing),
        len(assets.dynamic),
        time.perf_counter() - start,
    )
    return ExportResult(
        document=document,
        static_names=list(assets.static.items()),
        dynamic_names=assets.dynamic_names(),
        missing=report.missing,
        size=report.size,
    )


def export_download(
    html: str,
    context: ExportContext,
    storage: StorageResolver,
    config: Optional[ExportConfig] = None,
    session: Optional[requests.Session] = None,
) -> ArchiveDownload:
    """Export into memory and frame the archive as an ``application/zip`` attachment."""
    body = io.BytesIO()
    result = export_document(html, context, storage, body, config, session)
    return ArchiveDownload(body=body.getvalue(), result=result)
