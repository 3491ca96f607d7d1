"""Authenticated retrieval of query-bearing assets."""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlsplit

import requests
from filetype import guess

from .config import ExportConfig
from .errors import DynamicFetchError
from .models import DynamicAsset, ExportContext
from .utils import root_from_url

logger = logging.getLogger("pagezip")

CONTENT_TYPE_EXTENSIONS: Mapping[str, str] = MappingProxyType(
    {
        "image/png": "png",
        "image/gif": "gif",
        "text/html": "html",
    }
)
FALLBACK_EXTENSION = "xxx"


def extension_for_content_type(content_type: Optional[str]) -> str:
    """Map a declared Content-Type onto an archive extension (``xxx`` if unknown)."""
    if not content_type:
        return FALLBACK_EXTENSION
    mime = content_type.split(";", 1)[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(mime, FALLBACK_EXTENSION)


def dynamic_name(index: int, extension: str) -> str:
    return f"dyn_{index:03d}.{extension}"


def _same_origin(url: str, root: str) -> bool:
    try:
        return root_from_url(url) == root_from_url(root)
    except ValueError:
        return False


def build_request(asset: DynamicAsset, context: ExportContext) -> Tuple[str, Dict[str, str]]:
    """Return the absolute URL and headers used to fetch ``asset``.

    Paths are appended to the application root. Absolute references are
    fetched as-is, and only carry the session cookie when they point back at
    the application root.
    """
    root = context.root.rstrip("/")
    path = asset.path
    if urlsplit(path).scheme:
        url = path
    elif path.startswith("//"):
        url = f"{urlsplit(root).scheme}:{path}"
    else:
        url = root + (path if path.startswith("/") else f"/{path}")
    headers = {"User-Agent": context.user_agent}
    if context.cookie is not None and _same_origin(url, root):
        cookie = context.cookie.rebind(url)
        if cookie.applies_to(url):
            headers["Cookie"] = cookie.header_value()
        else:
            logger.debug("Cookie %s is not scoped to %s", cookie.name, url)
    return url, headers


def _download(
    session: requests.Session,
    asset: DynamicAsset,
    context: ExportContext,
    timeout: float,
) -> Tuple[Optional[str], bytes]:
    url, headers = build_request(asset, context)
    logger.info("Fetching dynamic asset %s", url)
    try:
        resp = session.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise DynamicFetchError(asset.path, url, str(exc)) from exc

    if not 200 <= resp.status_code < 300:
        raise DynamicFetchError(
            asset.path, url, "Unexpected response status", status_code=resp.status_code
        )
    content_type = resp.headers.get("Content-Type")
    if not content_type:
        raise DynamicFetchError(asset.path, url, "Response has no Content-Type header")
    try:
        data = resp.content
    except requests.RequestException as exc:
        raise DynamicFetchError(asset.path, url, str(exc)) from exc
    return content_type, data


def _store(asset: DynamicAsset, index: int, content_type: str, data: bytes) -> None:
    extension = extension_for_content_type(content_type)
    if extension == FALLBACK_EXTENSION:
        kind = guess(data)
        logger.warning(
            "Unmapped content type %r for %s (body looks like %s); using .%s",
            content_type,
            asset.path,
            kind.mime if kind else "unknown data",
            FALLBACK_EXTENSION,
        )
    asset.content_type = content_type
    asset.extension = extension
    asset.content = io.BytesIO(data)
    asset.normalized_name = dynamic_name(index, extension)
    logger.debug(
        "Stored %s as %s (%d bytes)", asset.path, asset.normalized_name, len(data)
    )


def fetch_dynamic_assets(
    assets: Sequence[DynamicAsset],
    context: ExportContext,
    config: Optional[ExportConfig] = None,
    session: Optional[requests.Session] = None,
) -> List[DynamicAsset]:
    """Fetch every dynamic asset and assign ``dyn_NNN`` names in collection order.

    Any failure raises :class:`DynamicFetchError` and leaves the export
    without a partial result. With ``fetch_workers > 1`` the requests run in
    a thread pool, but names still follow the order of ``assets``.
    """
    config = config or ExportConfig()
    assets = list(assets)
    if not assets:
        return assets

    owns_session = session is None
    if session is None:
        session = requests.Session()
    try:
        if config.fetch_workers == 1 or len(assets) == 1:
            for index, asset in enumerate(assets):
                content_type, data = _download(
                    session, asset, context, config.request_timeout
                )
                _store(asset, index, content_type, data)
        else:
            workers = min(config.fetch_workers, len(assets))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(
                        _download, session, asset, context, config.request_timeout
                    )
                    for asset in assets
                ]
                try:
                    responses = [future.result() for future in futures]
                except DynamicFetchError:
                    for future in futures:
                        future.cancel()
                    raise
            for index, (asset, (content_type, data)) in enumerate(zip(assets, responses)):
                _store(asset, index, content_type, data)
    finally:
        if owns_session:
            session.close()

    logger.info("Fetched %d dynamic asset(s)", len(assets))
    return assets
