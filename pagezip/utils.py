"""Utility helpers for path and origin handling."""

from __future__ import annotations

import posixpath
from typing import Optional
from urllib.parse import urlsplit

DEFAULT_PORTS = {"http": 80, "https": 443}


def extension_key(path: str) -> str:
    """Return the lower-cased extension of the last path segment ("" when absent)."""
    segment = path.replace("\\", "/").rsplit("/", 1)[-1]
    _, ext = posixpath.splitext(segment)
    return ext[1:].lower()


def application_root(scheme: str, host: str, port: Optional[int] = None) -> str:
    """Build ``scheme://host[:port]``, keeping the port only when it is not the scheme's default."""
    scheme = scheme.lower()
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    root = f"{scheme}://{host}"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        root += f":{port}"
    return root


def root_from_url(url: str) -> str:
    """Reduce a request URL to the application root it was served from."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"Not an absolute URL: {url!r}")
    return application_root(parts.scheme, parts.hostname, parts.port)
