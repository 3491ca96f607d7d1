"""Data models used throughout the export pipeline."""

from __future__ import annotations

import io
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from .config import DEFAULT_ARCHIVE_FILENAME, DEFAULT_USER_AGENT
from .utils import root_from_url


@dataclass
class DynamicAsset:
    """Query-bearing reference that must be fetched from the application."""

    path: str
    content: Optional[io.BytesIO] = None
    content_type: Optional[str] = None
    extension: Optional[str] = None
    normalized_name: Optional[str] = None

    @property
    def fetched(self) -> bool:
        return self.content is not None

    def open(self) -> io.BytesIO:
        """Return the buffered body rewound to its start."""
        if self.content is None:
            raise ValueError(f"Dynamic asset has not been fetched: {self.path}")
        self.content.seek(0)
        return self.content


@dataclass(frozen=True)
class AuthCookie:
    """Session cookie captured from the triggering request."""

    name: str
    value: str
    path: str = "/"
    domain: Optional[str] = None

    def rebind(self, url: str) -> "AuthCookie":
        """Copy of this cookie scoped to the host of ``url``."""
        return replace(self, domain=urlsplit(url).hostname)

    def applies_to(self, url: str) -> bool:
        request_path = urlsplit(url).path or "/"
        cookie_path = self.path or "/"
        if request_path == cookie_path or cookie_path == "/":
            return True
        if not cookie_path.endswith("/"):
            cookie_path += "/"
        return request_path.startswith(cookie_path)

    def header_value(self) -> str:
        return f"{self.name}={self.value}"


@dataclass
class ExportContext:
    """Application context of the request that triggered an export."""

    root: str
    user_agent: str = DEFAULT_USER_AGENT
    cookie: Optional[AuthCookie] = None

    @classmethod
    def from_url(
        cls,
        url: str,
        user_agent: Optional[str] = None,
        cookie: Optional[AuthCookie] = None,
    ) -> "ExportContext":
        """Derive the context from the absolute URL of the triggering request."""
        return cls(
            root=root_from_url(url),
            user_agent=user_agent or DEFAULT_USER_AGENT,
            cookie=cookie,
        )


@dataclass
class ExportResult:
    """Outcome of a completed export."""

    document: str
    static_names: List[Tuple[str, str]]
    dynamic_names: List[Tuple[str, str]]
    missing: List[str] = field(default_factory=list)
    size: int = 0


@dataclass
class ArchiveDownload:
    """Archive framed for delivery as an HTTP attachment."""

    body: bytes
    result: ExportResult
    filename: str = DEFAULT_ARCHIVE_FILENAME
    content_type: str = "application/zip"

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": self.content_type,
            "Content-Disposition": f"attachment; filename={self.filename}",
            "Content-Length": str(len(self.body)),
        }
