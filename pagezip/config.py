"""Configuration objects and constants for the exporter."""

from __future__ import annotations

from dataclasses import dataclass

__version__ = "0.3.0"

DEFAULT_USER_AGENT = f"pagezip/{__version__}"
DEFAULT_DOCUMENT_ENTRY = "index.html"
DEFAULT_ARCHIVE_FILENAME = "archive.zip"
COPY_BUFFER_SIZE = 32 * 1024
SPOOL_THRESHOLD = 8 * 1024 * 1024
REWRITE_MODES = ("attribute", "text")


@dataclass
class ExportConfig:
    """Settings that control fetching, rewriting and archive assembly."""

    request_timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    copy_buffer_size: int = COPY_BUFFER_SIZE
    compression_level: int = 9
    document_entry: str = DEFAULT_DOCUMENT_ENTRY
    rewrite_mode: str = "attribute"
    fetch_workers: int = 1
    spool_threshold: int = SPOOL_THRESHOLD
    navigation_timeout: float = 30.0
    wait_after_load: float = 1.0

    def __post_init__(self) -> None:
        if self.rewrite_mode not in REWRITE_MODES:
            raise ValueError(
                f"rewrite_mode must be one of {', '.join(REWRITE_MODES)} "
                f"(got {self.rewrite_mode!r})"
            )
        if self.fetch_workers < 1:
            raise ValueError("fetch_workers must be at least 1")
        if not 0 <= self.compression_level <= 9:
            raise ValueError("compression_level must be between 0 and 9")
        if self.copy_buffer_size <= 0:
            raise ValueError("copy_buffer_size must be positive")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
