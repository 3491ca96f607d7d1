"""
Pytest configuration and fixtures for pagezip tests
"""

import time

import pytest

from pagezip.models import AuthCookie, ExportContext
from pagezip.storage import DirectoryStorage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
GIF_BYTES = b"GIF89a" + b"\x00" * 24


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code=200, content=b"", content_type="image/png"):
        self.status_code = status_code
        self.content = content
        self.headers = {"Content-Type": content_type} if content_type else {}


class FakeSession:
    """Records GET calls and replays canned responses keyed by URL"""

    def __init__(self, responses=None, delays=None):
        self.responses = dict(responses or {})
        self.delays = dict(delays or {})
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": dict(headers or {}), "timeout": timeout})
        if url in self.delays:
            time.sleep(self.delays[url])
        response = self.responses.get(url)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return FakeResponse(404, b"not found", "text/html")
        return response

    def close(self):
        self.closed = True


@pytest.fixture
def static_root(tmp_path):
    """Create a site directory with a few static files"""
    root = tmp_path / "site"
    (root / "img").mkdir(parents=True)
    (root / "css").mkdir()
    (root / "a.png").write_bytes(PNG_BYTES)
    (root / "b.png").write_bytes(PNG_BYTES + b"b")
    (root / "img" / "logo.gif").write_bytes(GIF_BYTES)
    (root / "css" / "site.css").write_text("body { color: black; }")
    return root


@pytest.fixture
def storage(static_root):
    return DirectoryStorage(static_root)


@pytest.fixture
def auth_cookie():
    return AuthCookie(name=".ASPXAUTH", value="token123", path="/")


@pytest.fixture
def context(auth_cookie):
    return ExportContext(
        root="https://app.example", user_agent="pytest-agent", cookie=auth_cookie
    )


@pytest.fixture
def fake_session():
    return FakeSession()
