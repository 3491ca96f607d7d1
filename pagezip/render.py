"""Render a live page with Playwright to obtain the document to export."""

from __future__ import annotations

import logging
from typing import Optional, Tuple
from urllib.parse import urlsplit

from playwright.async_api import async_playwright

from .config import ExportConfig
from .models import AuthCookie

logger = logging.getLogger("pagezip")


def browser_cookie(cookie: AuthCookie, url: str) -> dict:
    """Translate an auth cookie into Playwright's ``add_cookies`` shape."""
    bound = cookie.rebind(url)
    return {
        "name": bound.name,
        "value": bound.value,
        "domain": bound.domain,
        "path": bound.path or "/",
    }


async def render_page(
    url: str,
    config: ExportConfig,
    cookie: Optional[AuthCookie] = None,
) -> Tuple[str, str]:
    """Navigate to ``url`` as the cookie's owner and return the HTML and final URL."""
    if not urlsplit(url).hostname:
        raise ValueError(f"Cannot render a relative URL: {url!r}")
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=True)
        try:
            context = await browser.new_context(user_agent=config.user_agent)
            if cookie is not None:
                await context.add_cookies([browser_cookie(cookie, url)])
            page = await context.new_page()
            page.set_default_navigation_timeout(config.navigation_timeout * 1000)
            logger.info("Loading %s", url)
            await page.goto(url, wait_until="networkidle")
            if config.wait_after_load:
                await page.wait_for_timeout(int(config.wait_after_load * 1000))
            html = await page.content()
            final_url = page.url
        finally:
            await browser.close()
    return html, final_url
