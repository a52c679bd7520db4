"""
Headless browser access.

PlaywrightRenderer hands out PageSession objects (one browser per session,
nothing shared between analyses). render_session() is the only way the
pipelines open a page: it navigates under a hard timeout and closes the
session exactly once on every exit path.

Anything with the same new_session()/goto()/evaluate()/screenshot()/close()
shape can stand in for the renderer (tests use a fake).
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from playwright.async_api import async_playwright

from pagelens.config import get_settings
from pagelens.errors import NavigationTimeoutError, TIMEOUT_MESSAGE, classify_navigation_error
from pagelens.models import Viewport

logger = logging.getLogger(__name__)

_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class PageSession:
    """One Chromium browser + page. Close it exactly once."""

    def __init__(self, playwright, browser, page):
        self._playwright = playwright
        self._browser = browser
        self.page = page
        self.response_headers: dict[str, str] = {}
        self.load_time_ms = 0
        self._closed = False

    async def goto(self, url: str, timeout_ms: int) -> None:
        start = time.monotonic()
        response = await self.page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        self.load_time_ms = int((time.monotonic() - start) * 1000)
        if response is not None:
            self.response_headers = {k.lower(): v for k, v in (await response.all_headers()).items()}

    async def evaluate(self, script: str, arg=None):
        if arg is None:
            return await self.page.evaluate(script)
        return await self.page.evaluate(script, arg)

    async def screenshot(self) -> bytes:
        return await self.page.screenshot(full_page=True, type="png")

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


class PlaywrightRenderer:
    def __init__(self, user_agent: str | None = None):
        self.user_agent = user_agent

    async def new_session(self, viewport: Viewport) -> PageSession:
        p = await async_playwright().start()
        try:
            browser = await p.chromium.launch(headless=True, args=_LAUNCH_ARGS)
            context = await browser.new_context(
                viewport={"width": viewport.width, "height": viewport.height},
                user_agent=self.user_agent or get_settings().user_agent,
            )
            page = await context.new_page()
        except BaseException:
            await p.stop()
            raise
        return PageSession(p, browser, page)


_default_renderer: PlaywrightRenderer | None = None


def get_renderer() -> PlaywrightRenderer:
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = PlaywrightRenderer()
    return _default_renderer


@asynccontextmanager
async def render_session(renderer, url: str, viewport: Viewport, timeout_ms: int,
                         grace_seconds: float = 5):
    """
    Open `url` in a fresh session and yield it. Navigation errors are
    re-raised as AnalysisError subclasses; close() always runs.
    """
    session = await renderer.new_session(viewport)
    try:
        try:
            # Outer bound in case the browser itself stops responding.
            await asyncio.wait_for(session.goto(url, timeout_ms), timeout=timeout_ms / 1000 + grace_seconds)
        except asyncio.TimeoutError:
            raise NavigationTimeoutError(TIMEOUT_MESSAGE)
        except Exception as e:
            logger.warning(f"[render] Navigation to {url} failed: {e}")
            raise classify_navigation_error(e) from e
        yield session
    finally:
        try:
            await session.close()
        except Exception as e:
            logger.warning(f"[render] Closing session for {url} failed: {e}")
