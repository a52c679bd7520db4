import asyncio

import pytest

from pagelens.collector import ELEMENT_SNAPSHOT_JS
from pagelens.config import Settings
from pagelens.extractors import CONTENT_JS, SEO_JS, TECHNICAL_JS
from pagelens.overlay import INJECT_OVERLAY_JS, REMOVE_OVERLAY_JS

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def page_dom(h1_count=1, images=10, images_with_alt=5, title="A page title that is forty-five characters!!",
             meta_description=None, origin="https://example.com"):
    """Raw extractor results for a small fake page."""
    links = [f"{origin}/about", f"{origin}/contact", "https://other.org/x"]
    return {
        CONTENT_JS: {
            "wordCount": 420,
            "headings": {"h1": h1_count, "h2": 3, "h3": 0, "h4": 0, "h5": 0, "h6": 0},
            "imageCount": images,
            "imagesWithAlt": images_with_alt,
            "origin": origin,
            "links": links,
        },
        SEO_JS: {
            "title": title,
            "metaDescription": meta_description,
            "h1Count": h1_count,
            "imageCount": images,
            "imagesWithAlt": images_with_alt,
            "origin": origin,
            "links": links,
        },
        TECHNICAL_JS: {
            "globals": {"angular": False, "React": True, "Vue": False, "jQuery": False},
            "scriptSrcs": ["/static/bootstrap.min.js"],
            "resourceCount": 17,
            "imagesMissingAlt": images - images_with_alt,
            "h1Count": h1_count,
            "unlabelledRoles": [],
            "protocol": "https:",
            "metaHttpEquiv": [],
        },
        ELEMENT_SNAPSHOT_JS: {
            "viewport": {"width": 1920, "height": 1080},
            "documentScrollHeight": 3000,
            "bodyScrollHeight": 2900,
            "elements": [
                {"tag": "h1", "hasLabel": False, "rect": {"left": 100, "top": 80, "width": 800, "height": 120}},
                {"tag": "a", "hasLabel": True, "rect": {"left": 1500, "top": 40, "width": 120, "height": 40}},
                {"tag": "img", "hasLabel": True, "rect": {"left": 700, "top": 1800, "width": 500, "height": 400}},
            ],
        },
        INJECT_OVERLAY_JS: None,
        REMOVE_OVERLAY_JS: None,
    }


class FakeSession:
    """Stands in for browser.PageSession; records every call."""

    def __init__(self, results=None, goto_error=None, goto_delay=0.0, evaluate_error=None,
                 fail_on=None, screenshot_error=None, load_time_ms=1234, response_headers=None):
        self.results = results if results is not None else page_dom()
        self.goto_error = goto_error
        self.goto_delay = goto_delay
        self.evaluate_error = evaluate_error
        self.fail_on = fail_on
        self.screenshot_error = screenshot_error
        self.load_time_ms = load_time_ms
        self.response_headers = response_headers or {}
        self.goto_calls = []
        self.evaluated = []
        self.screenshots = 0
        self.close_calls = 0

    async def goto(self, url, timeout_ms):
        self.goto_calls.append((url, timeout_ms))
        if self.goto_delay:
            await asyncio.sleep(self.goto_delay)
        if self.goto_error:
            raise self.goto_error

    async def evaluate(self, script, arg=None):
        self.evaluated.append((script, arg))
        if self.evaluate_error and (self.fail_on is None or script == self.fail_on):
            raise self.evaluate_error
        return self.results.get(script)

    async def screenshot(self):
        self.screenshots += 1
        if self.screenshot_error:
            raise self.screenshot_error
        return PNG_BYTES

    async def close(self):
        self.close_calls += 1

    def scripts(self):
        return [script for script, _ in self.evaluated]


class FakeRenderer:
    """Hands out a fresh FakeSession per render session."""

    def __init__(self, **session_kwargs):
        self.session_kwargs = session_kwargs
        self.sessions = []

    async def new_session(self, viewport):
        session = FakeSession(**self.session_kwargs)
        self.sessions.append(session)
        return session


@pytest.fixture
def settings():
    return Settings(
        supabase_url="",
        supabase_key="",
        cache_ttl_seconds=0,
        page_load_timeout=2000,
        compress_screenshots=False,
    )


@pytest.fixture
def renderer():
    return FakeRenderer()
