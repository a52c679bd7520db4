"""
Full DOM/SEO/technical analysis of one URL in its own render session.

Failures here are fatal to the request: they surface as AnalysisError
subclasses carrying a user-facing message.
"""

import logging

from pagelens.browser import get_renderer, render_session
from pagelens.config import get_settings
from pagelens.errors import AnalysisError, GENERIC_MESSAGE, RenderError
from pagelens.extractors import extract_all
from pagelens.models import PageAnalysis, Viewport

logger = logging.getLogger(__name__)


async def analyze_url(url: str, renderer=None, settings=None) -> PageAnalysis:
    settings = settings or get_settings()
    renderer = renderer or get_renderer()
    viewport = Viewport(width=settings.viewport_width, height=settings.viewport_height)

    try:
        async with render_session(renderer, url, viewport, settings.page_load_timeout) as session:
            load_time = getattr(session, "load_time_ms", 0)
            content, seo, technical = await extract_all(session, load_time)
    except AnalysisError:
        raise
    except Exception as e:
        logger.error(f"[analyze] Extraction failed for {url}: {e}")
        raise RenderError(GENERIC_MESSAGE) from e

    logger.info(f"[analyze] {url}: {content.word_count} words, {load_time}ms load, "
                f"{len(technical.technologies)} technologies")
    return PageAnalysis(content=content, seo=seo, technical=technical)
