"""
Attention heatmap for one URL.

One render session: base screenshot + element snapshot (read-only), then
score/collect/normalize in Python, then overlay injection + second screenshot
+ cleanup. Any failure yields HeatmapData.empty(); the heatmap never fails
the surrounding analysis.
"""

import logging

from pagelens.browser import get_renderer, render_session
from pagelens.collector import (
    ATTENTION_SELECTORS,
    ELEMENT_SNAPSHOT_JS,
    collect_points,
    normalize_points,
    parse_snapshot,
)
from pagelens.config import get_settings
from pagelens.image_utils import to_data_uri
from pagelens.models import HeatmapData, Viewport
from pagelens.overlay import capture_overlay

logger = logging.getLogger(__name__)


async def build_heatmap(session, settings, viewport: Viewport) -> HeatmapData:
    """Heatmap from an already navigated session. Raises on failure."""
    screenshot = await session.screenshot()

    raw = await session.evaluate(ELEMENT_SNAPSHOT_JS, ATTENTION_SELECTORS)
    elements, page_viewport, geometry = parse_snapshot(raw, viewport)
    points = collect_points(
        elements,
        page_viewport,
        geometry,
        max_points=settings.max_heatmap_points,
        min_value=settings.min_point_value,
        dedupe_distance=settings.dedupe_distance,
    )
    logger.info(f"[heatmap] {len(elements)} elements -> {len(points)} points "
                f"(page height {geometry.scroll_height:g}px)")

    overlay = await capture_overlay(session, points)

    encode = dict(
        compress=settings.compress_screenshots,
        max_width=settings.screenshot_max_width,
        quality=settings.screenshot_quality,
    )
    return HeatmapData(
        screenshot=to_data_uri(screenshot, **encode),
        heatmap_image=to_data_uri(overlay, **encode),
        heatmap_points=normalize_points(points, page_viewport, geometry),
    )


async def generate_heatmap(url: str, renderer=None, settings=None) -> HeatmapData:
    settings = settings or get_settings()
    renderer = renderer or get_renderer()
    viewport = Viewport(width=settings.viewport_width, height=settings.viewport_height)

    try:
        async with render_session(renderer, url, viewport, settings.page_load_timeout) as session:
            return await build_heatmap(session, settings, viewport)
    except Exception as e:
        logger.warning(f"[heatmap] Generation failed for {url}, returning empty heatmap: {e}")
        return HeatmapData.empty()
