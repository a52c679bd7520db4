"""
Heat overlay rendered into the live page for a second screenshot.

Each point becomes an absolutely positioned radial gradient blended with
`multiply`, so overlapping points darken. Points are drawn in insertion
order. The injected <style> and divs are always removed afterwards so the
page is left as it was found.
"""

import logging
from contextlib import asynccontextmanager

from pagelens.models import AttentionPoint

logger = logging.getLogger(__name__)

STYLE_ID = "heatmap-overlay-styles"
POINT_CLASS = "heatmap-point"

BASE_RADIUS = 60
RADIUS_SCALE = 40

BASE_CSS = f"""
.{POINT_CLASS} {{
  position: absolute;
  border-radius: 50%;
  pointer-events: none;
  z-index: 999999;
  mix-blend-mode: multiply;
}}
"""

INJECT_OVERLAY_JS = '''({ styleId, pointClass, css, count }) => {
    const style = document.createElement('style');
    style.id = styleId;
    style.textContent = css;
    document.head.appendChild(style);
    for (let i = 0; i < count; i++) {
        const div = document.createElement('div');
        div.className = `${pointClass} ${pointClass}-${i}`;
        document.body.appendChild(div);
    }
}'''

REMOVE_OVERLAY_JS = '''({ styleId, pointClass }) => {
    const style = document.getElementById(styleId);
    if (style) style.remove();
    document.querySelectorAll('.' + pointClass).forEach(el => el.remove());
}'''


def intensity_of(value: float) -> float:
    return max(0.1, min(1.0, value))


def radius_for(value: float) -> float:
    return BASE_RADIUS + intensity_of(value) * RADIUS_SCALE


def gradient_for(value: float) -> str:
    """Red above 0.7, orange/amber above 0.4, blue/teal otherwise."""
    i = intensity_of(value)
    if i > 0.7:
        stops = ((255, 0, 0, i * 0.4), (255, 100, 0, i * 0.2), (255, 200, 0, 0))
    elif i > 0.4:
        stops = ((255, 150, 0, i * 0.3), (255, 200, 0, i * 0.15), (255, 255, 0, 0))
    else:
        stops = ((0, 150, 255, i * 0.25), (0, 200, 150, i * 0.1), (0, 255, 100, 0))
    (r0, g0, b0, a0), (r1, g1, b1, a1), (r2, g2, b2, a2) = stops
    return (
        f"radial-gradient(circle, rgba({r0}, {g0}, {b0}, {a0:g}) 0%, "
        f"rgba({r1}, {g1}, {b1}, {a1:g}) 50%, "
        f"rgba({r2}, {g2}, {b2}, {a2:g}) 100%)"
    )


def build_overlay_css(points: list[AttentionPoint]) -> str:
    css = BASE_CSS
    for index, point in enumerate(points):
        radius = radius_for(point.value)
        css += f"""
.{POINT_CLASS}-{index} {{
  left: {point.x - radius:g}px;
  top: {point.y - radius:g}px;
  width: {radius * 2:g}px;
  height: {radius * 2:g}px;
  background: {gradient_for(point.value)};
}}
"""
    return css


@asynccontextmanager
async def overlay_injected(session, points: list[AttentionPoint]):
    """Inject the overlay for the duration of the block; removal runs on every path."""
    try:
        await session.evaluate(INJECT_OVERLAY_JS, {
            "styleId": STYLE_ID,
            "pointClass": POINT_CLASS,
            "css": build_overlay_css(points),
            "count": len(points),
        })
        yield
    finally:
        try:
            await session.evaluate(REMOVE_OVERLAY_JS, {"styleId": STYLE_ID, "pointClass": POINT_CLASS})
        except Exception as e:
            logger.warning(f"[overlay] Cleanup failed: {e}")


async def capture_overlay(session, points: list[AttentionPoint]) -> bytes:
    """Screenshot of the page with the heat overlay drawn on it."""
    async with overlay_injected(session, points):
        return await session.screenshot()
