"""
Point collector and coordinate normalizer.

The browser is asked once for every element matching ATTENTION_SELECTORS;
everything after that (scoring, filtering, priors, dedup, truncation,
normalization) is plain Python over the returned snapshot.
"""

from pagelens.models import (
    AttentionPoint,
    ElementRect,
    ElementSnapshot,
    NormalizedPoint,
    PageGeometry,
    Viewport,
)
from pagelens.scoring import score_element

ATTENTION_SELECTORS = [
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "button",
    "a[href]",
    "img",
    "input",
    "textarea",
    "nav",
    "header",
    "main",
    "section",
    "article",
    '[role="button"]',
    "[onclick]",
    ".btn",
    ".button",
    ".logo",
    ".menu",
    ".navigation",
    ".cta",
    ".call-to-action",
]

# Layout conventions independent of DOM content: (x, y) as viewport fractions, value.
PRIOR_POINTS = (
    (0.5, 0.1, 0.6),   # top navigation
    (0.15, 0.1, 0.7),  # logo
    (0.5, 0.4, 0.5),   # main content
)

MAX_POINTS = 50
MIN_POINT_VALUE = 0.2
DEDUPE_DISTANCE = 50

# Returns elements in selector order (an element matching two selectors is
# listed twice; dedup takes care of it) plus the geometry needed to normalize.
ELEMENT_SNAPSHOT_JS = '''(selectors) => {
    const elements = [];
    for (const selector of selectors) {
        let matches;
        try {
            matches = document.querySelectorAll(selector);
        } catch (e) {
            continue;
        }
        for (const el of matches) {
            const rect = el.getBoundingClientRect();
            if (rect.width > 0 && rect.height > 0) {
                elements.push({
                    tag: el.tagName.toLowerCase(),
                    hasLabel: el.hasAttribute('aria-label') || el.hasAttribute('alt'),
                    rect: { left: rect.left, top: rect.top, width: rect.width, height: rect.height },
                });
            }
        }
    }
    return {
        viewport: { width: window.innerWidth, height: window.innerHeight },
        documentScrollHeight: document.documentElement.scrollHeight,
        bodyScrollHeight: document.body ? document.body.scrollHeight : 0,
        elements,
    };
}'''


def parse_snapshot(raw: dict, fallback_viewport: Viewport) -> tuple[list[ElementSnapshot], Viewport, PageGeometry]:
    """Turn the ELEMENT_SNAPSHOT_JS result into typed elements and geometry."""
    raw = raw or {}
    vp = raw.get("viewport") or {}
    viewport = Viewport(
        width=vp.get("width") or fallback_viewport.width,
        height=vp.get("height") or fallback_viewport.height,
    )
    geometry = PageGeometry.from_scroll_heights(
        viewport,
        raw.get("documentScrollHeight") or 0,
        raw.get("bodyScrollHeight") or 0,
    )
    elements = [ElementSnapshot.model_validate(item) for item in raw.get("elements") or []]
    return elements, viewport, geometry


def prior_points(viewport: Viewport) -> list[AttentionPoint]:
    return [
        AttentionPoint(x=viewport.width * fx, y=viewport.height * fy, value=value)
        for fx, fy, value in PRIOR_POINTS
    ]


def dedupe_points(points: list[AttentionPoint], distance: float = DEDUPE_DISTANCE) -> list[AttentionPoint]:
    """Keep a point only if no earlier kept point is within `distance` px on both axes."""
    kept: list[AttentionPoint] = []
    for point in points:
        if any(abs(k.x - point.x) < distance and abs(k.y - point.y) < distance for k in kept):
            continue
        kept.append(point)
    return kept


def _within_page(cx: float, cy: float, viewport: Viewport, geometry: PageGeometry) -> bool:
    return 0 <= cx <= viewport.width and 0 <= cy <= geometry.scroll_height


def collect_points(
    elements: list[ElementSnapshot],
    viewport: Viewport,
    geometry: PageGeometry,
    max_points: int = MAX_POINTS,
    min_value: float = MIN_POINT_VALUE,
    dedupe_distance: float = DEDUPE_DISTANCE,
) -> list[AttentionPoint]:
    """
    Score elements, keep the significant ones, append the layout priors,
    dedupe and cap. Order of discovery decides which points survive.
    """
    points: list[AttentionPoint] = []
    for element in elements:
        rect: ElementRect = element.rect
        if rect.width <= 0 or rect.height <= 0:
            continue
        cx, cy = rect.center
        if not _within_page(cx, cy, viewport, geometry):
            continue
        value = score_element(element.tag, element.has_label, rect, viewport)
        if value > min_value:
            points.append(AttentionPoint(x=cx, y=cy, value=value))

    points.extend(prior_points(viewport))
    return dedupe_points(points, dedupe_distance)[:max_points]


def normalize_point(point: AttentionPoint, viewport: Viewport, geometry: PageGeometry) -> NormalizedPoint:
    return NormalizedPoint(
        x=point.x / viewport.width,
        y=point.y / geometry.scroll_height,
        value=point.value,
    )


def normalize_points(points: list[AttentionPoint], viewport: Viewport, geometry: PageGeometry) -> list[NormalizedPoint]:
    return [normalize_point(p, viewport, geometry) for p in points]
