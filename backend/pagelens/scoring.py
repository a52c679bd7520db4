"""
Attention scorer: a static-layout estimate of how much visual focus one
element draws. Not gaze data.

The value is additive (base + tag + label + position + size bonuses), then
multiplied by the visibility penalties, then clamped to 1.0. Penalties come
last so a large, labelled, well-placed element below the fold still scores
low but not zero.
"""

from pagelens.models import ElementRect, Viewport

BASE_VALUE = 0.1
DEFAULT_TAG_BONUS = 0.1

TAG_BONUS = {
    "h1": 0.8,
    "h2": 0.6,
    "h3": 0.4,
    "h4": 0.4,
    "button": 0.7,
    "a": 0.7,
    "input": 0.6,
    "textarea": 0.6,
    "img": 0.5,
    "nav": 0.5,
    "form": 0.4,
}

LABEL_BONUS = 0.2

# (x_min, x_max, y_min, y_max, bonus) as fractions of the viewport.
# Bounds are exclusive; None means unbounded on that side.
POSITION_ZONES = (
    (None, 0.5, None, 0.3, 0.3),  # top-left, reading starts here
    (0.5, None, None, 0.2, 0.2),  # top-right
    (0.2, 0.8, 0.2, 0.6, 0.2),    # center band
)

# (fraction of viewport area the element must exceed, bonus)
SIZE_STEPS = (
    (0.01, 0.2),
    (0.05, 0.2),
)

MIN_VISIBLE_PX = 10
TINY_PENALTY = 0.1
BELOW_FOLD_PENALTY = 0.3
MAX_VALUE = 1.0


def tag_bonus(tag: str) -> float:
    return TAG_BONUS.get((tag or "").lower(), DEFAULT_TAG_BONUS)


def _in_zone(cx: float, cy: float, viewport: Viewport, zone) -> bool:
    x_min, x_max, y_min, y_max, _ = zone
    w, h = viewport.width, viewport.height
    if x_min is not None and not cx > w * x_min:
        return False
    if x_max is not None and not cx < w * x_max:
        return False
    if y_min is not None and not cy > h * y_min:
        return False
    if y_max is not None and not cy < h * y_max:
        return False
    return True


def position_bonus(cx: float, cy: float, viewport: Viewport) -> float:
    return sum(zone[-1] for zone in POSITION_ZONES if _in_zone(cx, cy, viewport, zone))


def size_bonus(rect: ElementRect, viewport: Viewport) -> float:
    if viewport.area <= 0:
        return 0.0
    ratio = rect.area / viewport.area
    return sum(bonus for threshold, bonus in SIZE_STEPS if ratio > threshold)


def score_element(tag: str, has_label: bool, rect: ElementRect, viewport: Viewport) -> float:
    """Attention value in [0, 1] for one element."""
    cx, cy = rect.center

    value = BASE_VALUE + tag_bonus(tag)
    if has_label:
        value += LABEL_BONUS
    value += position_bonus(cx, cy, viewport)
    value += size_bonus(rect, viewport)

    if rect.width < MIN_VISIBLE_PX or rect.height < MIN_VISIBLE_PX:
        value *= TINY_PENALTY
    if cy > viewport.height:
        value *= BELOW_FOLD_PENALTY

    return max(0.0, min(value, MAX_VALUE))
