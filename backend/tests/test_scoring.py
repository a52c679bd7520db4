import itertools

import pytest

from pagelens.models import ElementRect, Viewport
from pagelens.scoring import TAG_BONUS, score_element, tag_bonus

VIEWPORT = Viewport(width=1920, height=1080)


def rect_at(cx, cy, width, height):
    return ElementRect(left=cx - width / 2, top=cy - height / 2, width=width, height=height)


@pytest.mark.parametrize("tag,bonus", [
    ("h1", 0.8), ("h2", 0.6), ("h3", 0.4), ("h4", 0.4),
    ("button", 0.7), ("a", 0.7), ("input", 0.6), ("textarea", 0.6),
    ("img", 0.5), ("nav", 0.5), ("form", 0.4),
    ("h5", 0.1), ("div", 0.1), ("section", 0.1), ("", 0.1),
])
def test_tag_bonus_table(tag, bonus):
    assert tag_bonus(tag) == bonus


def test_tag_bonus_ignores_case():
    assert tag_bonus("H1") == TAG_BONUS["h1"]


def test_large_labelled_h1_in_top_left_clamps_to_one():
    # 0.1 + 0.8 + 0.2 + 0.3 + 0.2 + 0.2 = 1.8 before the clamp
    rect = rect_at(cx=400, cy=150, width=900, height=200)
    assert rect.area / VIEWPORT.area > 0.05
    assert score_element("h1", True, rect, VIEWPORT) == 1.0


def test_plain_element_out_of_every_zone_keeps_base_plus_default():
    rect = rect_at(cx=150, cy=925, width=100, height=50)
    assert score_element("div", False, rect, VIEWPORT) == pytest.approx(0.2)


def test_top_right_zone():
    rect = rect_at(cx=1500, cy=100, width=100, height=50)
    assert score_element("img", False, rect, VIEWPORT) == pytest.approx(0.1 + 0.5 + 0.2)


def test_center_band():
    rect = rect_at(cx=1000, cy=500, width=100, height=50)
    assert score_element("img", False, rect, VIEWPORT) == pytest.approx(0.1 + 0.5 + 0.2)


def test_center_band_bounds_are_exclusive():
    # cx exactly at 20% of the width is outside the band
    rect = rect_at(cx=384, cy=500, width=100, height=50)
    assert score_element("img", False, rect, VIEWPORT) == pytest.approx(0.6)


def test_size_steps():
    medium = rect_at(cx=150, cy=925, width=200, height=150)   # ~1.4% of the viewport
    large = rect_at(cx=300, cy=800, width=600, height=300)    # ~8.7%
    assert score_element("div", False, medium, VIEWPORT) == pytest.approx(0.4)
    assert score_element("div", False, large, VIEWPORT) == pytest.approx(0.6)


def test_tiny_element_is_dominated_by_visibility_penalty():
    rect = rect_at(cx=100, cy=100, width=8, height=40)
    bonuses = 0.1 + 0.7 + 0.2 + 0.3
    value = score_element("button", True, rect, VIEWPORT)
    assert value <= 0.1 * bonuses + 1e-9
    assert value == pytest.approx(0.13)


def test_below_the_fold_scores_low_but_not_zero():
    rect = rect_at(cx=960, cy=1500, width=800, height=300)
    value = score_element("h1", True, rect, VIEWPORT)
    assert value == pytest.approx((0.1 + 0.8 + 0.2 + 0.4) * 0.3)
    assert 0 < value < 0.5


def test_penalties_are_applied_after_bonuses_and_stack():
    rect = rect_at(cx=960, cy=1500, width=5, height=5)
    assert score_element("h1", True, rect, VIEWPORT) == pytest.approx((0.1 + 0.8 + 0.2) * 0.1 * 0.3)


@pytest.mark.parametrize("tag,label,cx,cy,w,h", list(itertools.product(
    ["h1", "a", "img", "nav", "div"],
    [True, False],
    [0, 300, 960, 1700, 1920],
    [0, 100, 400, 1079, 4000],
    [1, 50, 1920],
    [1, 300, 1080],
)))
def test_score_always_within_unit_interval(tag, label, cx, cy, w, h):
    value = score_element(tag, label, rect_at(cx, cy, w, h), VIEWPORT)
    assert 0.0 <= value <= 1.0
