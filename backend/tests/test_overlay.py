import pytest

from conftest import FakeSession
from pagelens.models import AttentionPoint
from pagelens.overlay import (
    INJECT_OVERLAY_JS,
    REMOVE_OVERLAY_JS,
    STYLE_ID,
    build_overlay_css,
    capture_overlay,
    gradient_for,
    overlay_injected,
    radius_for,
)


@pytest.mark.parametrize("value,radius", [(1.0, 100), (0.5, 80), (0.0, 64), (3.0, 100)])
def test_radius_grows_with_value(value, radius):
    assert radius_for(value) == pytest.approx(radius)


def test_gradient_color_families():
    assert gradient_for(0.9).startswith("radial-gradient(circle, rgba(255, 0, 0,")
    assert gradient_for(0.7).startswith("radial-gradient(circle, rgba(255, 150, 0,")
    assert gradient_for(0.5).startswith("radial-gradient(circle, rgba(255, 150, 0,")
    assert gradient_for(0.3).startswith("radial-gradient(circle, rgba(0, 150, 255,")


def test_gradients_fade_to_transparent():
    for value in (0.2, 0.6, 0.95):
        assert gradient_for(value).endswith(", 0) 100%)")


def test_css_has_one_rule_per_point_in_insertion_order():
    points = [AttentionPoint(x=500, y=300, value=1.0), AttentionPoint(x=50, y=60, value=0.5)]
    css = build_overlay_css(points)
    assert "mix-blend-mode: multiply" in css
    first = css.index(".heatmap-point-0 {")
    second = css.index(".heatmap-point-1 {")
    assert first < second
    assert "left: 400px;" in css and "top: 200px;" in css and "width: 200px;" in css
    assert "left: -30px;" in css and "height: 160px;" in css


async def test_overlay_is_removed_after_capture():
    session = FakeSession()
    shot = await capture_overlay(session, [AttentionPoint(x=1, y=2, value=0.5)])
    assert shot
    assert session.scripts() == [INJECT_OVERLAY_JS, REMOVE_OVERLAY_JS]
    inject_arg = session.evaluated[0][1]
    assert inject_arg["styleId"] == STYLE_ID
    assert inject_arg["count"] == 1


async def test_overlay_is_removed_when_capture_fails():
    session = FakeSession(screenshot_error=RuntimeError("capture failed"))
    with pytest.raises(RuntimeError):
        await capture_overlay(session, [AttentionPoint(x=1, y=2, value=0.5)])
    assert session.scripts()[-1] == REMOVE_OVERLAY_JS


async def test_overlay_is_removed_when_injection_fails():
    session = FakeSession(evaluate_error=RuntimeError("inject failed"), fail_on=INJECT_OVERLAY_JS)
    with pytest.raises(RuntimeError):
        async with overlay_injected(session, []):
            pass
    assert session.scripts() == [INJECT_OVERLAY_JS, REMOVE_OVERLAY_JS]
