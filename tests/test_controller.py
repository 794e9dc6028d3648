import math

import pytest

from scissor_sketch.core.animation import AnimationConfig, Wave
from scissor_sketch.core.controller import MechanismController
from scissor_sketch.core.curves import CurveType
from scissor_sketch.core.geometry import Point


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def ctrl():
    c = MechanismController()
    c.tick()
    return c


def test_param_edit_is_undoable(ctrl):
    ctrl.set_params(segments=6)
    ctrl.tick()
    assert len(ctrl.mechanism.pivots) == 6
    ctrl.stack.undo()
    assert ctrl.mechanism.dirty
    ctrl.tick()
    assert ctrl.mechanism.params.segments == 4
    assert len(ctrl.mechanism.pivots) == 4
    ctrl.stack.redo()
    assert ctrl.mechanism.params.segments == 6


def test_repeated_field_edits_merge(ctrl):
    for v in (5, 6, 7):
        ctrl.set_params(segments=v)
    ctrl.stack.undo()
    assert ctrl.mechanism.params.segments == 4
    assert not ctrl.stack.can_undo()


def test_noop_edit_is_not_recorded(ctrl):
    ctrl.set_params(segments=4)
    assert not ctrl.stack.can_undo()


def test_curve_type_switch_is_separate_step(ctrl):
    ctrl.set_params(curvature=1.5)
    ctrl.set_curve_type("sine")
    ctrl.stack.undo()
    assert ctrl.mechanism.params.curve_type is CurveType.ARC
    assert ctrl.mechanism.params.curvature == 1.5


def test_param_expressions(ctrl):
    ctrl.parameters.set_param("pitch", 25)
    errors = ctrl.set_param_expressions({"link_length": "2*pitch", "segments": "nope"})
    assert ctrl.mechanism.params.link_length == pytest.approx(50.0)
    assert ctrl.mechanism.params.segments == 4
    assert "segments" in errors


def test_stroke_becomes_free_curve(ctrl):
    m = ctrl.mechanism
    m.set_center(100, 100)
    ctrl.begin_stroke(100, 100)
    for k in range(1, 50):
        ctrl.extend_stroke(100 + k * 2, 100 + k)
    assert ctrl.drawing
    assert ctrl.stroke_points()[0] == Point(0.0, 0.0)
    assert ctrl.end_stroke()
    assert not ctrl.drawing
    assert m.params.curve_type is CurveType.FREE
    assert m.free_curve[0].x == pytest.approx(0.0)
    assert m.free_curve[-1].x == pytest.approx(98.0)
    ctrl.tick()
    assert len(m.pivots) == m.segments

    ctrl.stack.undo()
    assert m.params.curve_type is CurveType.ARC
    assert m.free_curve == []


def test_short_stroke_is_ignored(ctrl):
    ctrl.begin_stroke(0, 0)
    assert not ctrl.end_stroke()
    assert ctrl.mechanism.params.curve_type is CurveType.ARC
    assert not ctrl.stack.can_undo()


def test_cancel_stroke(ctrl):
    ctrl.begin_stroke(0, 0)
    ctrl.extend_stroke(1, 1)
    ctrl.cancel_stroke()
    assert not ctrl.drawing
    assert ctrl.stroke_points() == []


def test_pick_and_move_anchor(ctrl):
    m = ctrl.mechanism
    p2 = m.find_node("P2")
    assert ctrl.pick_anchor(p2.x + 2, p2.y) == "P2"
    ctrl.set_params(curvature=2.0)
    ctrl.tick()
    assert (m.find_node("P2").x, m.find_node("P2").y) == pytest.approx((p2.x, p2.y), abs=1e-6)

    ctrl.move_anchor(10, 20)
    ctrl.tick()
    assert (m.find_node("P2").x, m.find_node("P2").y) == pytest.approx((10, 20), abs=1e-6)

    assert ctrl.pick_anchor(1e5, 1e5) is None
    ctrl.clear_anchor()
    assert not m.anchor.active


def test_trail_toggle_follows_display(ctrl):
    ctrl.set_display(show_trail=True)
    assert ctrl.mechanism.trail_enabled
    ctrl.tick()
    assert len(ctrl.mechanism.trail) == 1
    ctrl.set_display(show_trail=False, show_labels=True)
    assert ctrl.display.show_labels
    assert len(ctrl.mechanism.trail) == 0


def test_animation_drives_params():
    clock = FakeClock()
    c = MechanismController(clock=clock)
    c.start_animation(AnimationConfig(curvature_wave=Wave(True, 0.5, 0.25, 1.0)))
    assert c.animating
    clock.now = 1.0
    assert c.tick()
    assert c.mechanism.params.curvature == pytest.approx(1.5)
    c.stop_animation()
    assert not c.animating
    assert not c.tick()
    assert not c.stack.can_undo()


def test_status_text(ctrl):
    text = ctrl.status_text()
    assert "Pivots: 4" in text
    assert "Integrity: OK" in text


def test_svg_export_and_save(ctrl, tmp_path):
    svg = ctrl.export_svg()
    assert svg.count("<path ") == 8
    out = tmp_path / "links.svg"
    assert ctrl.save_svg(str(out))
    assert out.read_text(encoding="utf-8") == svg


def test_save_svg_without_links(tmp_path):
    c = MechanismController()
    c.set_params(curve_type="free")
    c.mechanism.set_free_curve([(0, 0), (10, 0), (0, 0)])
    c.set_params(segments=1)
    out = tmp_path / "empty.svg"
    assert not c.save_svg(str(out))
    assert not out.exists()
    assert math.isfinite(c.mechanism.polyline_arc_length())


@pytest.mark.parametrize("expr", ["10**400", "oo"])
def test_infinite_expression_is_reported_not_applied(ctrl, expr):
    errors = ctrl.set_param_expressions({"segments": expr})
    assert "segments" in errors
    assert ctrl.mechanism.params.segments == 4
    assert not ctrl.stack.can_undo()


def test_clear_trail(ctrl):
    ctrl.set_display(show_trail=True)
    ctrl.tick()
    assert len(ctrl.mechanism.trail) == 1
    ctrl.clear_trail()
    assert len(ctrl.mechanism.trail) == 0
    assert ctrl.mechanism.trail_enabled
