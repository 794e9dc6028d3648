import math

import pytest

from scissor_sketch.core.curves import CurveType
from scissor_sketch.core.geometry import Point
from scissor_sketch.core.mechanism import (
    ScissorMechanism,
    classify_integrity,
    cross_segments,
    place_joints,
)
from scissor_sketch.core.parameters import MechanismParams
from scissor_sketch.core.trail import TrailRecorder


def _coords(m):
    return [(j.x, j.y) for j in m.joints], [(p.x, p.y) for p in m.pivots]


def _built(**params):
    m = ScissorMechanism()
    m.set_params(**params)
    m.update()
    return m


def test_scenario_default_arc_is_good():
    m = _built(curve_type="arc", curve_length=300, curvature=1.0, segments=4, link_length=60)
    assert len(m.joints) == 10
    assert len(m.pivots) == 4
    assert len(m.links) == 8
    assert m.get_integrity().level == "good"


def test_scenario_collinear_rods_have_no_pivot():
    m = ScissorMechanism()
    m.set_free_curve([(0, 0), (10, 0), (0, 0)])
    m.set_params(curve_type=CurveType.FREE, segments=1)
    m.update()
    assert len(m.joints) == 4
    assert len(m.pivots) == 0
    assert m.links == []
    assert m.get_integrity().level == "error"


@pytest.mark.parametrize("segments", [1, 2, 3, 5, 8])
def test_joint_count_and_convex_arc_pivots(segments):
    m = _built(segments=segments)
    assert len(m.joints) == 2 * (segments + 1)
    assert len(m.pivots) == segments
    assert len(m.links) == 2 * len(m.pivots)


@pytest.mark.parametrize("curve_type", ["sine", "arc"])
def test_pivot_bound(curve_type):
    for segments in (1, 4, 12, 30):
        m = _built(curve_type=curve_type, segments=segments, curvature=3.0)
        assert len(m.pivots) <= segments


def test_link_topology():
    m = _built(segments=3)
    for p in m.pivots:
        i = p.segment
        assert p.id == f"P{i}"
        assert p.links == (f"L{i}-R{i + 1}", f"R{i}-L{i + 1}")
    for lk in m.links:
        assert lk.start.side != lk.end.side
        assert abs(lk.start.level - lk.end.level) == 1
    assert [j.id for j in m.joints[:4]] == ["L0", "R0", "L1", "R1"]


def test_joints_straddle_curve_by_half_link():
    m = _built(segments=2, link_length=40)
    by_id = {j.id: j for j in m.joints}
    for level in range(3):
        a, b = by_id[f"L{level}"], by_id[f"R{level}"]
        assert math.hypot(b.x - a.x, b.y - a.y) == pytest.approx(40.0)


def test_center_offsets_geometry():
    m0 = _built()
    m1 = ScissorMechanism()
    m1.set_center(100, -50)
    m1.update()
    for a, b in zip(m0.joints, m1.joints):
        assert b.x == pytest.approx(a.x + 100)
        assert b.y == pytest.approx(a.y - 50)


def test_update_only_when_dirty():
    m = ScissorMechanism()
    assert m.dirty
    assert m.update() is True
    assert not m.dirty
    assert m.update() is False
    m.set_params(segments=m.segments)
    assert m.dirty


def test_update_is_idempotent():
    m = _built(segments=6, curvature=1.7)
    before = _coords(m)
    m.update()
    assert _coords(m) == before
    m.mark_dirty()
    m.update()
    assert _coords(m) == before


def test_translate_round_trip():
    m = _built()
    before = _coords(m)
    m.translate_all(12.5, -7.25)
    m.translate_all(-12.5, 7.25)
    for (ax, ay), (bx, by) in zip(before[0] + before[1], _coords(m)[0] + _coords(m)[1]):
        assert bx == pytest.approx(ax, abs=1e-9)
        assert by == pytest.approx(ay, abs=1e-9)


def test_anchor_survives_curvature_change():
    m = _built(curvature=1.0)
    p2 = m.find_node("P2")
    target = Point(p2.x, p2.y)
    m.set_anchor("P2", target)
    m.set_params(curvature=2.0)
    m.update()
    p2 = m.find_node("P2")
    assert p2.x == pytest.approx(target.x, abs=1e-6)
    assert p2.y == pytest.approx(target.y, abs=1e-6)


def test_anchor_exact_on_arbitrary_target():
    m = _built(segments=5)
    m.set_anchor("R3", (250.0, -40.0))
    m.set_params(curve_length=420, link_length=35)
    m.update()
    r3 = m.find_node("R3")
    assert (r3.x, r3.y) == pytest.approx((250.0, -40.0), abs=1e-6)


def test_anchor_to_missing_node_is_ignored():
    m = _built(segments=4)
    m.set_anchor("P3", (0, 0))
    m.set_params(segments=2)
    m.update()
    assert m.find_node("P3") is None
    assert m.anchor.node_id == "P3"
    assert m.apply_anchor() is None


def test_anchor_shift_moves_center_and_survives_clear():
    m = _built()
    l0 = m.find_node("L0")
    dx, dy = 500 - l0.x, 500 - l0.y
    m.set_anchor("L0", (500, 500))
    m.update()
    assert (m.center_x, m.center_y) == pytest.approx((dx, dy))
    m.clear_anchor()
    m.set_params(link_length=m.params.link_length)
    m.update()
    assert not m.anchor.active
    l0 = m.find_node("L0")
    assert (l0.x, l0.y) == pytest.approx((500, 500))


def test_trail_records_once_per_rebuild():
    ticks = iter(range(100))
    m = ScissorMechanism(trail=TrailRecorder(capacity=3, clock=lambda: next(ticks)))
    m.set_trail_enabled(True)
    m.update()
    m.update()
    assert len(m.trail) == 1
    top = [j for j in m.joints if j.level == m.segments]
    tp = m.trail_points[0]
    assert tp.x == pytest.approx((top[0].x + top[1].x) / 2)
    assert tp.y == pytest.approx((top[0].y + top[1].y) / 2)
    for c in (1.1, 1.2, 1.3, 1.4):
        m.set_params(curvature=c)
        m.update()
    assert len(m.trail) == 3
    assert [p.t for p in m.trail] == [2, 3, 4]


def test_disabling_trail_clears_it():
    m = ScissorMechanism()
    m.set_trail_enabled(True)
    m.update()
    assert len(m.trail) == 1
    m.set_trail_enabled(False)
    m.update()
    assert len(m.trail) == 0


def test_free_curve_falls_back_to_arc():
    m = ScissorMechanism()
    m.set_params(curve_type="free")
    m.update()
    ref = _built()
    assert _coords(m) == _coords(ref)


def test_empty_curve_integrity():
    m = ScissorMechanism()
    assert m.get_integrity().text == "No pivot"
    assert classify_integrity(2, 4).level == "warning"
    assert classify_integrity(4, 4).level == "good"
    assert classify_integrity(0, 4).level == "error"


def test_params_are_coerced():
    m = ScissorMechanism(MechanismParams(segments=0, link_length=-5))
    assert m.params.segments == 1
    assert m.params.link_length == 0.0


def test_pick_node_prefers_pivots():
    m = _built()
    p1 = m.find_node("P1")
    assert m.pick_node(p1.x + 1, p1.y - 1) == ("P1", "pivot")
    l0 = m.find_node("L0")
    assert m.pick_node(l0.x, l0.y, radius=2) == ("L0", "joint")
    assert m.pick_node(1e6, 1e6) is None


def test_physics_graph_round_trip():
    m = _built(segments=3)
    graph = m.to_physics_graph()
    assert len(graph["joints"]) == 8
    assert {"a": "L0", "b": "R1"} in graph["rods"]
    assert len(graph["rods"]) == len(m.links)

    base = list(m.base_curve)
    positions = {j["id"]: (j["x"] + 5.0, j["y"]) for j in graph["joints"]}
    before = {p.id: (p.x, p.y) for p in m.pivots}
    m.apply_physics_positions(positions)
    assert not m.dirty
    assert m.base_curve == base
    for p in m.pivots:
        assert p.x == pytest.approx(before[p.id][0] + 5.0)
        assert p.y == pytest.approx(before[p.id][1])


def test_physics_positions_can_degenerate():
    m = _built(segments=1)
    m.apply_physics_positions({"L0": (0, 0), "R0": (0, 10), "L1": (0, 20), "R1": (0, 30)})
    assert m.pivots == []
    assert m.get_integrity().level == "error"


def test_place_and_cross_building_blocks():
    curve = [Point(x, 0.0) for x in range(0, 101, 10)]
    joints = place_joints(curve, 2, 20.0, Point(0, 0))
    assert [(j.x, j.y) for j in joints[:2]] == [(0.0, -10.0), (0.0, 10.0)]
    links, pivots = cross_segments(joints, 2)
    assert len(pivots) == 2
    assert pivots[0].x == pytest.approx(25.0)
    assert pivots[0].y == pytest.approx(0.0)


def test_status_summary():
    m = _built()
    s = m.status()
    assert s["joints"] == 10
    assert s["pivots"] == 4
    assert s["links"] == 8
    assert s["integrity"] == "good"
    assert s["arc_length"] == pytest.approx(m.polyline_arc_length())


@pytest.mark.parametrize("field", ["curvature", "link_length", "curve_length", "segments"])
def test_non_finite_params_keep_valid_geometry(field):
    m = _built()
    before = _coords(m)
    m.set_params(**{field: float("nan")})
    m.update()
    assert _coords(m) == before
    assert all(math.isfinite(p.x) and math.isfinite(p.y) for p in m.pivots)
    assert m.get_integrity().level == "good"


def test_anchor_correction_moves_trail():
    m = ScissorMechanism(trail=TrailRecorder(clock=lambda: 0.0))
    m.set_trail_enabled(True)
    m.update()
    first = m.trail_points[0]
    x0, y0 = first.x, first.y
    l0 = m.find_node("L0")
    dx, dy = 30.0 - l0.x, -20.0 - l0.y
    m.set_anchor("L0", (30.0, -20.0))
    m.update()
    assert len(m.trail) == 2
    moved = m.trail_points[0]
    assert (moved.x, moved.y) == pytest.approx((x0 + dx, y0 + dy))
    top = [j for j in m.joints if j.level == m.segments]
    assert (m.trail_points[1].x, m.trail_points[1].y) == pytest.approx(
        ((top[0].x + top[1].x) / 2, (top[0].y + top[1].y) / 2))
