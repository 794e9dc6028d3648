import pytest

from scissor_sketch.core.anchor import AnchorState, anchor_delta
from scissor_sketch.core.geometry import Point
from scissor_sketch.core.mechanism import Joint
from scissor_sketch.core.trail import TrailRecorder


def test_anchor_delta_below_epsilon_is_none():
    assert anchor_delta(Point(1, 1), Point(1, 1)) is None
    assert anchor_delta(Point(1, 1), Point(1 + 1e-12, 1)) is None


def test_anchor_delta_value():
    d = anchor_delta(Point(1, 2), Point(4, -2))
    assert (d.x, d.y) == (3, -4)


def test_anchor_state_lifecycle():
    a = AnchorState()
    assert not a.active
    a.set("P1", Point(0, 0))
    assert a.active
    assert a.node_id == "P1"
    a.clear()
    assert not a.active
    assert a.target is None


def _level_joints(level, left, right):
    return [Joint(f"L{level}", "L", level, *left), Joint(f"R{level}", "R", level, *right)]


def test_trail_records_tip_midpoint():
    rec = TrailRecorder(clock=lambda: 7.5)
    joints = _level_joints(0, (0, 0), (2, 0)) + _level_joints(1, (10, 4), (20, 8))
    assert rec.record(joints, 1)
    (p,) = rec.points
    assert (p.x, p.y, p.t) == (15.0, 6.0, 7.5)


def test_trail_needs_two_top_joints():
    rec = TrailRecorder()
    assert not rec.record(_level_joints(0, (0, 0), (1, 1)), 1)
    assert not rec.record([], 4)
    assert len(rec) == 0


def test_trail_capacity_drops_oldest():
    rec = TrailRecorder(capacity=2, clock=lambda: 0.0)
    for k in range(5):
        rec.record(_level_joints(1, (k, 0), (k, 0)), 1)
    assert [p.x for p in rec] == [3.0, 4.0]


def test_trail_translate():
    rec = TrailRecorder(clock=lambda: 0.0)
    rec.record(_level_joints(1, (0, 0), (2, 2)), 1)
    rec.translate(5, -1)
    assert (rec.points[0].x, rec.points[0].y) == pytest.approx((6.0, 0.0))
    rec.clear()
    assert rec.points == []
