import logging

import pytest

from scissor_sketch.core.curves import CurveType
from scissor_sketch.core.expression_service import eval_param_expression
from scissor_sketch.core.parameters import MechanismParams, ParameterRegistry, field_name


def test_defaults():
    p = MechanismParams()
    assert p.to_dict() == {
        "segments": 4,
        "link_length": 60.0,
        "curvature": 1.0,
        "curve_length": 300.0,
        "curve_type": "arc",
    }


def test_merged_accepts_camel_case_and_ignores_none():
    p = MechanismParams().merged(linkLength="45", curveLength=None, curveType="sine")
    assert p.link_length == 45.0
    assert p.curve_length == 300.0
    assert p.curve_type is CurveType.SINE


def test_coercion_floors():
    p = MechanismParams().merged(segments="3.7", link_length=-1, curve_length=-10, curvature=-2)
    assert p.segments == 3
    assert p.link_length == 0.0
    assert p.curve_length == 0.0
    assert p.curvature == -2.0
    assert MechanismParams().merged(segments=0).segments == 1


def test_bad_curve_type_logs_warning(caplog):
    with caplog.at_level(logging.WARNING):
        p = MechanismParams().merged(curve_type="zigzag")
    assert p.curve_type is CurveType.ARC
    assert any("zigzag" in r.getMessage() for r in caplog.records)


def test_unknown_field_raises():
    with pytest.raises(KeyError):
        field_name("radius")
    with pytest.raises(KeyError):
        MechanismParams().merged(radius=3)


def test_expression_with_params():
    val, err = eval_param_expression("2*pitch + sqrt(16)", {"pitch": 30.0})
    assert err is None
    assert val == pytest.approx(64.0)


@pytest.mark.parametrize(
    "expr, fragment",
    [("", "Empty"), ("pitch + 1", "Unknown symbol"), ("2 *", "Parse error")],
)
def test_expression_errors(expr, fragment):
    val, err = eval_param_expression(expr, {})
    assert val is None
    assert fragment in err


def test_registry_names():
    reg = ParameterRegistry()
    reg.set_param("pitch", 12)
    assert reg.params == {"pitch": 12.0}
    for bad in ("", "2x", "a-b", "segments", "linkLength"):
        with pytest.raises(ValueError):
            reg.set_param(bad, 1)
    reg.delete_param("pitch")
    reg.delete_param("missing")
    assert reg.params == {}


def test_registry_resolve_splits_values_and_errors():
    reg = ParameterRegistry()
    reg.set_param("pitch", 30)
    values, errors = reg.resolve({"linkLength": "2*pitch", "curvature": "k", "color": "1"})
    assert values == {"link_length": pytest.approx(60.0)}
    assert set(errors) == {"curvature", "color"}


@pytest.mark.parametrize("bad", [float("inf"), float("nan"), "abc", "1e999"])
def test_unusable_values_keep_current_setting(bad):
    p = MechanismParams(segments=6, curvature=1.5).coerced()
    q = p.merged(segments=bad, curvature=bad, link_length=bad, curve_length=bad)
    assert q == p


def test_unusable_values_fall_back_to_defaults():
    p = MechanismParams(segments=float("inf"), curvature=float("nan"), link_length="x").coerced()
    assert (p.segments, p.curvature, p.link_length) == (4, 1.0, 60.0)


@pytest.mark.parametrize("expr", ["10**400", "oo", "-oo"])
def test_expression_must_be_finite(expr):
    val, err = eval_param_expression(expr, {})
    assert val is None
    assert err
