# -*- coding: utf-8 -*-
"""Mechanism parameters + user parameter registry.

``MechanismParams`` is the sole numeric input of the geometry builder.
Setters coerce to numeric types and non-negative minimums and never
validate beyond that.

``ParameterRegistry`` stores named user values that mechanism fields can
reference through expressions (see ``expression_service``).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional, Tuple

from .curves import CurveType
from .expression_service import eval_param_expression

logger = logging.getLogger(__name__)

# Field names accepted by ``MechanismParams.merged`` (snake_case and camelCase spellings).
_ALIASES = {
    "segments": "segments",
    "link_length": "link_length",
    "linkLength": "link_length",
    "curvature": "curvature",
    "curve_length": "curve_length",
    "curveLength": "curve_length",
    "curve_type": "curve_type",
    "curveType": "curve_type",
}

NUMERIC_FIELDS = ("segments", "link_length", "curvature", "curve_length")


def field_name(key: str) -> str:
    try:
        return _ALIASES[key]
    except KeyError:
        raise KeyError(f"Unknown mechanism parameter: {key!r}") from None


@dataclass(frozen=True)
class MechanismParams:
    segments: int = 4
    link_length: float = 60.0
    curvature: float = 1.0
    curve_length: float = 300.0
    curve_type: CurveType = CurveType.ARC

    def coerced(self, fallback: Optional["MechanismParams"] = None) -> "MechanismParams":
        """Numeric, floored copy.

        Non-numeric and non-finite values are replaced by the matching field
        of ``fallback`` (the defaults when omitted).
        """
        fb = fallback or _DEFAULTS
        return MechanismParams(
            segments=max(1, int(_finite(self, fb, "segments"))),
            link_length=max(0.0, _finite(self, fb, "link_length")),
            curvature=_finite(self, fb, "curvature"),
            curve_length=max(0.0, _finite(self, fb, "curve_length")),
            curve_type=CurveType.coerce(self.curve_type),
        )

    def merged(self, **partial: Any) -> "MechanismParams":
        """Return a copy with the given fields replaced; ``None`` values are ignored.

        Rejected values keep the current setting.
        """
        updates = {field_name(k): v for k, v in partial.items() if v is not None}
        return replace(self, **updates).coerced(fallback=self)

    def to_dict(self) -> Dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        out["curve_type"] = self.curve_type.value
        return out


_DEFAULTS = MechanismParams()


def _finite(params: MechanismParams, fallback: MechanismParams, name: str) -> float:
    raw = getattr(params, name)
    try:
        val = float(raw)
    except (TypeError, ValueError):
        val = math.nan
    if math.isfinite(val):
        return val
    logger.warning("Ignoring %s=%r, keeping %r", name, raw, getattr(fallback, name))
    return float(getattr(fallback, name))


def _is_valid_param_name(name: str) -> bool:
    name = (name or "").strip()
    if not name:
        return False
    if not (name[0].isalpha() or name[0] == "_"):
        return False
    if name in NUMERIC_FIELDS or name in _ALIASES:
        return False
    return all(ch.isalnum() or ch == "_" for ch in name)


@dataclass
class ParameterRegistry:
    """Named user values referenced by parameter expressions."""

    params: Dict[str, float] = field(default_factory=dict)

    def set_param(self, name: str, value: float):
        if not _is_valid_param_name(name):
            raise ValueError(f"Invalid parameter name: {name!r}")
        self.params[str(name).strip()] = float(value)

    def delete_param(self, name: str):
        self.params.pop(name, None)

    def eval_expr(self, expr: str) -> Tuple[Optional[float], Optional[str]]:
        """Evaluate an expression string.

        Returns (value, error_message). If evaluation fails, value is None.
        """
        return eval_param_expression(expr, self.params)

    def resolve(self, exprs: Dict[str, str]) -> Tuple[Dict[str, float], Dict[str, str]]:
        """Evaluate a mapping of mechanism field -> expression.

        Returns (values, errors); a field lands in exactly one of the two.
        """
        values: Dict[str, float] = {}
        errors: Dict[str, str] = {}
        for key, expr in exprs.items():
            name = _ALIASES.get(key, key)
            if name not in NUMERIC_FIELDS:
                errors[name] = "Not a numeric parameter"
                continue
            val, err = self.eval_expr(expr)
            if err is not None:
                errors[name] = err
            else:
                values[name] = val
        return values, errors
