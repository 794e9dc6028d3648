# -*- coding: utf-8 -*-
"""Expression evaluation for mechanism parameter fields.

Parameter fields (segment count, rod length, ...) may be typed as
expressions over named user parameters, e.g. ``2*pitch + 5``. Parsing goes
through SymPy; Python ``eval`` is never used.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Tuple

import sympy as sp


_ALLOWED_FUNCS: Dict[str, Any] = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "atan": sp.atan,
    "sqrt": sp.sqrt,
    "abs": sp.Abs,
    "min": sp.Min,
    "max": sp.Max,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "pi": sp.pi,
}


def eval_param_expression(expr: str, params: Dict[str, float]) -> Tuple[Optional[float], Optional[str]]:
    """Evaluate ``expr`` with ``params`` bound to their values.

    Returns (value, error_message). If evaluation fails, value is None.
    """
    expr = (expr or "").strip()
    if not expr:
        return None, "Empty expression"

    locals_map: Dict[str, Any] = dict(_ALLOWED_FUNCS)
    for name in params:
        locals_map[name] = sp.Symbol(name)

    try:
        parsed = sp.sympify(expr, locals=locals_map)
    except (sp.SympifyError, SyntaxError, TypeError) as ex:
        return None, f"Parse error: {ex}"

    free = {str(s) for s in getattr(parsed, "free_symbols", set())}
    unknown = sorted(s for s in free if s not in params)
    if unknown:
        return None, f"Unknown symbol(s): {', '.join(unknown)}"

    try:
        subs = {sp.Symbol(k): float(v) for k, v in params.items()}
        val = float(parsed.evalf(subs=subs))
    except (TypeError, ValueError, OverflowError) as ex:
        return None, f"Eval error: {ex}"
    if val != val:  # NaN
        return None, "Expression evaluated to NaN"
    if not math.isfinite(val):
        return None, "Expression is not finite"
    return val, None
