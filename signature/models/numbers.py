# signature/models/numbers.py
from __future__ import annotations

import math
from numbers import Real

from ..exceptions.errors import InvalidArgument


def require_finite(name: str, value) -> float:
    """Return *value* as float; bools, non-numbers, NaN and infinities are rejected."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgument(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidArgument(f"{name} must be finite, got {value!r}")
    return value


def require_positive(name: str, value) -> float:
    value = require_finite(name, value)
    if value <= 0:
        raise InvalidArgument(f"{name} must be > 0, got {value!r}")
    return value


def require_non_negative(name: str, value) -> float:
    value = require_finite(name, value)
    if value < 0:
        raise InvalidArgument(f"{name} must be >= 0, got {value!r}")
    return value
