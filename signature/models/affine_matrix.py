# signature/models/affine_matrix.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class AffineMatrix:
    """
    PDF-style 2x3 affine matrix ``[a b c d e f]``::

        | a  c  e |   x' = a*x + c*y + e
        | b  d  f |   y' = b*x + d*y + f

    a, d  scale (times cos of the rotation)
    b, c  rotation shear (scale times +/- sin)
    e, f  translation in page points
    """
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    @classmethod
    def identity(cls) -> "AffineMatrix":
        return cls(1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return (self.a * x + self.c * y + self.e,
                self.b * x + self.d * y + self.f)

    def translated(self, dx: float, dy: float) -> "AffineMatrix":
        """Same linear part, shifted by (dx, dy) in the target space."""
        return AffineMatrix(self.a, self.b, self.c, self.d, self.e + dx, self.f + dy)

    def as_tuple(self) -> Tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)
