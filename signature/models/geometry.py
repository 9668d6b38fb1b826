# signature/models/geometry.py
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .numbers import require_positive


class ScreenPoint(NamedTuple):
    """Rendered pixels, origin top-left of the page, Y grows downward."""
    x: float
    y: float


class PdfPoint(NamedTuple):
    """PDF points (1/72 inch), origin bottom-left of the page, Y grows upward."""
    x: float
    y: float


class Bounds(NamedTuple):
    left: float
    top: float
    right: float
    bottom: float


@dataclass(frozen=True)
class RenderContext:
    """
    Size of one rendered page. Recomputed by the renderer whenever the page
    is (re)drawn at a different size; never shared as mutable state.

    scale = screen pixels per PDF point.
    """
    page_width_points: float
    page_height_points: float
    scale: float

    def __post_init__(self) -> None:
        require_positive("page_width_points", self.page_width_points)
        require_positive("page_height_points", self.page_height_points)
        require_positive("scale", self.scale)

    @classmethod
    def from_rendered_size(cls, rendered_width_px: float, page_width_points: float,
                           page_height_points: float) -> "RenderContext":
        rendered_width_px = require_positive("rendered_width_px", rendered_width_px)
        page_width_points = require_positive("page_width_points", page_width_points)
        return cls(
            page_width_points=page_width_points,
            page_height_points=page_height_points,
            scale=rendered_width_px / page_width_points,
        )

    def to_pdf(self, screen_x: float, screen_y: float,
               field_height_points: float = 0.0) -> PdfPoint:
        from ..logic.coordinate_transform import screen_to_pdf  # lazy
        return screen_to_pdf(screen_x, screen_y, self.page_height_points, self.scale,
                             field_height_points)

    def to_screen(self, pdf_x: float, pdf_y: float) -> ScreenPoint:
        from ..logic.coordinate_transform import pdf_to_screen  # lazy
        return pdf_to_screen(pdf_x, pdf_y, self.page_height_points, self.scale)
