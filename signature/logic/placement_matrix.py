# signature/logic/placement_matrix.py
from __future__ import annotations

import math

from ..models.affine_matrix import AffineMatrix
from ..models.numbers import require_positive
from ..models.signature_field import SignatureField


def draw_origin_y(field: SignatureField, page_height_points: float) -> float:
    """Bottom edge of the drawn box: the stored y is flipped against the page height."""
    return page_height_points - field.y - field.height


def compute_placement_matrix(field: SignatureField, image_width_px: float,
                             image_height_px: float,
                             page_height_points: float) -> AffineMatrix:
    """
    Matrix that draws an image of native size (image_width_px x image_height_px),
    origin (0, 0), into the field box, rotated by ``field.rotation`` degrees
    about the box centre.

    Linear part: scale to the box, then rotate::

        a = sx*cos   c = -sy*sin
        b = sx*sin   d =  sy*cos

    Translation is solved so the image centre lands on the box centre, which
    makes rotation 0 collapse to the exact box
    ``[x, draw_y, x + width, draw_y + height]``.
    """
    image_width_px = require_positive("image_width_px", image_width_px)
    image_height_px = require_positive("image_height_px", image_height_px)
    page_height_points = require_positive("page_height_points", page_height_points)

    scale_x = field.width / image_width_px
    scale_y = field.height / image_height_px

    theta = math.radians(field.rotation)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    # exact zeros keep quarter turns free of 1e-17 noise
    if field.rotation % 90 == 0:
        cos_t, sin_t = round(cos_t), round(sin_t)

    draw_y = draw_origin_y(field, page_height_points)
    center_x = field.x + field.width / 2
    center_y = draw_y + field.height / 2

    a = scale_x * cos_t
    b = scale_x * sin_t
    c = -scale_y * sin_t
    d = scale_y * cos_t

    half_w = image_width_px / 2
    half_h = image_height_px / 2
    e = center_x - (a * half_w + c * half_h)
    f = center_y - (b * half_w + d * half_h)

    return AffineMatrix(a, b, c, d, e, f)
