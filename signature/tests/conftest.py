"""Shared fixtures: in-memory PDFs and signature images."""
from __future__ import annotations

import base64
from io import BytesIO

import pytest
from PIL import Image
from pypdf import PdfWriter

LETTER = (612.0, 792.0)


def make_pdf(pages: int = 3, size: tuple[float, float] = LETTER) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=size[0], height=size[1])
    buf = BytesIO()
    writer.write(buf)
    return buf.getvalue()


def make_image(fmt: str, size: tuple[int, int] = (120, 40)) -> bytes:
    mode = "RGBA" if fmt == "PNG" else "RGB"
    img = Image.new(mode, size, (20, 30, 160, 255) if mode == "RGBA" else (20, 30, 160))
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf(3)


@pytest.fixture
def png_bytes() -> bytes:
    return make_image("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image("JPEG")


@pytest.fixture
def gif_bytes() -> bytes:
    return make_image("GIF")


@pytest.fixture
def png_data_uri(png_bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
