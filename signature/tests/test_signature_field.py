from __future__ import annotations

import pytest

from signature.exceptions import InvalidArgument
from signature.models.signature_field import FieldDefaults, SignatureField, normalize_image_format


def test_from_record_applies_defaults_once() -> None:
    field = SignatureField.from_record({"id": "s1", "image": "AAAA"})
    assert (field.page, field.x, field.y) == (1, 50.0, 50.0)
    assert (field.width, field.height, field.rotation) == (180.0, 60.0, 0.0)
    assert field.image_format == "png"


def test_from_record_reads_signer_shape(png_data_uri: str) -> None:
    record = {
        "_id": "64f0c0ffee",
        "email": "signer@example.com",
        "signatureData": {
            "page": 2, "x": 10, "y": 20, "width": 90, "height": 30,
            "rotation": 15, "image": png_data_uri, "type": "draw",
        },
    }
    field = SignatureField.from_record(record)
    assert field.id == "64f0c0ffee"
    assert (field.page, field.x, field.y, field.width, field.height) == (2, 10.0, 20.0, 90.0, 30.0)
    assert field.rotation == 15.0
    assert field.image == png_data_uri
    assert field.image_format == "png"


def test_from_record_reads_overlay_shape() -> None:
    record = {"id": 7, "page": 1, "x": 5, "y": 5,
              "signature": {"data": "data:image/jpg;base64,/9j/", "type": "upload"}}
    field = SignatureField.from_record(record)
    assert field.id == "7"
    assert field.image_format == "jpeg"


def test_explicit_format_wins_over_data_uri() -> None:
    field = SignatureField.from_record(
        {"id": "x", "image": "data:image/png;base64,AAAA", "imageFormat": "gif"})
    assert field.image_format == "gif"


def test_zero_coordinates_are_kept() -> None:
    field = SignatureField.from_record({"id": "z", "x": 0, "y": 0, "rotation": 0})
    assert (field.x, field.y) == (0.0, 0.0)


def test_custom_defaults() -> None:
    d = FieldDefaults(width=200.0, height=80.0, image_format="jpeg")
    field = SignatureField.from_record({"id": "c"}, defaults=d)
    assert (field.width, field.height, field.image_format) == (200.0, 80.0, "jpeg")


def test_fallback_id_used_when_record_has_none() -> None:
    assert SignatureField.from_record({}, fallback_id="3").id == "3"
    with pytest.raises(InvalidArgument):
        SignatureField.from_record({})


@pytest.mark.parametrize("overrides", [
    {"page": 0}, {"page": -1}, {"page": 1.5}, {"page": True},
    {"width": 0}, {"height": -3}, {"x": float("nan")}, {"rotation": float("inf")},
    {"y": "12"},
])
def test_invalid_values_rejected(overrides) -> None:
    base = dict(id="v", page=1, x=0.0, y=0.0, width=10.0, height=10.0)
    base.update(overrides)
    with pytest.raises(InvalidArgument):
        SignatureField(**base)


def test_whole_float_page_from_json_is_accepted() -> None:
    assert SignatureField.from_record({"id": "p", "page": 2.0}).page == 2


def test_normalize_image_format() -> None:
    assert normalize_image_format("JPG") == "jpeg"
    assert normalize_image_format("image/png") == "png"
    assert normalize_image_format("gif") == "gif"
    assert normalize_image_format(None) is None
