from __future__ import annotations

import json
from io import BytesIO
from pathlib import Path

import pytest
from pypdf import PdfReader

from core.config.config_service import ConfigService
from core.event_log.logic.event_logger import EventLogger
from signature.exceptions import CorruptDocument, InvalidArgument
from signature.logic.naming_strategy import DefaultSuffixStrategy, NamingContext, download_filename
from signature.logic.signature_service import SignatureService
from signature.models.signature_enums import SkipReason
from signature.models.signature_field import SignatureField


@pytest.fixture
def config(tmp_path: Path) -> ConfigService:
    return ConfigService(defaults_ini=tmp_path / "defaults.ini",
                         machine_ini=tmp_path / "config.ini",
                         user_ini=tmp_path / "user.ini")


@pytest.fixture
def events(tmp_path: Path) -> EventLogger:
    return EventLogger(tmp_path / "events.db")


@pytest.fixture
def service(config: ConfigService, events: EventLogger) -> SignatureService:
    return SignatureService(config=config, event_logger=events)


def test_finalize_embeds_signer_records(service, events, pdf_bytes, png_data_uri) -> None:
    records = [
        {"_id": "s1", "signatureData": {"page": 1, "x": 60, "y": 80, "image": png_data_uri}},
        {"_id": "s2", "signatureData": {"page": 3, "image": png_data_uri, "rotation": 90}},
    ]
    result = service.finalize(pdf_bytes, records, reference_id="doc-1")

    assert result.ok
    assert len(PdfReader(BytesIO(result.pdf_bytes)).pages) == 3
    logged = [e.event for e in events.query_logs(reference_id="doc-1")]
    assert "FinalizeStart" in logged and "FinalizeSuccess" in logged


def test_skipped_fields_reported_in_record_order(service, events, pdf_bytes, png_bytes) -> None:
    records = [
        {"id": "ok", "page": 1, "image": png_bytes},
        {"id": "far", "page": 12, "image": png_bytes},
        {"id": "flat", "page": 1, "width": 0, "image": png_bytes},
        {"id": "gif", "page": 2, "image": png_bytes, "imageFormat": "gif"},
    ]
    result = service.finalize(pdf_bytes, records, reference_id="doc-2")

    assert [(s.field_id, s.reason) for s in result.skipped] == [
        ("far", SkipReason.OUT_OF_RANGE_PAGE),
        ("flat", SkipReason.INVALID_FIELD),
        ("gif", SkipReason.UNSUPPORTED_FORMAT),
    ]
    warnings = events.query_logs(event="FieldSkipped", level="WARNING")
    assert len(warnings) == 3
    summary = json.loads(events.query_logs(event="FinalizeSuccess")[0].message)
    assert summary["embedded"] == 1
    assert [s["id"] for s in summary["skipped"]] == ["far", "flat", "gif"]


def test_corrupt_document_is_logged_and_raised(service, events, png_bytes) -> None:
    with pytest.raises(CorruptDocument):
        service.finalize(b"%PDF-1.7 broken", [{"id": "a", "image": png_bytes}], reference_id="doc-3")
    failed = events.query_logs(event="FinalizeFailed")
    assert failed and failed[0].log_level == "ERROR"
    assert failed[0].message.startswith("CorruptDocument")


def test_defaults_come_from_config(tmp_path, events, monkeypatch) -> None:
    monkeypatch.setenv("INKSWIFT_SIGNATURE__DEFAULT_WIDTH", "240")
    cfg = ConfigService(defaults_ini=tmp_path / "d.ini", machine_ini=tmp_path / "m.ini",
                        user_ini=tmp_path / "u.ini")
    fields, invalid = SignatureService(config=cfg, event_logger=events).normalize_fields([{"id": "w"}])
    assert not invalid
    assert fields[0].width == 240.0
    assert fields[0].height == 60.0


def test_normalize_keeps_ready_fields(service) -> None:
    ready = SignatureField(id="r", page=1, x=0, y=0, width=10, height=10)
    fields, invalid = service.normalize_fields([ready, "not a record"])
    assert fields == [ready]
    assert [(s.field_id, s.reason) for s in invalid] == [("1", SkipReason.INVALID_FIELD)]


def test_finalize_file_uses_suffix_strategy(service, tmp_path, pdf_bytes, png_bytes) -> None:
    src = tmp_path / "contract.pdf"
    src.write_bytes(pdf_bytes)
    out_path, result = service.finalize_file(str(src), [{"id": "a", "image": png_bytes}])

    assert out_path == str(tmp_path / "contract_signed.pdf")
    assert Path(out_path).read_bytes() == result.pdf_bytes


def test_finalize_file_unknown_strategy(service, tmp_path) -> None:
    with pytest.raises(InvalidArgument):
        service.finalize_file(str(tmp_path / "x.pdf"), [], strategy_id="nope")


def test_naming_helpers() -> None:
    strat = DefaultSuffixStrategy()
    assert strat.propose_output_path(NamingContext(input_path="/a/b.PDF")) == "/a/b_signed.PDF"
    assert strat.propose_output_path(NamingContext(input_path="/a/scan.tif")) == "/a/scan_signed.pdf"
    assert download_filename("Lease Agreement") == "Lease Agreement.pdf"
    assert download_filename("nda.pdf") == "nda.pdf"
    assert download_filename(None) == "signed-document.pdf"
    assert download_filename("  ") == "signed-document.pdf"


def test_handle_limits_come_from_config(tmp_path, events, monkeypatch) -> None:
    monkeypatch.setenv("INKSWIFT_SIGNATURE__MIN_WIDTH", "90")
    monkeypatch.setenv("INKSWIFT_SIGNATURE__ROTATION_STEP", "45")
    cfg = ConfigService(defaults_ini=tmp_path / "d.ini", machine_ini=tmp_path / "m.ini",
                        user_ini=tmp_path / "u.ini")
    svc = SignatureService(config=cfg, event_logger=events)
    field = SignatureField(id="h", page=1, x=100, y=100, width=180, height=60)

    shrunk = svc.resize_field(field, "se", 0, 0)
    assert (shrunk.width, shrunk.height) == (90.0, 20.0)
    assert svc.rotate_field(field, "left").rotation == -45.0


def test_configured_log_level_applies_to_own_event_log(tmp_path, monkeypatch, pdf_bytes, png_bytes) -> None:
    db = tmp_path / "levels.db"
    monkeypatch.setenv("INKSWIFT_LOGGING__EVENTS_DB", str(db))
    monkeypatch.setenv("INKSWIFT_LOGGING__LEVEL", "WARNING")
    cfg = ConfigService(defaults_ini=tmp_path / "d.ini", machine_ini=tmp_path / "m.ini",
                        user_ini=tmp_path / "u.ini")

    SignatureService(config=cfg).finalize(pdf_bytes, [{"id": "far", "page": 9, "image": png_bytes}])

    assert [e.event for e in EventLogger(db).fetch_logs()] == ["FieldSkipped"]
