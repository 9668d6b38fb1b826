# signature/logic/signature_service.py
from __future__ import annotations

import hashlib
import json
import logging
import sqlite3
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from core.config.config_service import ConfigService, config_service
from core.event_log.logic.event_logger import EventLogger

from ..exceptions.errors import InvalidArgument, SignatureError
from ..models.embed_result import EmbedResult, SkippedField
from ..models.signature_enums import ResizeHandle, RotateDirection, SkipReason
from ..models.signature_field import FieldDefaults, SignatureField
from .field_geometry import HandleLimits, resize_from_handle, rotate_field
from .naming_strategy import DefaultSuffixStrategy, NamingContext, NamingStrategy
from .pdf_signer import PdfSigner

logger = logging.getLogger(__name__)

_FEATURE_ID = "Signature"


def _record_id(record: Any, index: int) -> str:
    if isinstance(record, SignatureField):
        return record.id
    if isinstance(record, Mapping):
        rid = record.get("id")
        if rid is None:
            rid = record.get("_id")
        if rid is not None:
            return str(rid)
    return str(index)


class SignatureService:
    """
    Finalize-and-download orchestration (no UI, no HTTP).

    Persisted field records are normalized once with the configured defaults,
    embedded into the source PDF, and the outcome is written to the event log.
    Call :meth:`finalize` exactly once per finalization; there is no
    already-signed guard at this layer.
    """

    def __init__(self, *, config: Optional[ConfigService] = None,
                 event_logger: Optional[EventLogger] = None,
                 naming_registry: Optional[dict[str, NamingStrategy]] = None) -> None:
        self._cfg = config or config_service
        self._event_log = event_logger
        self._strategies: dict[str, NamingStrategy] = {"default_suffix": DefaultSuffixStrategy()}
        if naming_registry:
            self._strategies.update(naming_registry)

    # -------- Internal helpers ----------------------------------------------
    def _events(self) -> Optional[EventLogger]:
        if self._event_log is None and self._cfg.logging.enabled:
            log_cfg = self._cfg.logging
            self._event_log = EventLogger.instance(log_cfg.events_db, min_level=log_cfg.level)
        return self._event_log

    def _log(self, event: str, *, level: str = "INFO",
             reference_id: Optional[str] = None, message: Optional[str] = None) -> None:
        events = self._events()
        if events is None:
            return
        try:
            events.log(_FEATURE_ID, event, level=level,
                       reference_id=reference_id, message=message)
        except sqlite3.Error as exc:
            # the signed document matters more than its log line
            logger.warning("Event log write failed (%s/%s): %s", _FEATURE_ID, event, exc)

    # -------- Ingestion ------------------------------------------------------
    def field_defaults(self) -> FieldDefaults:
        return FieldDefaults.from_config(self._cfg.signature)

    def normalize_fields(self, records: Iterable[Any]) -> Tuple[List[SignatureField], List[SkippedField]]:
        """
        Turn persisted records into validated fields.
        Records that cannot form a valid field come back as ``InvalidField`` diagnostics.
        """
        defaults = self.field_defaults()
        fields: List[SignatureField] = []
        invalid: List[SkippedField] = []
        for idx, rec in enumerate(records):
            if isinstance(rec, SignatureField):
                fields.append(rec)
                continue
            try:
                fields.append(SignatureField.from_record(rec, defaults=defaults, fallback_id=str(idx)))
            except InvalidArgument as exc:
                invalid.append(SkippedField(_record_id(rec, idx), SkipReason.INVALID_FIELD, str(exc)))
        return fields, invalid

    # -------- Field editing --------------------------------------------------
    def handle_limits(self) -> HandleLimits:
        return HandleLimits.from_config(self._cfg.signature)

    def resize_field(self, field: SignatureField, handle: ResizeHandle | str,
                     pointer_x: float, pointer_y: float) -> SignatureField:
        """Corner resize clamped to the configured minimum box size."""
        limits = self.handle_limits()
        return resize_from_handle(field, handle, pointer_x, pointer_y,
                                  min_width=limits.min_width, min_height=limits.min_height)

    def rotate_field(self, field: SignatureField, direction: RotateDirection | str) -> SignatureField:
        """Rotate one configured step left or right."""
        return rotate_field(field, direction, self.handle_limits().rotation_step)

    # -------- Finalize -------------------------------------------------------
    def finalize(self, pdf_bytes: bytes, records: Iterable[Any], *,
                 reference_id: Optional[str] = None) -> EmbedResult:
        """
        Embed all signature records into *pdf_bytes*.

        Skipped fields (invalid record, missing page, unusable image) are
        listed in record order in ``EmbedResult.skipped``.
        :raises CorruptDocument: source PDF cannot be parsed (nothing is produced)
        """
        records = list(records)
        order = {_record_id(rec, idx): idx for idx, rec in reversed(list(enumerate(records)))}
        fields, invalid = self.normalize_fields(records)

        self._log("FinalizeStart", reference_id=reference_id,
                  message=f"{len(records)} record(s), {len(fields)} valid")
        try:
            result = PdfSigner.embed_all_fields(pdf_bytes, fields)
        except SignatureError as exc:
            self._log("FinalizeFailed", level="ERROR", reference_id=reference_id,
                      message=f"{exc.reason}: {exc}")
            raise

        skipped = sorted(invalid + result.skipped, key=lambda s: order.get(s.field_id, len(records)))
        for s in skipped:
            self._log("FieldSkipped", level="WARNING", reference_id=reference_id,
                      message=f"{s.field_id}: {s.reason.value} ({s.detail})")

        self._log("FinalizeSuccess", reference_id=reference_id, message=json.dumps({
            "embedded": len(fields) - len(result.skipped),
            "skipped": [s.as_dict() for s in skipped],
            "output_sha256": hashlib.sha256(result.pdf_bytes).hexdigest(),
        }))
        return EmbedResult(pdf_bytes=result.pdf_bytes, skipped=skipped)

    def finalize_file(self, input_path: str, records: Iterable[Any], *,
                      override_output: Optional[str] = None,
                      strategy_id: str = "default_suffix",
                      reference_id: Optional[str] = None) -> Tuple[str, EmbedResult]:
        """File-based :meth:`finalize`; returns the output path and the result."""
        if override_output:
            out_path = override_output
        else:
            strat = self._strategies.get(strategy_id)
            if not strat:
                raise InvalidArgument(f"Unknown naming strategy '{strategy_id}'.")
            out_path = strat.propose_output_path(
                NamingContext(input_path=input_path, reference_id=reference_id))

        result = self.finalize(Path(input_path).read_bytes(), records,
                               reference_id=reference_id or input_path)
        Path(out_path).write_bytes(result.pdf_bytes)
        return out_path, result
