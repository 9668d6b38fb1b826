# signature/models/embed_result.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .signature_enums import SkipReason


@dataclass(frozen=True)
class SkippedField:
    """Diagnostic for a field that was left out of an embedding pass."""
    field_id: str
    reason: SkipReason
    detail: Optional[str] = None

    def as_dict(self) -> dict:
        return {"id": self.field_id, "reason": self.reason.value}


@dataclass(frozen=True)
class EmbedResult:
    pdf_bytes: bytes = field(repr=False)
    skipped: List[SkippedField] = field(default_factory=list)

    @property
    def skipped_ids(self) -> List[str]:
        return [s.field_id for s in self.skipped]

    @property
    def ok(self) -> bool:
        """True when every field was embedded."""
        return not self.skipped
