from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Protocol, Optional

FALLBACK_DOWNLOAD_NAME = "signed-document"


@dataclass(frozen=True)
class NamingContext:
    input_path: str
    reference_id: Optional[str] = None


class NamingStrategy(Protocol):
    def strategy_id(self) -> str: ...
    def propose_output_path(self, ctx: NamingContext) -> str: ...


class DefaultSuffixStrategy:
    """Default: file.pdf -> file_signed.pdf"""
    def strategy_id(self) -> str:
        return "default_suffix"
    def propose_output_path(self, ctx: NamingContext) -> str:
        root, ext = os.path.splitext(ctx.input_path)
        if ext.lower() != ".pdf":
            ext = ".pdf"
        return f"{root}_signed{ext}"


def download_filename(original_name: Optional[str]) -> str:
    """Attachment name for the finalized PDF: '<original>.pdf' or 'signed-document.pdf'."""
    name = os.path.basename((original_name or "").strip()) or FALLBACK_DOWNLOAD_NAME
    if name.lower().endswith(".pdf"):
        name = name[:-4] or FALLBACK_DOWNLOAD_NAME
    return f"{name}.pdf"
