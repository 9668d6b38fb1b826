from __future__ import annotations

import logging
from io import BytesIO
from typing import Iterable, List, Union

from PIL import Image
from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..exceptions.errors import (
    CorruptDocument,
    ImageDecodeError,
    InvalidArgument,
    OutOfRangePage,
    UnsupportedFormat,
)
from ..models.affine_matrix import AffineMatrix
from ..models.embed_result import EmbedResult, SkippedField
from ..models.signature_enums import ImageFormat, SkipReason
from ..models.signature_field import SignatureField
from .image_decoding import decode_image_payload, load_signature_image
from .placement_matrix import compute_placement_matrix

logger = logging.getLogger(__name__)

# errors that cost one field, not the whole document
_FIELD_ERRORS = (OutOfRangePage, UnsupportedFormat, ImageDecodeError)
# what pypdf raises on broken structure, at parse, merge or write time
_PDF_ERRORS = (PyPdfError, ValueError, KeyError, TypeError, IndexError)


class PdfSigner:
    @staticmethod
    def _make_overlay(page_w: float, page_h: float, image: Image.Image,
                      matrix: AffineMatrix) -> bytes:
        """
        Build a one-page overlay (same size as the target page) that draws
        *image* at its native pixel size under *matrix*. The matrix carries
        all positioning, scaling and rotation.
        """
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=(page_w, page_h), invariant=1)
        c.saveState()
        c.transform(*matrix.as_tuple())
        c.drawImage(ImageReader(image), 0, 0, width=image.width, height=image.height, mask="auto")
        c.restoreState()
        c.save()
        return buf.getvalue()

    @staticmethod
    def _draw(page: PageObject, image: Image.Image, matrix: AffineMatrix) -> None:
        box = page.mediabox
        overlay_pdf = PdfSigner._make_overlay(float(box.width), float(box.height), image, matrix)
        overlay_reader = PdfReader(BytesIO(overlay_pdf))
        page.merge_page(overlay_reader.pages[0])

    @staticmethod
    def _load_document(pdf_bytes: bytes) -> PdfWriter:
        if not isinstance(pdf_bytes, (bytes, bytearray)):
            raise InvalidArgument(f"pdf_bytes must be bytes, got {type(pdf_bytes).__name__}")
        try:
            reader = PdfReader(BytesIO(bytes(pdf_bytes)))
            if reader.is_encrypted and not reader.decrypt(""):
                raise CorruptDocument("document is encrypted")
            return PdfWriter(clone_from=reader)
        except _PDF_ERRORS as exc:
            raise CorruptDocument(f"cannot parse PDF: {exc}") from exc

    # -------- Public API -----------------------------------------------------
    @staticmethod
    def embed_field(page: PageObject, image_bytes: bytes,
                    image_format: Union[str, ImageFormat], matrix: AffineMatrix) -> None:
        """
        Decode a PNG/JPEG signature and draw it onto *page* under *matrix*.

        :raises UnsupportedFormat: image is not PNG/JPEG
        :raises ImageDecodeError: image bytes are unreadable
        """
        image = load_signature_image(image_bytes, image_format)
        PdfSigner._draw(page, image, matrix)

    @staticmethod
    def embed_all_fields(pdf_bytes: bytes, fields: Iterable[SignatureField]) -> EmbedResult:
        """
        Draw every field's signature onto its page and return the new PDF.

        Fields are processed in order. A field on a missing page or with an
        unusable image is skipped and reported in ``EmbedResult.skipped``;
        unparseable PDF bytes raise :class:`CorruptDocument`.
        """
        writer = PdfSigner._load_document(pdf_bytes)
        page_count = len(writer.pages)
        skipped: List[SkippedField] = []

        for field in fields:
            try:
                PdfSigner._embed_one(writer, field, page_count)
            except _FIELD_ERRORS as exc:
                logger.warning("Skipping signature field %s: %s", field.id, exc)
                skipped.append(SkippedField(field.id, SkipReason(exc.reason), str(exc)))

        out = BytesIO()
        try:
            writer.write(out)
        except _PDF_ERRORS as exc:
            # lazily parsed objects can still turn out broken on write
            raise CorruptDocument(f"cannot serialize PDF: {exc}") from exc
        return EmbedResult(pdf_bytes=out.getvalue(), skipped=skipped)

    @staticmethod
    def _embed_one(writer: PdfWriter, field: SignatureField, page_count: int) -> None:
        if not 1 <= field.page <= page_count:
            raise OutOfRangePage(f"page {field.page} not in 1..{page_count}")
        try:
            page = writer.pages[field.page - 1]
            box = page.mediabox
            page_h, left, bottom = float(box.height), float(box.left), float(box.bottom)
        except _PDF_ERRORS as exc:
            raise CorruptDocument(f"cannot read page {field.page}: {exc}") from exc

        image_bytes = decode_image_payload(field.image)
        image = load_signature_image(image_bytes, field.image_format)

        matrix = compute_placement_matrix(field, image.width, image.height, page_h)
        # media boxes need not start at (0, 0)
        matrix = matrix.translated(left, bottom)
        try:
            PdfSigner._draw(page, image, matrix)
        except _PDF_ERRORS as exc:
            # content streams are parsed lazily, on merge
            raise CorruptDocument(f"cannot draw on page {field.page}: {exc}") from exc


embed_field = PdfSigner.embed_field
embed_all_fields = PdfSigner.embed_all_fields
