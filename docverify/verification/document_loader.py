from dataclasses import dataclass

from docverify.logging.logger import Log
from docverify.pdf.base import BasePdfRenderer
from docverify.pdf.exceptions import PdfRenderError
from docverify.verification.exceptions import InvalidDocumentError
from docverify.verification.models import DocumentType, VerificationRequest

SUPPORTED_MIME_TYPES: dict[str, str] = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "pdf": "application/pdf",
}

_MAGIC_BYTES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "jpeg"),
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"%PDF-", "pdf"),
)


def sniff_format(document_bytes: bytes) -> str | None:
    """Identify the file format from its leading bytes."""
    for magic, name in _MAGIC_BYTES:
        if document_bytes.startswith(magic):
            return name
    return None


@dataclass(frozen=True)
class PreparedDocument:
    """Submitted bytes plus the raster image the analysis stages consume."""

    raw_bytes: bytes
    image_bytes: bytes
    format: str


class DocumentLoader:
    """Validates submitted bytes and turns PDFs into a raster image."""

    def __init__(
        self,
        pdf_renderer: BasePdfRenderer,
        *,
        max_document_bytes: int,
    ) -> None:
        self._pdf_renderer = pdf_renderer
        self._max_document_bytes = max_document_bytes

    def load(self, request: VerificationRequest) -> PreparedDocument:
        """Validate a request and prepare its image.

        Raises:
            InvalidDocumentError: for empty, oversized, unsupported or
                unrenderable documents, or an unknown document type.
        """
        if not isinstance(request.document_type, DocumentType):
            raise InvalidDocumentError(f"Unknown document type: {request.document_type!r}")
        raw = request.document_bytes
        if not raw:
            raise InvalidDocumentError("Document is empty")
        if len(raw) > self._max_document_bytes:
            raise InvalidDocumentError(
                f"Document is {len(raw)} bytes, limit is {self._max_document_bytes}"
            )

        fmt = sniff_format(raw)
        if fmt is None:
            raise InvalidDocumentError("Unsupported file type. Only JPG, PNG and PDF are allowed")
        if fmt != "pdf":
            return PreparedDocument(raw_bytes=raw, image_bytes=raw, format=fmt)

        try:
            image_bytes = self._pdf_renderer.render_first_page(raw)
        except PdfRenderError as exc:
            raise InvalidDocumentError(f"PDF cannot be rendered: {exc}") from exc
        Log.debug(
            "Rendered PDF first page", png_bytes=len(image_bytes), dpi=self._pdf_renderer.dpi
        )
        return PreparedDocument(raw_bytes=raw, image_bytes=image_bytes, format=fmt)
