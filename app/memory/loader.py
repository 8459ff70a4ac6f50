# app/memory/loader.py

"""
Ingestion loader for uploaded documents.

Architecture contract:
upload → validate → read as text → cleanup by kind → DocumentRecord

Supports:
- HTML (tags stripped)
- Plain text
- PDF (best-effort: only bytes that decode as text are kept)
- Markdown (formatting preserved)

No binary parsing or OCR happens here. A PDF with compressed streams or
images yields little or no usable text and fails with EmptyContentError.
"""

import logging
import re
import uuid
from typing import Optional, Union

from app.config import Settings
from app.errors import EmptyContentError, UnsupportedInputError
from app.models import DocumentRecord

logger = logging.getLogger(__name__)


KIND_HTML = "html"
KIND_TEXT = "text"
KIND_PDF = "pdf"
KIND_MARKDOWN = "markdown"

_KIND_BY_MEDIA_TYPE = {
    "text/html": KIND_HTML,
    "text/plain": KIND_TEXT,
    "application/pdf": KIND_PDF,
    "text/markdown": KIND_MARKDOWN,
}

_KIND_BY_EXTENSION = {
    ".html": KIND_HTML,
    ".htm": KIND_HTML,
    ".txt": KIND_TEXT,
    ".pdf": KIND_PDF,
    ".md": KIND_MARKDOWN,
}

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_PDF_NOISE_RE = re.compile(r"[^\w\s.,!?;:()-]", re.ASCII)


# ============================================================
# VALIDATION
# ============================================================

def byte_size(raw: Union[bytes, str]) -> int:

    if isinstance(raw, str):
        return len(raw.encode("utf-8"))

    return len(raw)


def validate_file_size(size: int, settings: Settings):

    if size > settings.max_file_size:

        limit_mb = settings.max_file_size / (1024 * 1024)

        raise UnsupportedInputError(
            UnsupportedInputError.SIZE,
            f"File size exceeds {limit_mb:g}MB limit",
            details={"size": size, "max_file_size": settings.max_file_size},
        )


def base_media_type(media_type: Optional[str]) -> str:
    """Strip parameters: text/plain; charset=utf-8 -> text/plain."""
    return (media_type or "").split(";")[0].strip().lower()


def is_supported_type(
    media_type: Optional[str],
    filename: Optional[str],
    settings: Settings,
) -> bool:

    if base_media_type(media_type) in settings.supported_file_types:
        return True

    name = (filename or "").lower()

    return any(
        name.endswith(ext.lower()) for ext in settings.allowed_file_extensions
    )


def validate_file_type(
    media_type: Optional[str],
    filename: Optional[str],
    settings: Settings,
):

    if not is_supported_type(media_type, filename, settings):

        raise UnsupportedInputError(
            UnsupportedInputError.TYPE,
            "Unsupported file type. Please upload PDF, TXT, MD, or HTML files.",
            details={"media_type": media_type, "filename": filename},
        )


# ============================================================
# CLEANUP
# ============================================================

def resolve_kind(media_type: Optional[str], filename: Optional[str] = None) -> str:
    """
    Pick the cleanup rule for an input.

    The declared media type wins. Browsers often send an empty or generic
    type for .md files, so the extension is the fallback.
    """

    kind = _KIND_BY_MEDIA_TYPE.get(base_media_type(media_type))

    if kind:
        return kind

    name = (filename or "").lower()

    for ext, ext_kind in _KIND_BY_EXTENSION.items():
        if name.endswith(ext):
            return ext_kind

    return KIND_MARKDOWN


def clean_text(content: str, kind: str) -> str:

    if kind == KIND_HTML:
        content = _TAG_RE.sub(" ", content)
        return _WHITESPACE_RE.sub(" ", content).strip()

    if kind == KIND_PDF:
        content = _WHITESPACE_RE.sub(" ", content)
        return _PDF_NOISE_RE.sub(" ", content).strip()

    if kind == KIND_TEXT:
        return _WHITESPACE_RE.sub(" ", content).strip()

    # markdown keeps its formatting
    return content.strip()


def read_as_text(raw: Union[bytes, str]) -> str:
    """Decode as UTF-8, dropping a leading byte-order mark."""

    if isinstance(raw, str):
        return raw.lstrip("\ufeff")

    return raw.decode("utf-8-sig", errors="replace")


# ============================================================
# MAIN ENTRY POINTS
# ============================================================

def normalize(
    raw: Union[bytes, str],
    media_type: Optional[str],
    settings: Settings,
    filename: Optional[str] = None,
) -> str:
    """
    Validate an upload and return its cleaned text.

    Raises:
        UnsupportedInputError: size above the ceiling or type not allowed
        EmptyContentError: nothing usable left after cleanup
    """

    validate_file_size(byte_size(raw), settings)

    validate_file_type(media_type, filename, settings)

    kind = resolve_kind(media_type, filename)

    text = clean_text(read_as_text(raw), kind)

    if not text:
        raise EmptyContentError()

    return text


def generate_document_id() -> str:
    return f"doc_{uuid.uuid4().hex[:12]}"


def ingest(
    raw: Union[bytes, str],
    filename: str,
    media_type: Optional[str],
    settings: Settings,
) -> DocumentRecord:

    size = byte_size(raw)

    logger.info(
        "ingestion_started",
        extra={"file_name": filename, "media_type": media_type, "size": size},
    )

    try:

        content = normalize(raw, media_type, settings, filename=filename)

    except (UnsupportedInputError, EmptyContentError) as e:

        logger.warning(
            "ingestion_rejected",
            extra={"file_name": filename, "kind": e.kind, "error": e.message},
        )

        raise

    record = DocumentRecord(
        id=generate_document_id(),
        name=filename,
        media_type=media_type or "",
        size=size,
        content=content,
    )

    logger.info(
        "ingestion_completed",
        extra={
            "doc_id": record.id,
            "file_name": filename,
            "characters": len(content),
        },
    )

    return record
