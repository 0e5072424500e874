"""
Resume loading and normalization.

A PDF resume is kept as raw bytes and handed to the model as a multimodal
attachment; no local text extraction is attempted for it. Word documents are
converted to plain text with python-docx, and anything else is read as text.
"""
import io
import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

import docx

from ...config import PDF_MIME_TYPE, TEXT_ENCODING

logger = logging.getLogger("resumes")

PDF_PLACEHOLDER_TEXT = "PDF Binary Processed"


class ResumeExtractionError(Exception):
    """A resume file could not be read or converted to text."""


@dataclass(frozen=True)
class BinaryResume:
    """Resume submitted as opaque bytes (PDF) for a multimodal prompt."""
    content: bytes
    mime_type: str = PDF_MIME_TYPE
    filename: Optional[str] = None


@dataclass(frozen=True)
class TextResume:
    """Resume already converted to plain text."""
    content: str
    filename: Optional[str] = None


ResumeDocument = Union[BinaryResume, TextResume]


def _docx_to_text(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    lines = [para.text for para in document.paragraphs if para.text.strip()]

    # Skills and experience often live in tables
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))

    return "\n".join(lines)


def resume_from_bytes(data: bytes, filename: str) -> ResumeDocument:
    """
    Build a ResumeDocument from uploaded bytes, dispatching on the file extension.

    Raises:
        ResumeExtractionError: If the content cannot be converted
    """
    ext = os.path.splitext(filename or "")[1].lower()

    if ext == ".pdf":
        return BinaryResume(content=data, mime_type=PDF_MIME_TYPE, filename=filename)

    if ext in (".docx", ".doc"):
        try:
            text = _docx_to_text(data)
        except Exception as e:
            raise ResumeExtractionError(f"Could not read Word document {filename}: {e}") from e
        logger.info("Extracted %d characters from %s", len(text), filename)
        return TextResume(content=text, filename=filename)

    return TextResume(content=data.decode(TEXT_ENCODING, errors="replace"), filename=filename)


def load_resume(path: str) -> ResumeDocument:
    """
    Load a resume from disk.

    Raises:
        ResumeExtractionError: If the file is missing or unreadable
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ResumeExtractionError(f"Could not open resume {path}: {e}") from e
    return resume_from_bytes(data, os.path.basename(path))


def describe_resume(resume: Optional[ResumeDocument]) -> str:
    """The resume text stored alongside a candidate record."""
    if resume is None:
        return ""
    if isinstance(resume, BinaryResume):
        return PDF_PLACEHOLDER_TEXT
    return resume.content
