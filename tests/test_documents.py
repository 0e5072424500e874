"""Tests for resume loading."""

import docx
import pytest

from hireflow_screening.infrastructure.documents import (
    BinaryResume, TextResume, ResumeExtractionError,
    describe_resume, load_resume, resume_from_bytes,
)
from hireflow_screening.infrastructure.documents.resumes import PDF_PLACEHOLDER_TEXT


def _write_docx(path):
    document = docx.Document()
    document.add_paragraph("Jane Doe")
    document.add_paragraph("Backend engineer, Node.js and PostgreSQL")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Skills"
    table.rows[0].cells[1].text = "SQL, Docker"
    document.save(str(path))
    return path


def test_pdf_stays_binary(tmp_path):
    path = tmp_path / "cv.pdf"
    path.write_bytes(b"%PDF-1.4 resume")

    resume = load_resume(str(path))

    assert isinstance(resume, BinaryResume)
    assert resume.content == b"%PDF-1.4 resume"
    assert resume.mime_type == "application/pdf"
    assert resume.filename == "cv.pdf"
    assert describe_resume(resume) == PDF_PLACEHOLDER_TEXT


def test_docx_converted_to_text(tmp_path):
    path = _write_docx(tmp_path / "cv.docx")

    resume = load_resume(str(path))

    assert isinstance(resume, TextResume)
    assert "Jane Doe" in resume.content
    assert "Backend engineer, Node.js and PostgreSQL" in resume.content
    assert "Skills | SQL, Docker" in resume.content


def test_corrupt_docx_raises():
    with pytest.raises(ResumeExtractionError):
        resume_from_bytes(b"definitely not a zip archive", "cv.docx")


def test_plain_text_decoded():
    resume = resume_from_bytes("Zoë Smith\nPython".encode("utf-8"), "CV.TXT")

    assert resume == TextResume(content="Zoë Smith\nPython", filename="CV.TXT")
    assert describe_resume(resume) == "Zoë Smith\nPython"


def test_undecodable_bytes_replaced():
    resume = resume_from_bytes(b"abc\xff", "cv.txt")

    assert resume.content.startswith("abc")


def test_missing_file_raises(tmp_path):
    with pytest.raises(ResumeExtractionError):
        load_resume(str(tmp_path / "missing.pdf"))


def test_describe_without_resume():
    assert describe_resume(None) == ""
