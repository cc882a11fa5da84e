"""Shared fixtures: sample resumes and real PDF / Word document builders."""

import io
from typing import List

import pytest

from resume_intake.parsers.base_parser import DOCX_MEDIA_TYPE, PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE, UploadedFile


SAMPLE_RESUME = """Jane Doe
jane.doe@example.com

EXPERIENCE
Senior Engineer at Google
2020 - Present
Mountain View, CA
- Led team of engineers building Python services
- Improved performance by 50%

Software Engineer at Acme Corp
2016 - 2020
- Built REST APIs with Django

EDUCATION
Stanford University
B.S. in Computer Science
2012 - 2016
GPA: 3.8

SKILLS
Python, JavaScript, Docker, Communication, Leadership

AWARDS
• Employee of the Year - 2022
"""

# Enough text to pass the decoders, but no section headings at all
NO_SECTIONS_TEXT = (
    "Jane Doe lives in a small town by the sea and enjoys long walks with her dog.\n"
    "She likes reading novels on rainy afternoons and baking bread on weekends.\n"
)


def make_pdf(lines: List[str]) -> bytes:
    """Build a single-page PDF showing ``lines`` in Helvetica."""
    content = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        content.append(f"({escaped}) Tj T*")
    content.append("ET")
    stream = "\n".join(content).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    output = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(output))
        output += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(output)
    output += b"xref\n0 %d\n" % (len(objects) + 1)
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += b"%010d 00000 n \n" % offset
    output += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(output)


def make_docx(paragraphs: List[str], table_rows: List[List[str]] = None) -> bytes:
    """Build a Word document with the given paragraphs and an optional table."""
    import docx

    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    if table_rows:
        table = document.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for row, values in zip(table.rows, table_rows):
            for cell, value in zip(row.cells, values):
                cell.text = value

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def text_upload(text: str, name: str = "resume.txt") -> UploadedFile:
    return UploadedFile(name=name, content=text.encode("utf-8"), media_type=TEXT_MEDIA_TYPE)


@pytest.fixture
def sample_resume_text():
    return SAMPLE_RESUME


@pytest.fixture
def sample_text_file():
    return text_upload(SAMPLE_RESUME)


@pytest.fixture
def sample_pdf_file():
    # The standard PDF fonts cannot show the bullet character
    content = make_pdf(SAMPLE_RESUME.replace("•", "-").strip().splitlines())
    return UploadedFile(name="resume.pdf", content=content, media_type=PDF_MEDIA_TYPE)


@pytest.fixture
def sample_docx_file():
    content = make_docx(SAMPLE_RESUME.strip().splitlines())
    return UploadedFile(name="resume.docx", content=content, media_type=DOCX_MEDIA_TYPE)
