"""Builders for résumé documents used across tests.

PDF and Word files are generated on the fly with PyMuPDF and python-docx so
no binary fixtures need to be checked in.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import docx
import pymupdf

SAMPLE_RESUME = """Jane Marie Doe
jane.doe@example.com
(555) 123-4567

Summary: Backend engineer with 5 years of experience.

Education
B.S. in Computer Science, State University

Experience
Acme Corp 2015 - 2019
Globex 2021 - Present

Skills: Python, SQL, Docker, Kubernetes"""


def make_pdf(
    path: Path,
    pages: Sequence[str],
    user_password: Optional[str] = None,
    title: str = "",
) -> Path:
    """Write a PDF with one text block per page.

    Args:
        path: Destination file
        pages: Text of each page (newlines start new lines)
        user_password: Encrypt the file with this password when given
        title: Document title metadata
    """
    doc = pymupdf.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=11)
    if title:
        doc.set_metadata({"title": title, "author": "Test Suite"})

    if user_password:
        doc.save(
            str(path),
            encryption=pymupdf.PDF_ENCRYPT_AES_256,
            owner_pw=user_password + "-owner",
            user_pw=user_password,
        )
    else:
        doc.save(str(path))
    doc.close()
    return path


def make_docx(
    path: Path,
    paragraphs: Iterable[str],
    tables: Optional[List[List[List[str]]]] = None,
    title: str = "",
) -> Path:
    """Write a Word document with paragraphs followed by tables.

    Args:
        path: Destination file
        paragraphs: Paragraph texts in order (empty strings add empty paragraphs)
        tables: Each table as a list of rows, each row a list of cell texts
        title: Core property title
    """
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)

    for rows in tables or []:
        table = document.add_table(rows=len(rows), cols=len(rows[0]))
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value

    if title:
        document.core_properties.title = title
    document.save(str(path))
    return path


def write_text(path: Path, text: str, encoding: str = "utf-8") -> Path:
    """Write text to a file with the given encoding."""
    path.write_bytes(text.encode(encoding))
    return path
