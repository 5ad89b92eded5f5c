"""Test helper utilities for recruitment workbench tests."""

from .documents import SAMPLE_RESUME, make_docx, make_pdf, write_text

__all__ = ["SAMPLE_RESUME", "make_docx", "make_pdf", "write_text"]
