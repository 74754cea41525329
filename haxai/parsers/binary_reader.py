"""Document reading: type detection and text extraction.

Classifies course-material files into three categories:
  - TEXT: Read as UTF-8 (txt, md, html, csv, json, ...)
  - DOCUMENT: Extract text content (PDF, DOCX, PPTX, XLSX)
  - UNSUPPORTED: Images, archives and other binaries (skipped)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_FILE_SIZE = 25 * 1024 * 1024  # 25 MB per material file

# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


class FileCategory(Enum):
    TEXT = "text"
    DOCUMENT = "document"
    UNSUPPORTED = "unsupported"


@dataclass
class ReadResult:
    """Result of reading a single file."""

    category: FileCategory
    text: str | None = None
    filename: str = ""
    error: str | None = None
    truncated: bool = False


# ---------------------------------------------------------------------------
# Extension → category mapping
# ---------------------------------------------------------------------------

TEXT_EXTENSIONS = frozenset({".txt", ".md", ".markdown", ".html", ".htm", ".csv", ".json", ".rst"})
MARKUP_EXTENSIONS = frozenset({".html", ".htm", ".md", ".markdown"})
DOCUMENT_EXTENSIONS = frozenset({".pdf", ".docx", ".pptx", ".xlsx"})


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def classify_file(path: Path) -> FileCategory:
    """Classify a file by its extension."""
    ext = path.suffix.lower()
    if ext in DOCUMENT_EXTENSIONS:
        return FileCategory.DOCUMENT
    if ext in TEXT_EXTENSIONS:
        return FileCategory.TEXT
    return FileCategory.UNSUPPORTED


def read_file(path: Path, max_chars: int | None = None) -> ReadResult:
    """Read a file, dispatching to the appropriate handler by category.

    ``max_chars`` truncates the extracted text; ``truncated`` records
    whether anything was cut.
    """
    category = classify_file(path)
    filename = path.name

    if category == FileCategory.UNSUPPORTED:
        return ReadResult(category=category, filename=filename, error=f"Unsupported file type: {path.suffix}")

    try:
        size = path.stat().st_size
    except OSError as e:
        return ReadResult(category=category, filename=filename, error=str(e))
    if size > MAX_FILE_SIZE:
        return ReadResult(
            category=category,
            filename=filename,
            error=f"File too large ({size // (1024 * 1024)}MB > {MAX_FILE_SIZE // (1024 * 1024)}MB limit)",
        )

    if category == FileCategory.DOCUMENT:
        result = _read_document(path, filename)
    else:
        result = _read_text(path, filename)

    if result.text is not None and max_chars is not None and len(result.text) > max_chars:
        result.text = result.text[:max_chars]
        result.truncated = True
    return result


# ---------------------------------------------------------------------------
# Text files
# ---------------------------------------------------------------------------


def _read_text(path: Path, filename: str) -> ReadResult:
    """Read file as UTF-8 text."""
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
        return ReadResult(category=FileCategory.TEXT, text=text, filename=filename)
    except OSError as e:
        return ReadResult(category=FileCategory.TEXT, filename=filename, error=str(e))


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def _read_document(path: Path, filename: str) -> ReadResult:
    """Extract text from a document file."""
    ext = path.suffix.lower()
    try:
        if ext == ".pdf":
            text = _extract_pdf(path)
        elif ext == ".docx":
            text = _extract_docx(path)
        elif ext == ".pptx":
            text = _extract_pptx(path)
        elif ext == ".xlsx":
            text = _extract_xlsx(path)
        else:
            return ReadResult(
                category=FileCategory.DOCUMENT,
                filename=filename,
                error=f"Unsupported document type: {ext}",
            )

        if not text or not text.strip():
            return ReadResult(
                category=FileCategory.DOCUMENT,
                filename=filename,
                error="No text content could be extracted",
            )

        return ReadResult(category=FileCategory.DOCUMENT, text=text, filename=filename)
    except ImportError as e:
        logger.warning("Missing library for %s: %s", ext, e)
        return ReadResult(
            category=FileCategory.DOCUMENT,
            filename=filename,
            error=f"Missing library: {e}. Install with: pip install pypdf python-docx python-pptx openpyxl",
        )
    except Exception as e:
        logger.warning("Failed to extract %s: %s", filename, e)
        return ReadResult(
            category=FileCategory.DOCUMENT,
            filename=filename,
            error=str(e),
        )


# ---------------------------------------------------------------------------
# Format-specific extractors
# ---------------------------------------------------------------------------


def _extract_pdf(path: Path) -> str:
    """Extract page text from a PDF."""
    from pypdf import PdfReader

    reader = PdfReader(str(path))
    pages: list[str] = []
    for i, page in enumerate(reader.pages):
        text = page.extract_text()
        if text and text.strip():
            pages.append(f"[Page {i + 1}]\n{text}")
    return "\n\n".join(pages)


def _extract_docx(path: Path) -> str:
    """Extract paragraph text from a Word document."""
    from docx import Document

    doc = Document(str(path))
    return "\n\n".join(p.text for p in doc.paragraphs if p.text.strip())


def _extract_pptx(path: Path) -> str:
    """Extract text frames from a PowerPoint presentation."""
    from pptx import Presentation

    prs = Presentation(str(path))
    slides: list[str] = []
    for i, slide in enumerate(prs.slides):
        texts = [
            shape.text_frame.text
            for shape in slide.shapes
            if shape.has_text_frame and shape.text_frame.text.strip()
        ]
        if texts:
            slides.append(f"[Slide {i + 1}]\n" + "\n".join(texts))
    return "\n\n".join(slides)


def _extract_xlsx(path: Path) -> str:
    """Extract cell text from an Excel workbook."""
    from openpyxl import load_workbook

    wb = load_workbook(str(path), read_only=True, data_only=True)
    sheets: list[str] = []
    try:
        for sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
            rows: list[str] = []
            for row in ws.iter_rows(values_only=True):
                row_text = " | ".join(str(c) if c is not None else "" for c in row)
                if row_text.strip(" |"):
                    rows.append(row_text)
            if rows:
                sheets.append(f"[Sheet: {sheet_name}]\n" + "\n".join(rows))
    finally:
        wb.close()
    return "\n\n".join(sheets)
