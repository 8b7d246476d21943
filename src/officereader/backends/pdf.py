"""PDF extraction backends, fastest first.

- pypdfium2 (Pdfium): fastest, optional wheel
- PyMuPDF (MuPDF): very fast on large files, optional wheel
- pdftotext (Poppler): external executable, good compatibility
- pypdf: pure Python, slowest, always installed as the backstop
"""

import logging
import shutil
import subprocess
from pathlib import Path

from officereader.backends.descriptor import (
    BackendDescriptor,
    BackendTier,
    has_module,
    join_pages,
)
from officereader.models import DocumentKind

logger = logging.getLogger(__name__)


def extract_pdfium(path: Path) -> str:
    """Extract text with pypdfium2."""
    import pypdfium2 as pdfium

    pdf = pdfium.PdfDocument(str(path))
    pages: list[str] = []
    try:
        for i in range(len(pdf)):
            page = pdf[i]
            textpage = page.get_textpage()
            try:
                pages.append(textpage.get_text_range())
            finally:
                textpage.close()
                page.close()
    finally:
        pdf.close()
    return join_pages(pages)


def extract_pymupdf(path: Path) -> str:
    """Extract text with PyMuPDF."""
    import fitz

    pages: list[str] = []
    with fitz.open(str(path)) as doc:
        for i in range(doc.page_count):
            page_text = doc.load_page(i).get_text("text") or ""
            lines = [line.rstrip() for line in page_text.splitlines()]
            pages.append("\n".join(lines))
    return join_pages(pages)


def extract_pdftotext(path: Path) -> str:
    """Extract text with Poppler's pdftotext executable."""
    executable = shutil.which("pdftotext")
    if executable is None:
        raise RuntimeError("pdftotext executable not found")

    result = subprocess.run(
        [executable, "-enc", "UTF-8", str(path), "-"],
        capture_output=True,
        check=False,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    if result.returncode != 0:
        raise RuntimeError(
            f"pdftotext exit {result.returncode}: {result.stderr.strip()}"
        )

    # pdftotext ends every page, including the last, with a form feed
    pages = result.stdout.split("\f")
    if len(pages) > 1 and not pages[-1].strip():
        pages.pop()
    return join_pages(pages)


def extract_pypdf(path: Path) -> str:
    """Extract text with pypdf (pure Python)."""
    import pypdf

    reader = pypdf.PdfReader(str(path))
    total_pages = len(reader.pages)
    pages: list[str] = []
    for i, page in enumerate(reader.pages):
        pages.append(page.extract_text() or "")
        if (i + 1) % 50 == 0:
            logger.debug(f"pypdf progress {path.name}: page {i + 1}/{total_pages}")
    return join_pages(pages)


def pdf_backends() -> list[BackendDescriptor]:
    """Build PDF descriptors, detecting availability once."""
    return [
        BackendDescriptor(
            name="pdfium",
            kind=DocumentKind.PDF,
            tier=BackendTier.FAST_NATIVE,
            extract=extract_pdfium,
            available=has_module("pypdfium2"),
            description="Google Pdfium via pypdfium2 (fastest)",
        ),
        BackendDescriptor(
            name="pymupdf",
            kind=DocumentKind.PDF,
            tier=BackendTier.MID_NATIVE,
            extract=extract_pymupdf,
            available=has_module("fitz"),
            description="MuPDF via PyMuPDF (very fast for large files)",
        ),
        BackendDescriptor(
            name="pdftotext",
            kind=DocumentKind.PDF,
            tier=BackendTier.COMPAT_NATIVE,
            extract=extract_pdftotext,
            available=shutil.which("pdftotext") is not None,
            description="Poppler pdftotext executable (good compatibility)",
        ),
        BackendDescriptor(
            name="pypdf",
            kind=DocumentKind.PDF,
            tier=BackendTier.PURE_FALLBACK,
            extract=extract_pypdf,
            available=has_module("pypdf"),
            description="pypdf, pure Python (slowest, always installed)",
        ),
    ]
