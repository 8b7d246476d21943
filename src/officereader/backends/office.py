"""Excel, Word and PowerPoint extraction backends.

Each kind has a library-backed reader (openpyxl, python-docx, python-pptx)
and a raw OOXML fallback that reads the zip package directly. Sheets and
slides become pages; a Word document is a single page.
"""

import re
import zipfile
from pathlib import Path
from typing import Any, Iterable, Optional
from xml.etree import ElementTree

from officereader.backends.descriptor import (
    BackendDescriptor,
    BackendTier,
    has_module,
    join_pages,
)
from officereader.models import DocumentKind

NS = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "s": "http://schemas.openxmlformats.org/spreadsheetml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "rel": "http://schemas.openxmlformats.org/package/2006/relationships",
}


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("|", "\\|").replace("\n", " ")


def rows_to_markdown(rows: Iterable[Iterable[Any]]) -> str:
    """Render rows as a markdown table; the first row is the header."""
    table = [[_cell_text(v) for v in row] for row in rows]
    table = [row for row in table if any(cell.strip() for cell in row)]
    if not table:
        return "Empty sheet"

    width = max(len(row) for row in table)
    lines = []
    for i, row in enumerate(table):
        padded = row + [""] * (width - len(row))
        lines.append("| " + " | ".join(padded) + " |")
        if i == 0:
            lines.append("| " + " | ".join(["---"] * width) + " |")
    return "\n".join(lines)


# Library-backed readers


def extract_xlsx(path: Path) -> str:
    """Extract every sheet with openpyxl as a markdown table."""
    from openpyxl import load_workbook

    workbook = load_workbook(str(path), read_only=True, data_only=True)
    sheets: list[str] = []
    try:
        for worksheet in workbook.worksheets:
            table = rows_to_markdown(worksheet.iter_rows(values_only=True))
            sheets.append(f"## Sheet: {worksheet.title}\n\n{table}")
    finally:
        workbook.close()
    return join_pages(sheets)


def extract_docx(path: Path) -> str:
    """Extract paragraphs (headings as markdown) and tables with python-docx."""
    from docx import Document

    document = Document(str(path))
    parts: list[str] = []
    for paragraph in document.paragraphs:
        text = paragraph.text.strip()
        if not text:
            continue
        style = paragraph.style.name if paragraph.style is not None else ""
        level = _heading_level(style)
        parts.append(f"{'#' * level} {text}" if level else text)

    for table in document.tables:
        rows = [[cell.text.strip() for cell in row.cells] for row in table.rows]
        parts.append(rows_to_markdown(rows))

    return join_pages(["\n\n".join(parts)])


def _heading_level(style_name: str) -> int:
    match = re.match(r"Heading (\d)", style_name or "")
    if match:
        return min(int(match.group(1)), 6)
    return 1 if style_name == "Title" else 0


def extract_pptx(path: Path) -> str:
    """Extract slide text, tables and notes with python-pptx."""
    from pptx import Presentation

    presentation = Presentation(str(path))
    slides: list[str] = []
    for number, slide in enumerate(presentation.slides, 1):
        parts = [f"## Slide {number}"]
        for shape in slide.shapes:
            if getattr(shape, "has_table", False):
                rows = [[cell.text for cell in row.cells] for row in shape.table.rows]
                parts.append(rows_to_markdown(rows))
            elif shape.has_text_frame and shape.text_frame.text.strip():
                parts.append(shape.text_frame.text.strip())
        if slide.has_notes_slide:
            notes = slide.notes_slide.notes_text_frame
            if notes is not None and notes.text.strip():
                parts.append(f"Notes: {notes.text.strip()}")
        slides.append("\n\n".join(parts))
    return join_pages(slides)


# Raw OOXML readers (zip + XML, no third-party parser)


def _paragraph_texts(root: ElementTree.Element, prefix: str) -> list[str]:
    texts = []
    for paragraph in root.iter(f"{{{NS[prefix]}}}p"):
        runs = [node.text or "" for node in paragraph.iter(f"{{{NS[prefix]}}}t")]
        line = "".join(runs).strip()
        if line:
            texts.append(line)
    return texts


def extract_docx_xml(path: Path) -> str:
    """Read word/document.xml paragraphs directly."""
    with zipfile.ZipFile(path, "r") as zf:
        root = ElementTree.fromstring(zf.read("word/document.xml"))
    return join_pages(["\n\n".join(_paragraph_texts(root, "w"))])


def _slide_number(name: str) -> int:
    match = re.search(r"slide(\d+)\.xml$", name)
    return int(match.group(1)) if match else 0


def extract_pptx_xml(path: Path) -> str:
    """Read ppt/slides/slideN.xml text runs directly, in slide order."""
    slides: list[str] = []
    with zipfile.ZipFile(path, "r") as zf:
        names = [
            n for n in zf.namelist()
            if n.startswith("ppt/slides/slide") and n.endswith(".xml")
        ]
        for name in sorted(names, key=_slide_number):
            root = ElementTree.fromstring(zf.read(name))
            lines = _paragraph_texts(root, "a")
            slides.append("\n\n".join([f"## Slide {_slide_number(name)}", *lines]))
    if not slides:
        raise ValueError("No slides found in presentation")
    return join_pages(slides)


def _column_index(ref: str) -> int:
    letters = re.match(r"[A-Z]+", ref or "")
    if not letters:
        return 0
    index = 0
    for letter in letters.group(0):
        index = index * 26 + (ord(letter) - ord("A") + 1)
    return index - 1


def _shared_strings(zf: zipfile.ZipFile) -> list[str]:
    try:
        root = ElementTree.fromstring(zf.read("xl/sharedStrings.xml"))
    except KeyError:
        return []
    strings = []
    for item in root.iter(f"{{{NS['s']}}}si"):
        strings.append("".join(t.text or "" for t in item.iter(f"{{{NS['s']}}}t")))
    return strings


def _sheet_targets(zf: zipfile.ZipFile) -> list[tuple[str, str]]:
    """Return (sheet name, zip member) pairs in workbook order."""
    workbook = ElementTree.fromstring(zf.read("xl/workbook.xml"))
    rels = ElementTree.fromstring(zf.read("xl/_rels/workbook.xml.rels"))
    targets = {
        rel.get("Id"): rel.get("Target", "")
        for rel in rels.iter(f"{{{NS['rel']}}}Relationship")
    }
    sheets = []
    for sheet in workbook.iter(f"{{{NS['s']}}}sheet"):
        target = targets.get(sheet.get(f"{{{NS['r']}}}id"), "")
        target = target.lstrip("/")
        member = target if target.startswith("xl/") else f"xl/{target}"
        sheets.append((sheet.get("name", ""), member))
    return sheets


def _cell_value(cell: ElementTree.Element, shared: list[str]) -> Optional[str]:
    cell_type = cell.get("t")
    if cell_type == "inlineStr":
        return "".join(t.text or "" for t in cell.iter(f"{{{NS['s']}}}t"))
    value = cell.find("s:v", NS)
    if value is None or value.text is None:
        return None
    if cell_type == "s":
        return shared[int(value.text)]
    return value.text


def extract_xlsx_xml(path: Path) -> str:
    """Read worksheet XML directly, resolving shared strings."""
    sheets: list[str] = []
    with zipfile.ZipFile(path, "r") as zf:
        shared = _shared_strings(zf)
        for name, member in _sheet_targets(zf):
            root = ElementTree.fromstring(zf.read(member))
            rows = []
            for row in root.iter(f"{{{NS['s']}}}row"):
                values: list[Optional[str]] = []
                for cell in row.iter(f"{{{NS['s']}}}c"):
                    column = _column_index(cell.get("r", ""))
                    while len(values) < column:
                        values.append(None)
                    values.append(_cell_value(cell, shared))
                rows.append(values)
            sheets.append(f"## Sheet: {name}\n\n{rows_to_markdown(rows)}")
    return join_pages(sheets)


def office_backends() -> list[BackendDescriptor]:
    """Build Excel, Word and PowerPoint descriptors."""
    return [
        BackendDescriptor(
            name="openpyxl",
            kind=DocumentKind.XLSX,
            tier=BackendTier.MID_NATIVE,
            extract=extract_xlsx,
            available=has_module("openpyxl"),
            description="openpyxl workbook reader",
        ),
        BackendDescriptor(
            name="xlsx-xml",
            kind=DocumentKind.XLSX,
            tier=BackendTier.PURE_FALLBACK,
            extract=extract_xlsx_xml,
            description="Raw OOXML worksheet reader",
        ),
        BackendDescriptor(
            name="python-docx",
            kind=DocumentKind.DOCX,
            tier=BackendTier.MID_NATIVE,
            extract=extract_docx,
            available=has_module("docx"),
            description="python-docx document reader",
        ),
        BackendDescriptor(
            name="docx-xml",
            kind=DocumentKind.DOCX,
            tier=BackendTier.PURE_FALLBACK,
            extract=extract_docx_xml,
            description="Raw OOXML document reader",
        ),
        BackendDescriptor(
            name="python-pptx",
            kind=DocumentKind.PPTX,
            tier=BackendTier.MID_NATIVE,
            extract=extract_pptx,
            available=has_module("pptx"),
            description="python-pptx presentation reader",
        ),
        BackendDescriptor(
            name="pptx-xml",
            kind=DocumentKind.PPTX,
            tier=BackendTier.PURE_FALLBACK,
            extract=extract_pptx_xml,
            description="Raw OOXML slide reader",
        ),
    ]
