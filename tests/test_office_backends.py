import zipfile
from pathlib import Path

import pytest
from docx import Document
from openpyxl import Workbook
from pptx import Presentation
from pptx.util import Inches
from pypdf import PdfWriter

from officereader.backends import PAGE_SEPARATOR, join_pages
from officereader.backends.office import (
    extract_docx,
    extract_docx_xml,
    extract_pptx,
    extract_pptx_xml,
    extract_xlsx,
    extract_xlsx_xml,
    rows_to_markdown,
)
from officereader.backends.pdf import extract_pypdf
from officereader.models import find_page_starts


@pytest.fixture
def workbook_path(tmp_path: Path) -> Path:
    workbook = Workbook()
    data = workbook.active
    data.title = "Data"
    data.append(["Name", "Qty"])
    data.append(["apple", 3])
    data.append(["pear", 5])
    workbook.create_sheet("Blank")
    path = tmp_path / "stock.xlsx"
    workbook.save(path)
    return path


@pytest.fixture
def document_path(tmp_path: Path) -> Path:
    document = Document()
    document.add_heading("Quarterly Report", level=1)
    document.add_paragraph("Revenue grew in every region.")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Region"
    table.cell(0, 1).text = "Growth"
    table.cell(1, 0).text = "North"
    table.cell(1, 1).text = "12%"
    path = tmp_path / "report.docx"
    document.save(path)
    return path


@pytest.fixture
def presentation_path(tmp_path: Path) -> Path:
    presentation = Presentation()
    layout = presentation.slide_layouts[5]  # title only
    first = presentation.slides.add_slide(layout)
    first.shapes.title.text = "Welcome"
    first.notes_slide.notes_text_frame.text = "Greet the audience"
    second = presentation.slides.add_slide(layout)
    second.shapes.title.text = "Roadmap"
    box = second.shapes.add_textbox(Inches(1), Inches(2), Inches(4), Inches(1))
    box.text_frame.text = "Ship the reader"
    path = tmp_path / "deck.pptx"
    presentation.save(path)
    return path


def page_count(text: str) -> int:
    return len(find_page_starts(text))


def test_rows_to_markdown() -> None:
    table = rows_to_markdown([["a", "b|c"], [None, None], [1]])
    assert table.splitlines() == ["| a | b\\|c |", "| --- | --- |", "| 1 |  |"]


def test_rows_to_markdown_empty() -> None:
    assert rows_to_markdown([[None, ""], []]) == "Empty sheet"


def test_join_pages_normalises_breaks() -> None:
    assert join_pages(["a\r\n", "b\fc"]) == f"a{PAGE_SEPARATOR}b\nc"


@pytest.mark.parametrize("extract", [extract_xlsx, extract_xlsx_xml])
def test_workbook_sheets_become_pages(extract, workbook_path: Path) -> None:
    text = extract(workbook_path)
    assert page_count(text) == 2
    assert "## Sheet: Data" in text
    assert "| Name | Qty |" in text
    assert "| apple | 3 |" in text
    assert "## Sheet: Blank" in text
    assert "Empty sheet" in text


@pytest.mark.parametrize("extract", [extract_docx, extract_docx_xml])
def test_word_document_is_one_page(extract, document_path: Path) -> None:
    text = extract(document_path)
    assert page_count(text) == 1
    assert "Quarterly Report" in text
    assert "Revenue grew in every region." in text
    assert "North" in text


def test_word_headings_and_tables(document_path: Path) -> None:
    text = extract_docx(document_path)
    assert "# Quarterly Report" in text
    assert "| Region | Growth |" in text


@pytest.mark.parametrize("extract", [extract_pptx, extract_pptx_xml])
def test_slides_become_pages(extract, presentation_path: Path) -> None:
    text = extract(presentation_path)
    assert page_count(text) == 2
    assert "## Slide 1" in text
    assert "Welcome" in text
    assert "## Slide 2" in text
    assert "Ship the reader" in text


def test_slide_notes(presentation_path: Path) -> None:
    assert "Notes: Greet the audience" in extract_pptx(presentation_path)


def test_pptx_without_slides_fails(tmp_path: Path) -> None:
    path = tmp_path / "hollow.pptx"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
    with pytest.raises(ValueError):
        extract_pptx_xml(path)


def test_corrupt_package_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.docx"
    path.write_bytes(b"not a zip file")
    with pytest.raises(zipfile.BadZipFile):
        extract_docx_xml(path)


def test_pypdf_blank_pages(tmp_path: Path) -> None:
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    writer.add_blank_page(width=72, height=72)
    path = tmp_path / "blank.pdf"
    with open(path, "wb") as f:
        writer.write(f)

    text = extract_pypdf(path)
    assert text.strip() == ""
    assert page_count(text) == 2
