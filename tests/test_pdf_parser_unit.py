from __future__ import annotations

from pathlib import Path

import fitz
import pytest

from extraction.pdf_parser import PdfPageSource, extract_pages, page_to_text, word_to_fragment


def _write_pdf(path: Path, pages: list[list[tuple[float, float, str]]]) -> None:
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page(width=612, height=792)
        for x, y, text in lines:
            page.insert_text((x, y), text, fontsize=12)
    doc.save(str(path))
    doc.close()


def test_word_to_fragment_anchors_bottom_left_from_page_bottom():
    frag = word_to_fragment((10.0, 20.0, 50.0, 32.0, "Hi", 0, 0, 0), page_height=300.0)
    assert frag.text == "Hi"
    assert frag.origin_x == 10.0
    assert frag.origin_y == 268.0
    assert frag.width == 40.0
    assert frag.height == 12.0


def test_page_to_text_extracts_words_with_page_geometry():
    doc = fitz.open()
    page = doc.new_page(width=400, height=500)
    page.insert_text((72, 100), "Hello brave world", fontsize=12)

    page_text = page_to_text(page, 1)

    assert page_text.page_num == 1
    assert page_text.height == pytest.approx(500)
    assert page_text.width == pytest.approx(400)
    assert [f.text for f in page_text.fragments] == ["Hello", "brave", "world"]
    assert page_text.raw_text == "Hello brave world"
    # Baseline at y=100 from the top sits roughly 400pt above the bottom.
    first = page_text.fragments[0]
    assert first.origin_x == pytest.approx(72, abs=1)
    assert 390 < first.origin_y < 405
    doc.close()


def test_pdf_page_source_reads_pages_lazily(tmp_path: Path):
    pdf = tmp_path / "doc.pdf"
    _write_pdf(pdf, [[(72, 72, "first page")], [(72, 72, "second page")]])

    with PdfPageSource(pdf) as source:
        assert source.page_count == 2
        second = source.load_page(2)
        assert second.page_num == 2
        assert second.raw_text == "second page"

    assert source.document is None


def test_extract_pages_selects_pages(tmp_path: Path):
    pdf = tmp_path / "doc.pdf"
    _write_pdf(pdf, [[(72, 72, "one")], [(72, 72, "two")], [(72, 72, "three")]])

    assert [p.raw_text for p in extract_pages(pdf)] == ["one", "two", "three"]
    assert [p.page_num for p in extract_pages(pdf, page_nums=[3, 1])] == [3, 1]


def test_blank_page_has_no_fragments(tmp_path: Path):
    pdf = tmp_path / "blank.pdf"
    _write_pdf(pdf, [[]])
    (page,) = extract_pages(pdf)
    assert page.fragments == []
    assert page.raw_text == ""
