"""Word-level text extraction from digital PDFs using PyMuPDF."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from comparison.models import PageText, TextFragment
from utils.logging import logger


def _import_fitz():
    try:
        import fitz  # PyMuPDF
    except ImportError as exc:
        raise RuntimeError(
            "PyMuPDF is required for PDF parsing. Install via `pip install PyMuPDF`."
        ) from exc
    return fitz


def word_to_fragment(word: Sequence, page_height: float) -> TextFragment:
    """
    Convert a PyMuPDF ``words`` tuple into a fragment anchored in PDF user space.

    PyMuPDF reports top-down rectangles. The anchor is re-expressed as the
    bottom-left corner measured from the page bottom, the same convention as
    a text-matrix baseline, so the normalizer can take it as-is.
    """
    x0, y0, x1, y1, text = word[:5]
    return TextFragment(
        text=text,
        origin_x=float(x0),
        origin_y=float(page_height - y1),
        width=float(x1 - x0),
        height=float(y1 - y0),
    )


def page_to_text(page, page_num: int) -> PageText:
    """Extract the words of one PyMuPDF page."""
    height = page.rect.height
    words = page.get_text("words")
    fragments = [word_to_fragment(word, height) for word in words if str(word[4]).strip()]
    return PageText(
        page_num=page_num,
        width=page.rect.width,
        height=height,
        fragments=fragments,
        raw_text=" ".join(str(word[4]) for word in words),
    )


class PdfPageSource:
    """
    Lazily extracts pages of one PDF version.

    Pages are read on demand so that a failure on one page surfaces while
    that page is processed.
    """

    def __init__(self, path: str | Path, document=None):
        self.path = Path(path)
        if document is None:
            fitz = _import_fitz()
            logger.info("Opening PDF: %s", self.path)
            document = fitz.open(self.path)
        self.document = document

    @property
    def page_count(self) -> int:
        return self.document.page_count

    def load_page(self, page_num: int) -> PageText:
        page = self.document[page_num - 1]
        page_text = page_to_text(page, page_num)
        logger.debug(
            "Extracted %d fragments from %s page %d",
            len(page_text.fragments),
            self.path.name,
            page_num,
        )
        return page_text

    def close(self) -> None:
        if self.document is not None:
            self.document.close()
            self.document = None

    def __enter__(self) -> "PdfPageSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def extract_pages(path: str | Path, page_nums: Optional[Sequence[int]] = None) -> List[PageText]:
    """Extract all (or the selected 1-based) pages of a PDF."""
    with PdfPageSource(path) as source:
        numbers = page_nums or range(1, source.page_count + 1)
        pages = [source.load_page(n) for n in numbers]
    logger.info("Extracted %d pages from %s", len(pages), Path(path).name)
    return pages
