"""Assemble the diff PDF: copied pages with highlight overlays and page borders."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Tuple

from comparison.errors import NoOutputProduced
from comparison.models import PageDecision, Region
from config.settings import Settings, settings as default_settings
from utils.logging import logger


Color = Tuple[float, float, float]

COLOR_MAP = {
    "deleted": (1, 0.7, 0.7),     # Light red
    "added": (0.7, 1, 0.7),       # Light green
    "modified": (1, 1, 0.5),      # Yellow
}

BORDER_COLORS = {
    "only_in_a": (1, 0, 0),       # Page removed in the new version
    "only_in_b": (0, 1, 0),       # Page added in the new version
}

OLD_CAPTION = ("Old Version (deletions in red, changes in yellow)", (0.5, 0, 0))
NEW_CAPTION = ("New Version (additions in green, changes in yellow)", (0, 0.5, 0))


def _import_fitz():
    try:
        import fitz  # PyMuPDF
    except ImportError as exc:
        raise RuntimeError(
            "PyMuPDF is required for PDF export. Install via `pip install PyMuPDF`."
        ) from exc
    return fitz


def region_to_rect(region: Region, page_height: float):
    """Convert a bottom-up region into a PyMuPDF (top-down) rectangle."""
    fitz = _import_fitz()
    return fitz.Rect(
        region.x,
        page_height - (region.y + region.height),
        region.x + region.width,
        page_height - region.y,
    )


class DiffDocumentWriter:
    """
    Builds the output document page by page from PageDecisions.

    ``doc_a``/``doc_b`` are open PyMuPDF documents of the old and new
    versions. Pages are appended in the order decisions are written.
    """

    def __init__(self, doc_a, doc_b, config: Optional[Settings] = None):
        fitz = _import_fitz()
        self.doc_a = doc_a
        self.doc_b = doc_b
        self.config = config or default_settings
        self.output = fitz.open()

    @property
    def page_count(self) -> int:
        return self.output.page_count

    def write(self, decision: PageDecision) -> None:
        """Append the page(s) for one decision; a partial write is rolled back."""
        start = self.page_count
        try:
            self._write(decision)
        except Exception:
            self._rollback(start)
            raise

    def write_all(self, decisions: Iterable[PageDecision]) -> None:
        for decision in decisions:
            self.write(decision)

    def write_fallback(self, page_num: int, has_a: bool, has_b: bool) -> bool:
        """Copy whichever version of the page exists. Returns False if nothing was copied."""
        start = self.page_count
        try:
            if has_a:
                self._copy(self.doc_a, page_num)
            elif has_b:
                self._copy(self.doc_b, page_num)
            else:
                return False
        except Exception as exc:
            self._rollback(start)
            logger.warning("Error adding fallback page %d: %s", page_num, exc)
            return False
        return True

    def save(self, output_path: str | Path) -> Path:
        output = Path(output_path)
        if self.page_count == 0:
            raise NoOutputProduced("No pages were added to the diff document")
        self.output.save(output)
        logger.info("Diff PDF generated: %s (%d pages)", output, self.page_count)
        return output

    def close(self) -> None:
        self.output.close()

    def _write(self, decision: PageDecision) -> None:
        kind = decision.kind
        page_num = decision.page_num

        if kind == "only_in_a":
            self._draw_border(self._copy(self.doc_a, page_num), BORDER_COLORS[kind])
        elif kind == "only_in_b":
            self._draw_border(self._copy(self.doc_b, page_num), BORDER_COLORS[kind])
        elif kind == "failed":
            self.write_fallback(page_num, decision.has_a, decision.has_b)
        elif kind == "identical" or decision.diff is None or not decision.diff.has_regions:
            self._copy(self.doc_a, page_num)
        else:
            diff = decision.diff
            self._copy(self.doc_a, page_num)
            self._copy(self.doc_b, page_num)
            # Load both pages only after inserting so neither handle goes stale.
            page_a = self.output[self.output.page_count - 2]
            page_b = self.output[self.output.page_count - 1]

            for region in diff.deleted:
                self._highlight(page_a, region, COLOR_MAP["deleted"])
            for region in diff.added:
                self._highlight(page_b, region, COLOR_MAP["added"])
            for pair in diff.modified:
                self._highlight(page_a, pair.region_a, COLOR_MAP["modified"])
                self._highlight(page_b, pair.region_b, COLOR_MAP["modified"])

            self._caption(page_a, *OLD_CAPTION)
            self._caption(page_b, *NEW_CAPTION)

    def _copy(self, source, page_num: int):
        index = page_num - 1
        self.output.insert_pdf(source, from_page=index, to_page=index)
        return self.output[self.output.page_count - 1]

    def _rollback(self, page_count: int) -> None:
        if self.output.page_count > page_count:
            self.output.delete_pages(from_page=page_count, to_page=self.output.page_count - 1)

    def _highlight(self, page, region: Region, color: Color) -> None:
        page.draw_rect(
            region_to_rect(region, page.rect.height),
            color=None,
            fill=color,
            fill_opacity=self.config.highlight_opacity,
            overlay=True,
        )

    def _draw_border(self, page, color: Color) -> None:
        page.draw_rect(page.rect, color=color, width=self.config.page_border_width, overlay=True)

    def _caption(self, page, text: str, color: Color) -> None:
        page.insert_text(
            (10, self.config.caption_offset),
            text,
            fontsize=self.config.caption_font_size,
            color=color,
        )
