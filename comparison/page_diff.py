"""Per-page decisions: which pages to copy, flag, or diff between two versions."""
from __future__ import annotations

from typing import Any, Iterator, List, Mapping, Optional, Protocol, Sequence

from comparison.diff_classifier import diff_boxes
from comparison.errors import PageProcessingFailed
from comparison.models import DiffResult, PageDecision, PageText
from config.settings import Settings
from utils.coordinates import normalize_fragments
from utils.logging import logger
from utils.text_normalization import collapse_whitespace
from utils.validation import coerce_fragment


class PageSource(Protocol):
    """Anything that can hand over pages of one document version."""

    @property
    def page_count(self) -> int: ...

    def load_page(self, page_num: int) -> PageText: ...


class InMemoryPageSource:
    """PageSource over an already extracted list of pages (1-based lookup)."""

    def __init__(self, pages: Sequence[PageText]):
        self._pages = list(pages)

    @classmethod
    def from_raw(cls, pages: Sequence[Mapping[str, Any]]) -> "InMemoryPageSource":
        """
        Build a source from plain mappings, e.g. fragments dumped by another extractor.

        Each page mapping carries ``height``, optional ``width`` and a
        ``fragments`` list accepted by ``coerce_fragment``. Malformed
        fragments raise ``InputMalformed``.
        """
        return cls(
            [
                PageText(
                    page_num=page_num,
                    height=float(page["height"]),
                    width=float(page.get("width") or 0.0),
                    fragments=[coerce_fragment(raw) for raw in page.get("fragments", [])],
                )
                for page_num, page in enumerate(pages, start=1)
            ]
        )

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def load_page(self, page_num: int) -> PageText:
        return self._pages[page_num - 1]


def diff_page(
    page_a: PageText,
    page_b: PageText,
    tolerance: Optional[float] = None,
    config: Optional[Settings] = None,
) -> DiffResult:
    """Normalize both pages with their own heights, then match and classify."""
    boxes_a = normalize_fragments(page_a.fragments, page_a.height, config)
    boxes_b = normalize_fragments(page_b.fragments, page_b.height, config)
    result, _ = diff_boxes(boxes_a, boxes_b, tolerance, config)
    return result


def decide_page(
    page_num: int,
    page_a: Optional[PageText],
    page_b: Optional[PageText],
    tolerance: Optional[float] = None,
    config: Optional[Settings] = None,
) -> PageDecision:
    """
    Decide how one page index is represented in the diff output.

    Args:
        page_num: 1-based page number
        page_a: Page from the old version, or None if it has fewer pages
        page_b: Page from the new version, or None if it has fewer pages
        tolerance: Matching tolerance override
        config: Settings override (defaults to the module settings)

    Returns:
        PageDecision
    """
    if page_a is None and page_b is None:
        raise ValueError(f"Page {page_num} exists in neither version")
    if page_a is None:
        return PageDecision.only_in_b(page_num)
    if page_b is None:
        return PageDecision.only_in_a(page_num)

    if collapse_whitespace(page_a.joined_raw_text()) == collapse_whitespace(page_b.joined_raw_text()):
        return PageDecision.identical(page_num)

    result = diff_page(page_a, page_b, tolerance, config)
    if not result.has_changes:
        return PageDecision.identical(page_num)
    return PageDecision.differs(page_num, result)


def iter_page_decisions(
    source_a: PageSource,
    source_b: PageSource,
    tolerance: Optional[float] = None,
    config: Optional[Settings] = None,
) -> Iterator[PageDecision]:
    """
    Yield one decision per page number, in ascending order.

    A failure while loading or diffing a page is logged and reported as a
    ``failed`` decision; the remaining pages are still processed. Callers
    stop early simply by not consuming the rest of the iterator.
    """
    count_a = source_a.page_count
    count_b = source_b.page_count
    total = max(count_a, count_b)
    logger.info("Comparing %d vs %d pages", count_a, count_b)

    for page_num in range(1, total + 1):
        has_a = page_num <= count_a
        has_b = page_num <= count_b
        try:
            page_a = source_a.load_page(page_num) if has_a else None
            page_b = source_b.load_page(page_num) if has_b else None
            decision = decide_page(page_num, page_a, page_b, tolerance, config)
        except Exception as exc:
            failure = PageProcessingFailed(page_num, exc)
            logger.warning("%s; falling back to an unmodified copy", failure)
            yield PageDecision.failed(page_num, str(exc), has_a=has_a, has_b=has_b)
            continue

        logger.debug("Page %d: %s", page_num, decision.kind)
        yield decision


def decide_pages(
    pages_a: Sequence[PageText],
    pages_b: Sequence[PageText],
    tolerance: Optional[float] = None,
    config: Optional[Settings] = None,
) -> List[PageDecision]:
    """Eager variant of ``iter_page_decisions`` for already extracted pages."""
    return list(
        iter_page_decisions(InMemoryPageSource(pages_a), InMemoryPageSource(pages_b), tolerance, config)
    )
