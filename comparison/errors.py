"""Exceptions raised by the page diff engine and its pipeline."""
from __future__ import annotations

from typing import Optional

__all__ = ["PageDiffError", "InputMalformed", "PageProcessingFailed", "NoOutputProduced"]


class PageDiffError(Exception):
    """Base class for page diff errors."""


class InputMalformed(PageDiffError, ValueError):
    """Raised when a raw fragment lacks geometry that cannot be defaulted."""


class PageProcessingFailed(PageDiffError):
    """Raised when one page's decision could not be computed."""

    def __init__(self, page_num: int, cause: Optional[BaseException] = None):
        self.page_num = page_num
        self.cause = cause
        message = f"Page {page_num} could not be compared"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class NoOutputProduced(PageDiffError):
    """Raised when a comparison finishes without a single output page."""
