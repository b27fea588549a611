"""Input validation helpers."""
from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from comparison.errors import InputMalformed
from comparison.models import TextFragment

SUPPORTED_EXTENSIONS = {".pdf"}


def validate_pdf_path(path: str | os.PathLike) -> Path:
    pdf_path = Path(path)
    if not pdf_path.exists():
        raise ValueError(f"File not found: {pdf_path}")
    if pdf_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported file type: {pdf_path.suffix}")
    return pdf_path


def _number(value: Any, name: str, *, required: bool) -> Optional[float]:
    if value is None:
        if required:
            raise InputMalformed(f"Fragment is missing '{name}'")
        return None
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InputMalformed(f"Fragment field '{name}' is not numeric: {value!r}") from exc
    if not math.isfinite(number):
        if required:
            raise InputMalformed(f"Fragment field '{name}' is not finite: {value!r}")
        return None
    return number


def coerce_fragment(raw: Mapping[str, Any]) -> TextFragment:
    """
    Build a TextFragment from a loosely shaped mapping.

    Accepted keys:
    - text: ``text`` or ``str``
    - anchor: ``x``/``y``, ``origin_x``/``origin_y``, or a six-element
      ``transform`` text matrix whose last two entries are the anchor
    - optional ``width``, ``height``, ``font_size`` and ``font_height``
      (taken from ``transform[0]`` and ``transform[3]`` when absent)

    Width and height default to zero and are estimated later; a missing or
    non-finite anchor cannot be defaulted and raises InputMalformed.
    """
    text = raw.get("text", raw.get("str"))
    if not isinstance(text, str):
        raise InputMalformed(f"Fragment text must be a string, got {type(text).__name__}")

    transform = raw.get("transform")
    if transform is not None and len(transform) != 6:
        raise InputMalformed(f"Fragment transform must have 6 entries, got {len(transform)}")

    x = raw.get("x", raw.get("origin_x"))
    y = raw.get("y", raw.get("origin_y"))
    font_size = raw.get("font_size")
    font_height = raw.get("font_height")
    if transform is not None:
        x = transform[4] if x is None else x
        y = transform[5] if y is None else y
        font_size = transform[0] if font_size is None else font_size
        font_height = transform[3] if font_height is None else font_height

    return TextFragment(
        text=text,
        origin_x=_number(x, "x", required=True),
        origin_y=_number(y, "y", required=True),
        width=_number(raw.get("width"), "width", required=False) or 0.0,
        height=_number(raw.get("height"), "height", required=False) or 0.0,
        font_size=_number(font_size, "font_size", required=False) or 0.0,
        font_height=_number(font_height, "font_height", required=False) or 0.0,
    )
