"""Coordinate normalization for extracted text fragments."""
from __future__ import annotations

from typing import Iterable, List, Optional

from comparison.models import NormalizedBox, TextFragment
from config.settings import Settings, settings as default_settings


def estimate_width(fragment: TextFragment, glyph_width: float) -> float:
    """
    Width of a fragment, estimated from its character count when not reported.

    Args:
        fragment: Fragment as reported by the extractor
        glyph_width: Default width of one character at unit font size

    Returns:
        Reported width as-is (a negative value is left for the floor to
        raise), or ``|font_size| * len(text) * glyph_width``; 0.0 when neither
        is available (the floor is applied by the caller)
    """
    if fragment.width:
        return fragment.width
    chars = len(fragment.text) or 1
    return abs(fragment.font_size) * chars * glyph_width


def estimate_height(fragment: TextFragment, default_height: float) -> float:
    """Reported height, else the vertical matrix scale, else the font size, else ``default_height``."""
    if fragment.height:
        return fragment.height
    if fragment.font_height:
        return abs(fragment.font_height)
    if fragment.font_size:
        return abs(fragment.font_size)
    return default_height


def normalize_fragment(
    fragment: TextFragment,
    page_height: float,
    config: Optional[Settings] = None,
) -> NormalizedBox:
    """
    Convert a fragment into a box in the canonical bottom-up frame.

    ``page_height`` must come from the same surface that will receive the
    highlight. The vertical anchor is taken as reported; it is only flipped
    against ``page_height`` when ``invert_y`` is disabled.

    Args:
        fragment: Raw fragment
        page_height: Authoritative height of the page the highlight is drawn on
        config: Settings override (defaults to the module settings)

    Returns:
        NormalizedBox with width/height floored to stay selectable
    """
    cfg = config or default_settings

    width = estimate_width(fragment, cfg.default_glyph_width) or cfg.min_fragment_width
    height = estimate_height(fragment, cfg.default_fragment_height)

    if cfg.invert_y:
        y = fragment.origin_y
    else:
        y = page_height - fragment.origin_y

    return NormalizedBox(
        text=fragment.text,
        x=fragment.origin_x,
        y=y,
        width=max(width, cfg.min_fragment_width),
        height=max(height, cfg.min_fragment_height),
    )


def normalize_fragments(
    fragments: Iterable[TextFragment],
    page_height: float,
    config: Optional[Settings] = None,
) -> List[NormalizedBox]:
    """Normalize a page's fragments, dropping whitespace-only ones."""
    return [
        normalize_fragment(fragment, page_height, config)
        for fragment in fragments
        if not fragment.is_blank()
    ]
