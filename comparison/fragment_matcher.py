"""Position-aware matching of text fragments between two versions of a page."""
from __future__ import annotations

from functools import cmp_to_key
from typing import List, Optional, Sequence, Tuple

from comparison.models import MatchState, NormalizedBox
from config.settings import Settings, settings as default_settings
from utils.logging import logger


IndexedBox = Tuple[int, NormalizedBox]


def reading_order(
    boxes: Sequence[NormalizedBox],
    row_slack: Optional[float] = None,
) -> List[IndexedBox]:
    """
    Sort boxes top-to-bottom, then left-to-right, keeping original indices.

    Boxes whose y differs by no more than ``row_slack`` are treated as one row
    and ordered by ascending x. The comparison is pairwise, so rows are not
    clustered globally.

    Args:
        boxes: Normalized boxes (bottom-up frame, larger y is higher on the page)
        row_slack: Row-grouping slack; defaults to ``settings.row_slack``

    Returns:
        List of (original_index, box) in reading order
    """
    slack = default_settings.row_slack if row_slack is None else row_slack

    def _compare(left: IndexedBox, right: IndexedBox) -> float:
        y_diff = right[1].y - left[1].y
        if abs(y_diff) > slack:
            return y_diff
        return left[1].x - right[1].x

    return sorted(enumerate(boxes), key=cmp_to_key(_compare))


def match_fragments(
    boxes_a: Sequence[NormalizedBox],
    boxes_b: Sequence[NormalizedBox],
    tolerance: Optional[float] = None,
    config: Optional[Settings] = None,
) -> MatchState:
    """
    Greedily pair each box of A with the closest text-equal unmatched box of B.

    A candidate qualifies when its trimmed text equals the A box's text and
    its anchor lies within ``2 * tolerance``. The chosen candidate minimizes
    ``distance + order_penalty * |i_a - i_b|`` over reading-order positions,
    so repeated tokens (page numbers, symbols) pair up in order instead of
    crossing. A commitment is final; later boxes cannot take it over.

    Args:
        boxes_a: Boxes of the old version
        boxes_b: Boxes of the new version
        tolerance: Search radius; defaults to ``config.match_tolerance``
        config: Settings override (defaults to the module settings)

    Returns:
        MatchState with disjoint matched index sets
    """
    cfg = config or default_settings
    tol = cfg.match_tolerance if tolerance is None else tolerance
    limit = tol * 2
    penalty = cfg.order_penalty

    ordered_a = reading_order(boxes_a, cfg.row_slack)
    ordered_b = reading_order(boxes_b, cfg.row_slack)
    state = MatchState()

    for pos_a, (index_a, box_a) in enumerate(ordered_a):
        key_a = box_a.key
        if index_a in state.matched_a or not key_a:
            continue

        best_index: Optional[int] = None
        best_cost = float("inf")

        for pos_b, (index_b, box_b) in enumerate(ordered_b):
            if index_b in state.matched_b or box_b.key != key_a:
                continue

            distance = box_a.distance_to(box_b)
            if distance >= limit:
                continue

            cost = distance + abs(pos_a - pos_b) * penalty
            if cost < best_cost:
                best_cost = cost
                best_index = index_b

        if best_index is not None and best_cost < limit:
            state.commit(index_a, best_index)

    logger.debug(
        "Matched %d/%d fragments of A to %d fragments of B",
        len(state.matched_a),
        len(boxes_a),
        len(boxes_b),
    )
    return state
