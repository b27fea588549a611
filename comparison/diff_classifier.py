"""Classify unmatched fragments into deleted, added, and modified regions."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from comparison.fragment_matcher import match_fragments
from comparison.models import DiffResult, MatchState, NormalizedBox, RegionPair
from config.settings import Settings, settings as default_settings
from utils.logging import logger
from utils.text_normalization import joined_text


def texts_equal(boxes_a: Sequence[NormalizedBox], boxes_b: Sequence[NormalizedBox]) -> bool:
    """True when both pages read the same once each fragment is trimmed and joined."""
    return joined_text(b.text for b in boxes_a) == joined_text(b.text for b in boxes_b)


def classify(
    boxes_a: Sequence[NormalizedBox],
    boxes_b: Sequence[NormalizedBox],
    match_state: MatchState,
    tolerance: Optional[float] = None,
    config: Optional[Settings] = None,
) -> DiffResult:
    """
    Build the diff result for one page pair from a finished match.

    Rules:
    - Identical joined text returns an empty, unchanged result.
    - Any textual difference sets ``has_changes``; it is never reset.
    - Regions are skipped when nothing is unmatched and both sides are at
      least ``coverage_ratio_threshold`` matched. The result then reports
      changes with empty region lists.
    - Unmatched A boxes become ``deleted``, unmatched B boxes ``added``.
    - Every unmatched A/B pair closer than ``2 * tolerance`` with different
      text becomes a ``modified`` pair. A box may take part in several pairs.

    Args:
        boxes_a: Normalized boxes of the old page
        boxes_b: Normalized boxes of the new page
        match_state: Output of ``match_fragments`` for the same boxes
        tolerance: Search radius; defaults to ``config.match_tolerance``
        config: Settings override (defaults to the module settings)

    Returns:
        DiffResult
    """
    result = DiffResult()
    if texts_equal(boxes_a, boxes_b):
        return result

    cfg = config or default_settings
    tol = cfg.match_tolerance if tolerance is None else tolerance
    epsilon = cfg.dedup_epsilon

    unmatched_a = [boxes_a[i] for i in match_state.unmatched_a(len(boxes_a)) if boxes_a[i].key]
    unmatched_b = [boxes_b[i] for i in match_state.unmatched_b(len(boxes_b)) if boxes_b[i].key]

    ratio_a = len(match_state.matched_a) / max(len(boxes_a), 1)
    ratio_b = len(match_state.matched_b) / max(len(boxes_b), 1)

    result.has_changes = True

    threshold = cfg.coverage_ratio_threshold
    if not unmatched_a and not unmatched_b and ratio_a >= threshold and ratio_b >= threshold:
        logger.debug(
            "Text differs but every fragment matched (%.2f / %.2f); no regions emitted",
            ratio_a,
            ratio_b,
        )
        return result

    result.deleted = [box.to_region() for box in unmatched_a]
    result.added = [box.to_region() for box in unmatched_b]

    modified: List[RegionPair] = []
    _pair_nearby(unmatched_a, unmatched_b, tol, epsilon, modified)

    # Broader sweep over every box the matcher left uncommitted.
    leftover_a = [box for i, box in enumerate(boxes_a) if i not in match_state.matched_a and box.key]
    leftover_b = [box for i, box in enumerate(boxes_b) if i not in match_state.matched_b and box.key]
    _pair_nearby(leftover_a, leftover_b, tol, epsilon, modified)

    result.modified = modified
    logger.debug(
        "Classified page: %d deleted, %d added, %d modified",
        len(result.deleted),
        len(result.added),
        len(result.modified),
    )
    return result


def pair_modified(
    boxes_a: Iterable[NormalizedBox],
    boxes_b: Iterable[NormalizedBox],
    tolerance: float,
    emitted: Optional[List[RegionPair]] = None,
    epsilon: Optional[float] = None,
) -> List[RegionPair]:
    """
    Pair nearby boxes with different text into deduplicated RegionPairs.

    ``emitted`` carries pairs from earlier sweeps of the same page; new pairs
    are appended to it and the list is returned. Pairs whose anchors all lie
    within ``epsilon`` of an emitted pair are skipped.
    """
    pairs: List[RegionPair] = [] if emitted is None else emitted
    eps = default_settings.dedup_epsilon if epsilon is None else epsilon
    _pair_nearby(list(boxes_a), list(boxes_b), tolerance, eps, pairs)
    return pairs


def _pair_nearby(
    boxes_a: Sequence[NormalizedBox],
    boxes_b: Sequence[NormalizedBox],
    tolerance: float,
    epsilon: float,
    emitted: List[RegionPair],
) -> None:
    limit = tolerance * 2
    for box_a in boxes_a:
        for box_b in boxes_b:
            if box_a.distance_to(box_b) >= limit or box_a.key == box_b.key:
                continue
            pair = RegionPair.from_boxes(box_a, box_b)
            if any(pair.same_anchors(existing, epsilon) for existing in emitted):
                continue
            emitted.append(pair)


def diff_boxes(
    boxes_a: Sequence[NormalizedBox],
    boxes_b: Sequence[NormalizedBox],
    tolerance: Optional[float] = None,
    config: Optional[Settings] = None,
) -> Tuple[DiffResult, MatchState]:
    """Run the text fast path, matching, and classification for one page pair."""
    if texts_equal(boxes_a, boxes_b):
        return DiffResult(), MatchState()
    state = match_fragments(boxes_a, boxes_b, tolerance, config)
    return classify(boxes_a, boxes_b, state, tolerance, config), state


def get_diff_summary(result: DiffResult) -> dict:
    """Count regions per category for one page."""
    return {
        "has_changes": result.has_changes,
        "deleted": len(result.deleted),
        "added": len(result.added),
        "modified": len(result.modified),
    }
