"""Shared data models for fragment extraction, matching, and page decisions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Set


@dataclass(frozen=True)
class TextFragment:
    """One span of extracted text as reported by the extraction library.

    ``origin_x``/``origin_y`` are the anchor in the extractor's own frame.
    ``width``/``height`` may be zero when the extractor does not report them;
    ``font_size`` is the horizontal text-matrix scale and ``font_height`` the
    vertical one; both are only used to estimate missing extents.
    """

    text: str
    origin_x: float
    origin_y: float
    width: float = 0.0
    height: float = 0.0
    font_size: float = 0.0
    font_height: float = 0.0

    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class NormalizedBox:
    """Fragment geometry in the canonical bottom-up frame of one page pair."""

    text: str
    x: float
    y: float
    width: float
    height: float

    @property
    def key(self) -> str:
        """Trimmed text used for equality checks."""
        return self.text.strip()

    def distance_to(self, other: "NormalizedBox") -> float:
        """Straight-line distance between the two anchors."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def to_region(self) -> "Region":
        return Region(x=self.x, y=self.y, width=self.width, height=self.height)


@dataclass
class MatchState:
    """Matched indices per version; ``pairs`` maps each matched A index to its B index."""

    matched_a: Set[int] = field(default_factory=set)
    matched_b: Set[int] = field(default_factory=set)
    pairs: Dict[int, int] = field(default_factory=dict)

    def commit(self, index_a: int, index_b: int) -> None:
        self.matched_a.add(index_a)
        self.matched_b.add(index_b)
        self.pairs[index_a] = index_b

    def unmatched_a(self, count: int) -> List[int]:
        return [i for i in range(count) if i not in self.matched_a]

    def unmatched_b(self, count: int) -> List[int]:
        return [i for i in range(count) if i not in self.matched_b]


@dataclass(frozen=True)
class Region:
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class RegionPair:
    """A-side and B-side geometry of one in-place edit."""

    x1: float
    y1: float
    width1: float
    height1: float
    x2: float
    y2: float
    width2: float
    height2: float

    @classmethod
    def from_boxes(cls, box_a: NormalizedBox, box_b: NormalizedBox) -> "RegionPair":
        return cls(
            x1=box_a.x,
            y1=box_a.y,
            width1=box_a.width,
            height1=box_a.height,
            x2=box_b.x,
            y2=box_b.y,
            width2=box_b.width,
            height2=box_b.height,
        )

    @property
    def region_a(self) -> Region:
        return Region(x=self.x1, y=self.y1, width=self.width1, height=self.height1)

    @property
    def region_b(self) -> Region:
        return Region(x=self.x2, y=self.y2, width=self.width2, height=self.height2)

    def same_anchors(self, other: "RegionPair", epsilon: float) -> bool:
        return (
            abs(self.x1 - other.x1) < epsilon
            and abs(self.y1 - other.y1) < epsilon
            and abs(self.x2 - other.x2) < epsilon
            and abs(self.y2 - other.y2) < epsilon
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "x1": self.x1,
            "y1": self.y1,
            "width1": self.width1,
            "height1": self.height1,
            "x2": self.x2,
            "y2": self.y2,
            "width2": self.width2,
            "height2": self.height2,
        }


@dataclass
class DiffResult:
    has_changes: bool = False
    deleted: List[Region] = field(default_factory=list)
    added: List[Region] = field(default_factory=list)
    modified: List[RegionPair] = field(default_factory=list)

    @property
    def has_regions(self) -> bool:
        return bool(self.deleted or self.added or self.modified)

    def regions_a(self) -> List[Region]:
        """Regions to highlight on the old page: deletions, then edit sources."""
        return list(self.deleted) + [pair.region_a for pair in self.modified]

    def regions_b(self) -> List[Region]:
        """Regions to highlight on the new page: additions, then edit targets."""
        return list(self.added) + [pair.region_b for pair in self.modified]

    def to_dict(self) -> dict:
        return {
            "has_changes": self.has_changes,
            "deleted": [r.to_dict() for r in self.deleted],
            "added": [r.to_dict() for r in self.added],
            "modified": [p.to_dict() for p in self.modified],
        }


@dataclass
class PageText:
    """One page of one version, as handed over by an extraction collaborator."""

    page_num: int
    height: float
    width: float = 0.0
    fragments: List[TextFragment] = field(default_factory=list)
    raw_text: Optional[str] = None

    def joined_raw_text(self) -> str:
        if self.raw_text is not None:
            return self.raw_text
        return " ".join(fragment.text for fragment in self.fragments)


DecisionKind = Literal["only_in_a", "only_in_b", "identical", "differs", "failed"]


@dataclass
class PageDecision:
    page_num: int
    kind: DecisionKind
    diff: Optional[DiffResult] = None
    error: Optional[str] = None
    has_a: bool = True
    has_b: bool = True

    @classmethod
    def only_in_a(cls, page_num: int) -> "PageDecision":
        return cls(page_num=page_num, kind="only_in_a", has_b=False)

    @classmethod
    def only_in_b(cls, page_num: int) -> "PageDecision":
        return cls(page_num=page_num, kind="only_in_b", has_a=False)

    @classmethod
    def identical(cls, page_num: int) -> "PageDecision":
        return cls(page_num=page_num, kind="identical")

    @classmethod
    def differs(cls, page_num: int, diff: DiffResult) -> "PageDecision":
        return cls(page_num=page_num, kind="differs", diff=diff)

    @classmethod
    def failed(cls, page_num: int, error: str, *, has_a: bool, has_b: bool) -> "PageDecision":
        return cls(page_num=page_num, kind="failed", error=error, has_a=has_a, has_b=has_b)

    def to_dict(self) -> dict:
        payload: dict = {"page_num": self.page_num, "kind": self.kind}
        if self.diff is not None:
            payload["diff"] = self.diff.to_dict()
        if self.error is not None:
            payload["error"] = self.error
        return payload
