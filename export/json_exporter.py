"""Export page decisions and diff regions as JSON."""
from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from utils.logging import logger

if TYPE_CHECKING:
    from pipeline.compare_pdfs import ComparisonReport


def export_json(report: "ComparisonReport", output_path: str | Path) -> Path:
    """
    Export a comparison report as JSON.

    Regions keep the coordinates the engine produced: PDF points in the
    bottom-up frame of each page, ready to be used as highlight rectangles.
    """
    output = Path(output_path)
    logger.info("Writing JSON diff to %s", output)

    payload = {
        "metadata": {"doc_a": report.doc_a, "doc_b": report.doc_b},
        "summary": report.summary,
        "pages": [decision.to_dict() for decision in report.decisions],
        "coordinate_system": {
            "bbox_format": "absolute_dict",
            "bbox_structure": {"x": "float", "y": "float", "width": "float", "height": "float"},
            "origin": "bottom-left",
            "description": (
                "Regions are in PDF points with y increasing upward from the page bottom. "
                "Modified pairs carry the old page geometry in x1/y1/width1/height1 and "
                "the new page geometry in x2/y2/width2/height2."
            ),
        },
    }
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return output
