"""
Main orchestrator: end-to-end comparison of two versions of a PDF.

Provides a single entrypoint that:
1. Validates and opens both PDF files
2. Extracts word fragments page by page
3. Decides per page whether to copy, flag, or diff it
4. Writes the highlighted diff PDF (old/new page pairs for changed pages)
5. Returns a ComparisonReport and optionally exports it as JSON
"""
from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from comparison.diff_classifier import get_diff_summary
from comparison.errors import PageProcessingFailed
from comparison.models import PageDecision
from comparison.page_diff import iter_page_decisions
from config.settings import Settings, settings as default_settings
from export.json_exporter import export_json
from export.pdf_exporter import DiffDocumentWriter
from extraction.pdf_parser import PdfPageSource
from utils.logging import logger
from utils.validation import validate_pdf_path


@dataclass
class PipelineConfig:
    """Configuration for the comparison pipeline."""

    tolerance: Optional[float] = None  # None = use settings default
    json_output_path: Optional[str] = None  # Write a JSON report next to the PDF when set
    settings: Optional[Settings] = None  # None = module-level settings

    @property
    def effective_settings(self) -> Settings:
        return self.settings or default_settings

    @property
    def effective_tolerance(self) -> float:
        return self.effective_settings.match_tolerance if self.tolerance is None else self.tolerance


@dataclass
class PipelineMetrics:
    """Performance and outcome metrics for one comparison run."""

    total_time: float = 0.0
    pages_processed: int = 0
    pages_written: int = 0
    pages_failed: int = 0
    decisions_by_kind: Dict[str, int] = field(default_factory=dict)
    regions_emitted: int = 0

    @property
    def time_per_page(self) -> float:
        return self.total_time / max(1, self.pages_processed)

    def record(self, decision: PageDecision) -> None:
        self.pages_processed += 1
        self.decisions_by_kind[decision.kind] = self.decisions_by_kind.get(decision.kind, 0) + 1
        if decision.kind == "failed":
            self.pages_failed += 1
        if decision.diff is not None:
            diff = decision.diff
            self.regions_emitted += len(diff.deleted) + len(diff.added) + len(diff.modified)

    def to_dict(self) -> dict:
        """Export to JSON-serializable dict."""
        return {
            "total_time": self.total_time,
            "pages_processed": self.pages_processed,
            "pages_written": self.pages_written,
            "pages_failed": self.pages_failed,
            "decisions_by_kind": dict(self.decisions_by_kind),
            "regions_emitted": self.regions_emitted,
            "time_per_page": self.time_per_page,
        }


@dataclass
class ComparisonReport:
    doc_a: str
    doc_b: str
    decisions: List[PageDecision] = field(default_factory=list)
    output_path: Optional[str] = None
    summary: Dict[str, Any] = field(default_factory=dict)


def summarize_decisions(decisions: List[PageDecision]) -> Dict[str, Any]:
    """
    Count decisions per kind and regions per category.

    ``changed_pages`` includes pages whose text differs even when no region
    could be located for them.
    """
    kinds = Counter(decision.kind for decision in decisions)
    totals = {"deleted": 0, "added": 0, "modified": 0}
    for decision in decisions:
        if decision.diff is None:
            continue
        page_summary = get_diff_summary(decision.diff)
        for key in totals:
            totals[key] += page_summary[key]

    return {
        "total_pages": len(decisions),
        "by_kind": dict(kinds),
        "changed_pages": kinds.get("differs", 0) + kinds.get("only_in_a", 0) + kinds.get("only_in_b", 0),
        "regions": totals,
    }


class ComparisonPipeline:
    """
    End-to-end document comparison pipeline.

    Usage:
        pipeline = ComparisonPipeline(config)
        report = pipeline.compare("v1.pdf", "v2.pdf", "diff.pdf")
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.metrics = PipelineMetrics()

    def compare(
        self,
        pdf_a: str | Path,
        pdf_b: str | Path,
        output_pdf: str | Path,
    ) -> ComparisonReport:
        """
        Compare two PDF versions and write the highlighted diff document.

        Args:
            pdf_a: Path to the old version
            pdf_b: Path to the new version
            output_pdf: Where to save the diff PDF

        Returns:
            ComparisonReport with one decision per page number

        Raises:
            ValueError: If an input path is missing or not a PDF
            NoOutputProduced: If no page could be written at all
        """
        start_time = time.time()
        pdf_a = validate_pdf_path(pdf_a)
        pdf_b = validate_pdf_path(pdf_b)

        logger.info("=== Starting comparison pipeline ===")
        logger.info("Doc A: %s", pdf_a)
        logger.info("Doc B: %s", pdf_b)

        with PdfPageSource(pdf_a) as source_a, PdfPageSource(pdf_b) as source_b:
            writer = DiffDocumentWriter(
                source_a.document, source_b.document, self.config.effective_settings
            )
            try:
                decisions = self.run(source_a, source_b, writer)
                output = writer.save(output_pdf)
            finally:
                writer.close()

        report = ComparisonReport(
            doc_a=str(pdf_a),
            doc_b=str(pdf_b),
            decisions=decisions,
            output_path=str(output),
            summary=summarize_decisions(decisions),
        )

        self.metrics.total_time = time.time() - start_time
        report.summary["metrics"] = self.metrics.to_dict()

        logger.info("=== Pipeline complete ===")
        logger.info("Time: %.2fs (%.2fs/page)", self.metrics.total_time, self.metrics.time_per_page)
        logger.info(
            "Pages: %d written, %d changed, %d failed",
            self.metrics.pages_written,
            report.summary["changed_pages"],
            self.metrics.pages_failed,
        )

        if self.config.json_output_path:
            export_json(report, self.config.json_output_path)

        return report

    def run(self, source_a, source_b, writer: DiffDocumentWriter) -> List[PageDecision]:
        """
        Decide and write every page in order.

        A page whose rendering fails is replaced by an unmodified copy of the
        available version, and its decision is recorded as ``failed``.
        """
        decisions: List[PageDecision] = []
        for decision in iter_page_decisions(
            source_a, source_b, self.config.effective_tolerance, self.config.effective_settings
        ):
            try:
                writer.write(decision)
            except Exception as exc:
                failure = PageProcessingFailed(decision.page_num, exc)
                logger.warning("%s; falling back to an unmodified copy", failure)
                writer.write_fallback(decision.page_num, decision.has_a, decision.has_b)
                decision = PageDecision.failed(
                    decision.page_num, str(exc), has_a=decision.has_a, has_b=decision.has_b
                )
            self.metrics.record(decision)
            decisions.append(decision)

        self.metrics.pages_written = writer.page_count
        return decisions


def compare_pdfs(
    pdf_a: str | Path,
    pdf_b: str | Path,
    output_pdf: str | Path,
    *,
    tolerance: Optional[float] = None,
    json_output_path: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ComparisonReport:
    """
    Compare two PDF versions end-to-end.

    This is the main entrypoint for programmatic usage.

    Example:
        from pipeline import compare_pdfs

        report = compare_pdfs("v1.pdf", "v2.pdf", "diff.pdf")
        print(report.summary["regions"])
    """
    config = PipelineConfig(tolerance=tolerance, json_output_path=json_output_path, settings=settings)
    pipeline = ComparisonPipeline(config)
    return pipeline.compare(pdf_a, pdf_b, output_pdf)
