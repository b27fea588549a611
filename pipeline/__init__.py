"""Pipeline module - orchestrates end-to-end document comparison."""
from pipeline.compare_pdfs import (
    compare_pdfs,
    summarize_decisions,
    ComparisonPipeline,
    ComparisonReport,
    PipelineConfig,
    PipelineMetrics,
)

__all__ = [
    "compare_pdfs",
    "summarize_decisions",
    "ComparisonPipeline",
    "ComparisonReport",
    "PipelineConfig",
    "PipelineMetrics",
]
