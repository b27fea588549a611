from __future__ import annotations

import json
from pathlib import Path

import fitz
import pytest

from comparison.errors import NoOutputProduced
from comparison.models import DiffResult, PageDecision, Region
from config.settings import Settings
from export.pdf_exporter import DiffDocumentWriter
from extraction.pdf_parser import PdfPageSource
from pipeline.compare_pdfs import PipelineMetrics, compare_pdfs, summarize_decisions


def _write_pdf(path: Path, pages: list[str]) -> Path:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page(width=300, height=400)
        page.insert_text((40, 80), text, fontsize=12)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def versions(tmp_path: Path):
    old = _write_pdf(tmp_path / "old.pdf", ["Hello world", "Version 2014"])
    new = _write_pdf(tmp_path / "new.pdf", ["Hello world", "Version 2015", "Appendix"])
    return old, new


def test_compare_pdfs_end_to_end(versions, tmp_path: Path):
    old, new = versions
    out = tmp_path / "diff.pdf"
    report_path = tmp_path / "diff.json"

    report = compare_pdfs(old, new, out, json_output_path=str(report_path))

    assert [d.kind for d in report.decisions] == ["identical", "differs", "only_in_b"]
    changed = report.decisions[1].diff
    assert len(changed.deleted) == 1
    assert len(changed.added) == 1
    assert len(changed.modified) == 1

    # identical (1) + old/new pair (2) + added page (1)
    with fitz.open(out) as diff_doc:
        assert diff_doc.page_count == 4
        assert "Old Version" in diff_doc[1].get_text()
        assert "New Version" in diff_doc[2].get_text()
        assert "Appendix" in diff_doc[3].get_text()

    assert report.summary["changed_pages"] == 2
    assert report.summary["metrics"]["pages_written"] == 4

    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert [p["kind"] for p in payload["pages"]] == ["identical", "differs", "only_in_b"]
    assert payload["coordinate_system"]["origin"] == "bottom-left"


def test_page_failure_falls_back_to_copy(versions, tmp_path: Path, monkeypatch):
    old, new = versions
    original = PdfPageSource.load_page

    def flaky(self, page_num):
        if page_num == 2:
            raise RuntimeError("corrupt content stream")
        return original(self, page_num)

    monkeypatch.setattr(PdfPageSource, "load_page", flaky)
    out = tmp_path / "diff.pdf"
    report = compare_pdfs(old, new, out)

    assert [d.kind for d in report.decisions] == ["identical", "failed", "only_in_b"]
    assert "corrupt content stream" in report.decisions[1].error
    with fitz.open(out) as diff_doc:
        assert diff_doc.page_count == 3
        assert "Version 2014" in diff_doc[1].get_text()


def test_no_pages_written_raises(versions, tmp_path: Path, monkeypatch):
    old, new = versions

    def always_fail(self, page_num):
        raise RuntimeError("unreadable")

    monkeypatch.setattr(PdfPageSource, "load_page", always_fail)
    monkeypatch.setattr(DiffDocumentWriter, "write_fallback", lambda self, *a, **k: False)

    out = tmp_path / "diff.pdf"
    with pytest.raises(NoOutputProduced):
        compare_pdfs(old, new, out)
    assert not out.exists()


def test_missing_input_is_rejected(tmp_path: Path):
    with pytest.raises(ValueError, match="File not found"):
        compare_pdfs(tmp_path / "nope.pdf", tmp_path / "nope2.pdf", tmp_path / "diff.pdf")


def test_summarize_decisions_counts_kinds_and_regions():
    decisions = [
        PageDecision.identical(1),
        PageDecision.differs(2, DiffResult(has_changes=True, deleted=[Region(0, 0, 1, 1)])),
        PageDecision.differs(3, DiffResult(has_changes=True)),
        PageDecision.only_in_a(4),
        PageDecision.failed(5, "boom", has_a=True, has_b=True),
    ]
    summary = summarize_decisions(decisions)

    assert summary["total_pages"] == 5
    assert summary["by_kind"] == {"identical": 1, "differs": 2, "only_in_a": 1, "failed": 1}
    assert summary["changed_pages"] == 3
    assert summary["regions"] == {"deleted": 1, "added": 0, "modified": 0}


def test_pipeline_metrics_record():
    metrics = PipelineMetrics()
    metrics.record(PageDecision.differs(1, DiffResult(has_changes=True, added=[Region(0, 0, 1, 1)])))
    metrics.record(PageDecision.failed(2, "x", has_a=True, has_b=False))
    metrics.total_time = 1.0

    data = metrics.to_dict()
    assert data["pages_processed"] == 2
    assert data["pages_failed"] == 1
    assert data["regions_emitted"] == 1
    assert data["time_per_page"] == pytest.approx(0.5)


def test_settings_override_reaches_writer(versions, tmp_path: Path):
    old, new = versions
    out = tmp_path / "diff.pdf"

    report = compare_pdfs(old, new, out, settings=Settings(page_border_width=7))

    assert report.decisions[-1].kind == "only_in_b"
    with fitz.open(out) as diff_doc:
        widths = [d.get("width") for d in diff_doc[3].get_drawings()]
    assert widths and widths[0] == pytest.approx(7)
