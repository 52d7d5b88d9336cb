from app.jobs.models import JobStatus
from app.presentation.badges import BADGES, PALETTE, badge_for
from app.processing.qc_report import QCReport
from app.processing.visualization import render_gc_content, render_per_base_quality

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_every_status_has_a_badge():
    assert set(BADGES) == set(JobStatus)


def test_badge_styles():
    assert badge_for(JobStatus.SUCCEEDED).label == "✓ COMPLETE"
    assert badge_for(JobStatus.FAILED).color == PALETTE["red"]
    assert badge_for(JobStatus.RUNNING).animated
    assert not badge_for(JobStatus.PENDING).animated


def test_report_parses_sample(sample_report):
    report = QCReport.from_payload(sample_report)
    assert report.filename == "sample.fastq"
    assert report.basic_stats.total_sequences == 250000
    assert report.basic_stats.sequence_length == "35-151"
    assert report.basic_stats.gc_content == 48.0
    assert [p.base for p in report.report_modules.per_base_quality] == [1, 2, "3-4"]
    assert report.status_counts() == {"pass": 1, "warn": 1, "fail": 1}
    assert report.failed_modules() == ["Adapter Content"]


def test_report_tolerates_sparse_payload():
    report = QCReport.from_payload({"unexpected": True})
    assert report.summary == []
    assert report.basic_stats is None
    assert report.report_modules.per_base_quality == []


def test_render_per_base_quality(sample_report):
    points = QCReport.from_payload(sample_report).report_modules.per_base_quality
    png = render_per_base_quality(points)
    assert png.startswith(PNG_MAGIC)


def test_render_per_base_quality_without_median():
    points = QCReport.from_payload({
        "report_modules": {"per_base_quality": [{"base": 1, "mean": 30}, {"base": 2, "mean": 31}]}
    }).report_modules.per_base_quality
    assert render_per_base_quality(points).startswith(PNG_MAGIC)


def test_render_gc_content(sample_report):
    bins = QCReport.from_payload(sample_report).report_modules.per_sequence_gc_content
    assert render_gc_content(bins).startswith(PNG_MAGIC)


def test_report_accepts_rows_with_missing_values():
    report = QCReport.from_payload({
        "report_modules": {
            "per_base_quality": [{"base": 1, "mean": None}, {"base": 2, "mean": 31, "median": None}],
            "per_sequence_gc_content": [{"gc": 40, "count": None}, {"gc": None, "count": 3}, {"gc": 50, "count": 7}],
        }
    })
    modules = report.report_modules
    assert modules.per_base_quality[0].mean is None
    assert modules.per_sequence_gc_content[0].count is None
    assert render_per_base_quality(modules.per_base_quality).startswith(PNG_MAGIC)
    assert render_gc_content(modules.per_sequence_gc_content).startswith(PNG_MAGIC)
