"""
Tests for PDF/CSV/JSON exports.
"""
import json

from app.schemas.application import Note
from app.services.analytics_service import summarize
from app.services.export_service import ExportService, _wrap_line

from conftest import NOW


def test_wrap_line_splits_on_words():
    lines = _wrap_line("word " * 40, max_chars=20)

    assert all(len(line) <= 20 for line in lines)
    assert " ".join(lines).split() == ["word"] * 40


def test_application_pdf(make_application):
    record = make_application(
        company_name="Acme",
        notes=[Note(id="n1", content="Long note " * 200, created_at=NOW, updated_at=NOW)],
    )

    exported = ExportService().application_pdf(record)

    assert exported.filename == f"application_{record.id}.pdf"
    assert exported.content_type == "application/pdf"
    assert exported.data.startswith(b"%PDF")


def test_analytics_csv_layout(make_application):
    records = [
        make_application(status="applied", company_name="Acme", position="Engineer"),
        make_application(status="interview", company_name="Acme", position="Engineer"),
    ]
    stats = summarize(records, "month", now=NOW)

    exported = ExportService().analytics(stats, records, "month", "csv", now=NOW)

    assert exported.filename == "jobgenie-analytics-2026-10-15.csv"
    assert exported.data.decode("utf-8").splitlines() == [
        "Metric,Value",
        "Total Applications,2",
        "Response Rate,100.0%",
        "Interview Rate,0.0%",
        "Offer Rate,0.0%",
        "Average Response Time,0.0 days",
        "Average Interview Time,0.0 days",
        ",",
        "Status Distribution,",
        "applied,1",
        "interview,1",
        ",",
        "Top Companies,Count",
        "Acme,2",
        ",",
        "Top Positions,Count",
        "Engineer,2",
    ]


def test_analytics_json_and_pdf(make_application):
    records = [make_application(tags=["remote"])]
    stats = summarize(records, "week", now=NOW)
    service = ExportService()

    exported = service.analytics(stats, records, "week", "json", now=NOW)
    payload = json.loads(exported.data)
    assert exported.filename.endswith(".json")
    assert payload["stats"]["tag_distribution"] == {"remote": 1}
    assert payload["applications"][0]["tags"] == ["remote"]

    pdf = service.analytics(stats, records, "week", "pdf", now=NOW)
    assert pdf.content_type == "application/pdf"
    assert pdf.data.startswith(b"%PDF")
