"""
Export Service.
Renders a single application, or an analytics snapshot, into a downloadable
PDF/CSV/JSON document.
"""
import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from app.schemas.analytics import DashboardStats, ExportFormat, TimeRange
from app.schemas.application import ApplicationRecord, utc_now

logger = logging.getLogger(__name__)

MAX_CHARS = 95
LINE_HEIGHT = 14
MARGIN_X = 54
MARGIN_TOP = 72
MARGIN_BOTTOM = 54


@dataclass
class ExportedFile:
    filename: str
    content_type: str
    data: bytes


def _wrap_line(line: str, max_chars: int = MAX_CHARS) -> List[str]:
    if len(line) <= max_chars:
        return [line]
    out: List[str] = []
    cur = ""
    for word in line.split(" "):
        if len(cur) + len(word) + 1 <= max_chars:
            cur = (cur + " " + word).strip()
        else:
            if cur:
                out.append(cur)
            cur = word
    if cur:
        out.append(cur)
    return out


def _render_pdf(sections: Iterable[tuple]) -> bytes:
    """
    Render (style, text) pairs onto letter pages.

    Style is one of "header", "section" or "body"; long lines wrap and the
    text flows onto a new page when the bottom margin is reached.
    """
    fonts = {
        "header": ("Helvetica-Bold", 18),
        "section": ("Helvetica-Bold", 12),
        "body": ("Times-Roman", 11),
    }
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=LETTER)
    _, height = LETTER
    y = height - MARGIN_TOP

    for style, text in sections:
        font, size = fonts[style]
        c.setFont(font, size)
        for raw_line in (text or "").split("\n"):
            for line in _wrap_line(raw_line):
                if y < MARGIN_BOTTOM:
                    c.showPage()
                    c.setFont(font, size)
                    y = height - MARGIN_TOP
                c.drawString(MARGIN_X, y, line)
                y -= LINE_HEIGHT + (size - 11)
        y -= LINE_HEIGHT // 2

    c.showPage()
    c.save()
    return buf.getvalue()


def _fmt_date(value: datetime) -> str:
    return value.date().isoformat()


class ExportService:
    """Builds export documents; callers decide how to deliver them."""

    def application_pdf(self, application: ApplicationRecord) -> ExportedFile:
        sections = [
            ("header", "Job Application Details"),
            ("section", f"Company: {application.company_name or 'Not specified'}"),
            ("section", f"Position: {application.position or 'Not specified'}"),
            ("section", f"Status: {application.status.value.upper()}"),
            ("section", "Tags:"),
            ("body", ", ".join(application.tags) or "No tags"),
            ("section", "Resume Details:"),
            ("body", application.resume_details),
            ("section", "Job Description:"),
            ("body", application.job_description),
            ("section", "Generated Resume:"),
            ("body", application.generated_resume or "Not generated yet"),
            ("section", "Generated Cover Letter:"),
            ("body", application.generated_cover_letter or "Not generated yet"),
            ("section", "Notes:"),
        ]
        if application.notes:
            for note in application.notes:
                sections.append(("body", f"{note.content}\nAdded: {_fmt_date(note.created_at)}"))
        else:
            sections.append(("body", "No notes"))

        sections.append(("section", "Reminders:"))
        if application.reminders:
            for reminder in application.reminders:
                done = " (Completed)" if reminder.completed else ""
                sections.append(("body", f"{reminder.title}{done}\nDue: {_fmt_date(reminder.due_date)}"))
        else:
            sections.append(("body", "No reminders"))

        sections.append(("section", "Timeline:"))
        if application.timeline:
            for event in application.timeline:
                sections.append(("body", f"{event.title}\n{event.description or ''}\n{_fmt_date(event.date)}"))
        else:
            sections.append(("body", "No timeline events"))

        sections.append(("body", f"Created: {_fmt_date(application.created_at)}\n"
                                 f"Last Updated: {_fmt_date(application.updated_at)}"))

        logger.info(f"Application exported to PDF: id={application.id}")
        return ExportedFile(
            filename=f"application_{application.id}.pdf",
            content_type="application/pdf",
            data=_render_pdf(sections),
        )

    def analytics(
        self,
        stats: DashboardStats,
        applications: List[ApplicationRecord],
        time_range: TimeRange,
        fmt: ExportFormat,
        now: Optional[datetime] = None,
    ) -> ExportedFile:
        now = now or utc_now()
        filename = f"jobgenie-analytics-{now.date().isoformat()}.{fmt}"

        if fmt == "csv":
            data = self._analytics_csv(stats).encode("utf-8")
            content_type = "text/csv; charset=utf-8"
        elif fmt == "json":
            payload = self._analytics_payload(stats, applications, time_range, now)
            data = json.dumps(payload, indent=2).encode("utf-8")
            content_type = "application/json"
        elif fmt == "pdf":
            payload = self._analytics_payload(stats, applications, time_range, now)
            data = _render_pdf([
                ("header", "Analytics Report"),
                ("section", f"Dashboard Summary ({time_range})"),
                ("body", json.dumps(payload, indent=2)),
            ])
            content_type = "application/pdf"
        else:
            raise ValueError(f"Unsupported export format: {fmt}")

        logger.info(f"Analytics exported: format={fmt}, applications={len(applications)}")
        return ExportedFile(filename=filename, content_type=content_type, data=data)

    @staticmethod
    def _analytics_payload(
        stats: DashboardStats,
        applications: List[ApplicationRecord],
        time_range: TimeRange,
        now: datetime,
    ) -> dict:
        return {
            "timestamp": now.isoformat(),
            "time_range": time_range,
            "stats": stats.model_dump(mode="json"),
            "applications": [
                {
                    "id": a.id,
                    "company_name": a.company_name,
                    "position": a.position,
                    "status": a.status.value,
                    "created_at": a.created_at.isoformat(),
                    "updated_at": a.updated_at.isoformat(),
                    "tags": a.tags,
                    "notes": len(a.notes),
                    "reminders": len(a.reminders),
                    "timeline": len(a.timeline),
                }
                for a in applications
            ],
        }

    @staticmethod
    def _analytics_csv(stats: DashboardStats) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerows([
            ["Metric", "Value"],
            ["Total Applications", stats.total_applications],
            ["Response Rate", f"{stats.response_rate:.1f}%"],
            ["Interview Rate", f"{stats.interview_rate:.1f}%"],
            ["Offer Rate", f"{stats.offer_rate:.1f}%"],
            ["Average Response Time", f"{stats.average_response_time:.1f} days"],
            ["Average Interview Time", f"{stats.average_interview_time:.1f} days"],
            ["", ""],
            ["Status Distribution", ""],
        ])
        writer.writerows([status, count] for status, count in stats.status_distribution.items())
        writer.writerows([["", ""], ["Top Companies", "Count"]])
        writer.writerows([c.name, c.count] for c in stats.top_companies)
        writer.writerows([["", ""], ["Top Positions", "Count"]])
        writer.writerows([p.position, p.count] for p in stats.top_positions)
        return buf.getvalue()
