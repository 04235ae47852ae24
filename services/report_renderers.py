"""
Report Renderers
JSON, plain text and structured presentations of a ReportData.

Renderers only format. Every fact they show comes from the ReportData they
are given; nothing is recomputed here.
"""

from typing import Any, Dict, List

from tools.adherence_calculator import AdherenceRecord
from tools.report_builder import ClassifiedVital, ReportData
from tools.trend_detector import FlagType, RedFlag


def _percentage(record: AdherenceRecord) -> str:
    return "n/a" if record.percentage is None else f"{record.percentage}%"


def _vital_value(vital: ClassifiedVital) -> str:
    value = vital.value
    if isinstance(value, tuple):
        text = "/".join(f"{part:g}" for part in value)
    elif isinstance(value, float):
        text = f"{value:g}"
    else:
        text = str(value)
    return f"{text} {vital.reading.unit}".strip()


def _flag_line(flag: RedFlag) -> str:
    label = "declining" if flag.flag_type == FlagType.DECLINE else "out of range"
    return (
        f"{flag.category} {label} ({flag.severity.value}) "
        f"{flag.first_day.isoformat()} to {flag.last_day.isoformat()}"
    )


def render_plain_text(report: ReportData) -> str:
    """Human-readable text report"""
    summary = report.summary
    lines: List[str] = [
        f"Care report {report.period_start.isoformat()} to {report.period_end.isoformat()}",
        f"Generated {report.generated_at.isoformat()}",
        "",
        f"Today ({summary.day.isoformat()})",
        f"- Medications taken: {summary.meds_taken}/{summary.meds_total}",
        f"- Vitals recorded: {'yes' if summary.vitals_recorded else 'no'}",
        f"- Meals logged: {summary.meals_logged}",
        f"- Appointments: {summary.appointments_today}",
        "",
        f"Adherence: {_percentage(report.overall_adherence)}",
    ]
    for record in report.adherence:
        lines.append(
            f"- {record.medication_name or record.medication_id}: {_percentage(record)} "
            f"({record.taken_count}/{record.scheduled_count}, {record.late_count} late)"
        )

    if report.vitals:
        lines += ["", "Vitals"]
        for vital in report.vitals:
            taken = vital.reading.timestamp
            when = taken.isoformat() if hasattr(taken, "isoformat") else str(taken or "unknown time")
            lines.append(f"- {vital.kind} {_vital_value(vital)} [{vital.classification.value}] {when}")

    if report.red_flags:
        lines += ["", "Red flags"]
        lines += [f"- {_flag_line(flag)}" for flag in report.red_flags]

    if report.notes:
        lines += ["", "Notes"]
        for note in report.notes:
            author = f"{note.author}: " if note.author else ""
            lines.append(f"- {author}{note.text}")

    if report.activity:
        lines += ["", "Team activity"]
        for entry in report.activity:
            detail = f" {entry.detail}" if entry.detail else ""
            actor = f" ({entry.actor})" if entry.actor else ""
            lines.append(f"- {entry.category}{detail}{actor}")

    if report.warnings:
        lines += ["", "Data quality"]
        for warning in report.warnings:
            lines.append(f"- {warning.code.value}: {warning.subject_id or '-'}")

    return "\n".join(lines) + "\n"


def render_structured(report: ReportData) -> Dict[str, Any]:
    """
    Sectioned document for markup exporters: a title plus ordered sections,
    each a heading and rows of label/value pairs.
    """
    summary = report.summary
    sections: List[Dict[str, Any]] = [
        {
            "heading": "Summary",
            "rows": [
                {"label": "Medications taken", "value": f"{summary.meds_taken}/{summary.meds_total}"},
                {"label": "Vitals recorded", "value": summary.vitals_recorded},
                {"label": "Meals logged", "value": summary.meals_logged},
                {"label": "Appointments", "value": summary.appointments_today},
            ],
        },
        {
            "heading": "Adherence",
            "rows": [{"label": "Overall", "value": report.overall_adherence.percentage}] + [
                {
                    "label": record.medication_name or record.medication_id,
                    "value": record.percentage,
                    "taken": record.taken_count,
                    "scheduled": record.scheduled_count,
                    "late": record.late_count,
                }
                for record in report.adherence
            ],
        },
        {
            "heading": "Vitals",
            "rows": [
                {
                    "label": vital.kind,
                    "value": _vital_value(vital),
                    "classification": vital.classification.value,
                    "severity": vital.severity.value if vital.severity else None,
                }
                for vital in report.vitals
            ],
        },
        {
            "heading": "Red flags",
            "rows": [
                {
                    "label": flag.category,
                    "value": flag.flag_type.value,
                    "severity": flag.severity.value,
                    "evidence": [
                        {"day": sample.day.isoformat(), "value": sample.value} for sample in flag.evidence
                    ],
                }
                for flag in report.red_flags
            ],
        },
        {
            "heading": "Notes",
            "rows": [{"label": note.author, "value": note.text} for note in report.notes],
        },
        {
            "heading": "Team activity",
            "rows": [
                {"label": entry.category, "value": entry.detail, "actor": entry.actor}
                for entry in report.activity
            ],
        },
    ]
    return {
        "title": f"Care report {report.period_start.isoformat()} to {report.period_end.isoformat()}",
        "generated_at": report.generated_at.isoformat(),
        "sections": sections,
        "warnings": [
            {"code": warning.code.value, "subject_id": warning.subject_id}
            for warning in report.warnings
        ],
    }


def render_json(report: ReportData) -> Dict[str, Any]:
    """The full report structure, JSON-ready"""
    return report.to_dict()


RENDERERS = {
    "json": render_json,
    "text": render_plain_text,
    "structured": render_structured,
}
