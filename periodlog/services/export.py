"""CSV / Excel export of the full log set."""
from __future__ import annotations

import csv
import io
from datetime import date
from typing import Sequence
from zoneinfo import ZoneInfo

import pandas as pd

from periodlog.models.log import LogEntry
from periodlog.services.calendar import from_epoch_ms

EXPORT_COLUMNS = ["ID", "Date", "Teacher", "Period", "Activity", "Description", "Status", "Feedback"]


def format_timestamp(timestamp: int, tz: ZoneInfo) -> str:
    """en-IN style local time, e.g. ``19/10/2026, 3:04:05 pm``."""
    moment = from_epoch_ms(timestamp, tz)
    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return f"{moment:%d/%m/%Y}, {hour}:{moment:%M:%S} {meridiem}"


def _text(value) -> str:
    if value is None:
        return ""
    return str(getattr(value, "value", value))


def logs_to_frame(logs: Sequence[LogEntry], *, tz: ZoneInfo) -> pd.DataFrame:
    rows = [
        {
            "ID": _text(log.id),
            "Date": format_timestamp(log.timestamp, tz) if log.timestamp is not None else "",
            "Teacher": _text(log.author_name),
            "Period": _text(log.period),
            "Activity": _text(log.activity_type),
            "Description": _text(log.description),
            "Status": _text(log.status),
            "Feedback": _text(log.feedback),
        }
        for log in logs
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS, dtype=str)


def logs_to_csv(logs: Sequence[LogEntry], *, tz: ZoneInfo) -> str:
    """Every field quoted, inner quotes doubled, rows in input order."""
    stream = io.StringIO()
    logs_to_frame(logs, tz=tz).to_csv(
        stream, index=False, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n"
    )
    return stream.getvalue()


def logs_to_excel(logs: Sequence[LogEntry], *, tz: ZoneInfo) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        logs_to_frame(logs, tz=tz).to_excel(writer, index=False, sheet_name="Logs")
    return output.getvalue()


def export_filename(today: date, ext: str = "csv") -> str:
    return f"school_logs_{today.isoformat()}.{ext}"
