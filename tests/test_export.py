import csv
import io
from datetime import date, datetime

from openpyxl import load_workbook

from periodlog.models.log import ApprovalStatus, LogEntry
from periodlog.services.calendar import school_tz, to_epoch_ms
from periodlog.services.export import (
    EXPORT_COLUMNS,
    export_filename,
    format_timestamp,
    logs_to_csv,
    logs_to_excel,
)

TZ = school_tz()
STAMP = to_epoch_ms(datetime(2026, 10, 19, 15, 4, 5, tzinfo=TZ))


def _log(n, **overrides):
    fields = dict(
        id=f"log-{n}",
        author_id="u1",
        author_name="Asha Rao",
        date=date(2026, 10, 19),
        period="Period 1 (08:00 - 09:00)",
        activity_type="Class",
        description="Taught fractions",
        timestamp=STAMP,
    )
    fields.update(overrides)
    return LogEntry(**fields)


def test_format_timestamp_uses_school_local_time():
    assert format_timestamp(STAMP, TZ) == "19/10/2026, 3:04:05 pm"
    morning = to_epoch_ms(datetime(2026, 10, 19, 0, 5, 0, tzinfo=TZ))
    assert format_timestamp(morning, TZ) == "19/10/2026, 12:05:00 am"


def test_csv_header_and_quoting():
    text = logs_to_csv([_log(1)], tz=TZ)
    lines = text.splitlines()
    assert lines[0] == ",".join(f'"{column}"' for column in EXPORT_COLUMNS)
    assert lines[1].startswith('"log-1","19/10/2026, 3:04:05 pm","Asha Rao"')


def test_csv_quotes_and_commas_survive_parsing():
    description = 'Said "hello", then left'
    log = _log(1, description=description, status=ApprovalStatus.REJECTED, feedback="Too short, redo")

    rows = list(csv.reader(io.StringIO(logs_to_csv([log], tz=TZ))))

    assert rows[0] == EXPORT_COLUMNS
    assert rows[1][5] == description
    assert rows[1][6] == "REJECTED"
    assert rows[1][7] == "Too short, redo"


def test_csv_missing_feedback_is_empty_and_order_is_kept():
    rows = list(csv.reader(io.StringIO(logs_to_csv([_log(2), _log(1)], tz=TZ))))
    assert [row[0] for row in rows[1:]] == ["log-2", "log-1"]
    assert rows[1][7] == ""


def test_csv_is_idempotent():
    logs = [_log(1), _log(2, description="Line one\nline two")]
    assert logs_to_csv(logs, tz=TZ) == logs_to_csv(logs, tz=TZ)


def test_csv_with_no_logs_is_header_only():
    assert logs_to_csv([], tz=TZ).strip().count("\n") == 0


def test_excel_export_has_header_and_rows():
    workbook = load_workbook(io.BytesIO(logs_to_excel([_log(1)], tz=TZ)))
    sheet = workbook["Logs"]
    rows = list(sheet.iter_rows(values_only=True))
    assert list(rows[0]) == EXPORT_COLUMNS
    assert rows[1][0] == "log-1"


def test_export_filename():
    assert export_filename(date(2026, 10, 19)) == "school_logs_2026-10-19.csv"
    assert export_filename(date(2026, 10, 19), "xlsx") == "school_logs_2026-10-19.xlsx"
