from datetime import date, datetime, timedelta

from periodlog.config import settings
from periodlog.models.log import LogEntry
from periodlog.services import summary
from periodlog.services.calendar import school_tz, to_epoch_ms

from tests.conftest import run

TZ = school_tz()
TODAY = date(2026, 10, 19)


def _log(n, day=TODAY):
    return LogEntry(
        id=f"log-{n}",
        author_id="u1",
        author_name="Asha Rao",
        date=day,
        period="Lunch Break",
        activity_type="Office Work",
        description="Graded papers",
        timestamp=to_epoch_ms(datetime(day.year, day.month, day.day, 11, tzinfo=TZ)),
    )


def test_summary_without_key(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "")
    result = run(summary.generate_daily_summary([_log(1)], today=TODAY, tz=TZ))
    assert result == summary.SUMMARY_NO_KEY


def test_summary_with_no_logs_today(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "key")
    logs = [_log(1, day=TODAY - timedelta(days=1))]
    result = run(summary.generate_daily_summary(logs, today=TODAY, tz=TZ))
    assert result == summary.SUMMARY_NO_LOGS


def test_summary_sends_only_todays_logs(monkeypatch):
    prompts = []

    async def fake_generate(prompt):
        prompts.append(prompt)
        return "All good."

    monkeypatch.setattr(settings, "gemini_api_key", "key")
    monkeypatch.setattr(summary, "_generate", fake_generate)
    logs = [_log(1), _log(2, day=TODAY - timedelta(days=1))]

    assert run(summary.generate_daily_summary(logs, today=TODAY, tz=TZ)) == "All good."
    assert prompts[0].count("- Teacher: Asha Rao, Activity: Office Work") == 1


def test_summary_service_failure_falls_back(monkeypatch):
    async def failing(prompt):
        raise RuntimeError("quota exceeded")

    monkeypatch.setattr(settings, "gemini_api_key", "key")
    monkeypatch.setattr(summary, "_generate", failing)
    assert run(summary.generate_daily_summary([_log(1)], today=TODAY, tz=TZ)) == summary.SUMMARY_FAILED


def test_summary_empty_reply(monkeypatch):
    async def empty(prompt):
        return ""

    monkeypatch.setattr(settings, "gemini_api_key", "key")
    monkeypatch.setattr(summary, "_generate", empty)
    assert run(summary.generate_daily_summary([_log(1)], today=TODAY, tz=TZ)) == summary.SUMMARY_EMPTY


def test_feedback_fallbacks(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "")
    assert run(summary.generate_log_feedback("Class", "Taught", "Tired")) == summary.FEEDBACK_NO_KEY

    async def failing(prompt):
        raise RuntimeError("offline")

    monkeypatch.setattr(settings, "gemini_api_key", "key")
    monkeypatch.setattr(summary, "_generate", failing)
    assert run(summary.generate_log_feedback("Class", "Taught", "Tired")) == summary.FEEDBACK_FAILED
