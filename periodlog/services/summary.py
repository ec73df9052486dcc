"""Gemini summaries: the principal's daily synopsis and coaching notes for authors.

These helpers never raise. Without a key or on any service failure they
return a fixed explanatory string so the review workflow keeps going.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Sequence
from zoneinfo import ZoneInfo

import google.generativeai as genai

from periodlog.config import settings
from periodlog.models.log import LogEntry
from periodlog.services.calendar import creation_day

logger = logging.getLogger(__name__)

SUMMARY_NO_KEY = "API Key not configured. Unable to generate AI summary."
SUMMARY_NO_LOGS = "No logs submitted today to analyze."
SUMMARY_EMPTY = "Could not generate summary."
SUMMARY_FAILED = "Error connecting to AI service."

FEEDBACK_NO_KEY = "API Key missing. AI feedback unavailable."
FEEDBACK_EMPTY = "No feedback generated."
FEEDBACK_FAILED = "AI service unavailable."

SUMMARY_PROMPT = """You are an assistant to a School Principal.
Analyze the following daily activity logs from teachers.
Provide a concise, professional executive summary (max 3 sentences) highlighting:
1. Key activities done today.
2. Any anomalies (e.g., many free periods or office work).
3. General sentiment or productivity level.

Here are the logs:
{logs}
"""

FEEDBACK_PROMPT = """You are a helpful teaching assistant coach.
A teacher has logged an activity:
Activity Type: {activity}
Description: {description}
Self Reflection/Notes: {notes}

Provide a brief, encouraging, and constructive feedback (max 2 sentences) based on their reflection.
Focus on professional growth or well-being.
"""


def _label(value) -> str:
    return str(getattr(value, "value", value))


def render_logs(logs: Sequence[LogEntry]) -> str:
    return "\n".join(
        f"- Teacher: {log.author_name}, Activity: {_label(log.activity_type)}, Description: {log.description}"
        for log in logs
    )


def todays_logs(logs: Sequence[LogEntry], *, today: date, tz: ZoneInfo) -> list[LogEntry]:
    return [log for log in logs if log.timestamp is not None and creation_day(log.timestamp, tz) == today]


async def _generate(prompt: str) -> str:
    genai.configure(api_key=settings.gemini_api_key)
    model = genai.GenerativeModel(settings.gemini_model)
    response = await model.generate_content_async(prompt)
    return (response.text or "").strip() if response else ""


async def generate_daily_summary(logs: Sequence[LogEntry], *, today: date, tz: ZoneInfo) -> str:
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set. AI summaries are disabled.")
        return SUMMARY_NO_KEY

    todays = todays_logs(logs, today=today, tz=tz)
    if not todays:
        return SUMMARY_NO_LOGS

    try:
        text = await _generate(SUMMARY_PROMPT.format(logs=render_logs(todays)))
    except Exception as e:
        logger.error(f"Gemini summary failed: {e}")
        return SUMMARY_FAILED
    return text or SUMMARY_EMPTY


async def generate_log_feedback(activity: str, description: str, notes: str) -> str:
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set. AI feedback is disabled.")
        return FEEDBACK_NO_KEY

    try:
        text = await _generate(FEEDBACK_PROMPT.format(activity=activity, description=description, notes=notes))
    except Exception as e:
        logger.error(f"Gemini feedback failed: {e}")
        return FEEDBACK_FAILED
    return text or FEEDBACK_EMPTY
