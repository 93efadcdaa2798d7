"""Gemini-backed natural-language task ordering suggestions."""

from __future__ import annotations

from typing import Any, Dict, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.log import get_logger
from core.settings import GEMINI, TASKS, GeminiSettings
from helpers.datetime_utils import format_time_12h


def _describe(task: Any) -> str:
    subject = getattr(task, "subject", None) or TASKS.default_subject
    due_time = getattr(task, "due_time", None)
    when = format_time_12h(due_time) if due_time else "end of day"
    return f'"{task.title}" ({subject}, {task.priority} priority, due {task.due_date} at {when})'


def build_ordering_prompt(task_a: Any, task_b: Any) -> str:
    return (
        "You are a study assistant. Compare these two tasks with the same priority and deadline "
        "and recommend which should be done first in 1-2 sentences.\n"
        f"Task 1: {_describe(task_a)}\n"
        f"Task 2: {_describe(task_b)}"
    )


def extract_text(response: Dict[str, Any]) -> Optional[str]:
    for candidate in response.get("candidates") or []:
        parts = (candidate.get("content") or {}).get("parts") or []
        for part in parts:
            text = part.get("text")
            if text and text.strip():
                return text.strip()
    return None


class GeminiRecommender:
    """Implements ``suggest_ordering`` on top of the Generative Language API.

    Errors are raised to the caller; the conflict detector owns the fallback.
    """

    def __init__(self, settings: GeminiSettings = GEMINI, service=None) -> None:
        self.settings = settings
        self.service = service
        self.logger = get_logger("recommendations")

    @property
    def available(self) -> bool:
        return self.service is not None or self.settings.enabled

    def _ensure_service(self):
        if self.service is not None:
            return self.service
        if not self.settings.enabled:
            raise RuntimeError("Gemini API key is not configured")
        self.service = build(
            "generativelanguage",
            "v1beta",
            developerKey=self.settings.api_key,
            cache_discovery=False,
            static_discovery=False,
        )
        return self.service

    def suggest_ordering(self, task_a: Any, task_b: Any) -> str:
        service = self._ensure_service()
        body = {
            "contents": [
                {"role": "user", "parts": [{"text": build_ordering_prompt(task_a, task_b)}]}
            ],
            "generationConfig": {
                "temperature": self.settings.temperature,
                "maxOutputTokens": self.settings.max_output_tokens,
            },
        }
        try:
            response = (
                service.models()
                .generateContent(model=self.settings.model, body=body)
                .execute()
            )
        except HttpError as exc:
            status = getattr(exc.resp, "status", None)
            self.logger.warning("Gemini request failed with status %s", status)
            raise
        text = extract_text(response or {})
        if text is None:
            raise ValueError("Gemini returned an empty response")
        return text


__all__ = [
    "GeminiRecommender",
    "build_ordering_prompt",
    "extract_text",
]
