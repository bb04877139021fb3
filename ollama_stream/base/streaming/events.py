"""Stream event model for one decoded NDJSON line.

The generate endpoint sends one JSON object per line. Every line but the
last carries a text fragment in ``response``; the last line has
``done: true``, usually an empty fragment, and the evaluation counters.
Unknown keys are ignored so newer server versions do not break decoding.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

# Go servers emit nanosecond timestamps; keep microseconds
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def trim_fraction(value):
    """Cut sub-microsecond digits from an ISO timestamp string."""
    if isinstance(value, str):
        return _FRACTION_RE.sub(r"\1", value, count=1)
    return value


class StreamEvent(BaseModel):
    """One decoded streaming event.

    Attributes:
        model: Model identifier that produced the event.
        created_at: Server timestamp of the event.
        response: Text fragment; empty or absent on the terminal event.
        done: Completion flag, true exactly once on the final event.
        done_reason: Why generation stopped (terminal event only).
        prompt_eval_count: Tokens evaluated from the prompt.
        eval_count: Tokens generated.
        eval_duration: Nanoseconds spent generating ``eval_count`` tokens.
        total_duration: Nanoseconds spent on the whole request.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, protected_namespaces=())

    model: Optional[str] = None
    created_at: Optional[datetime] = None
    response: Optional[str] = None
    done: Optional[bool] = None
    done_reason: Optional[str] = None
    prompt_eval_count: Optional[int] = None
    eval_count: Optional[int] = None
    eval_duration: Optional[int] = None
    total_duration: Optional[int] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def _trim_fraction(cls, value):
        return trim_fraction(value)

    @property
    def fragment(self) -> str:
        """Text fragment, ``""`` when absent."""
        return self.response or ""

    @property
    def is_final(self) -> bool:
        return self.done is True

    def tokens_per_second(self) -> Optional[float]:
        """Generation rate from the terminal counters, when reported."""
        if not self.eval_count or not self.eval_duration:
            return None
        return self.eval_count / (self.eval_duration / 1e9)


__all__ = ["StreamEvent", "trim_fraction"]
