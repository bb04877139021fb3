"""Handler outcome type.

Handlers passed to the coordinator report success or failure by returning an
:class:`Outcome`. Returning ``None`` counts as success so plain callbacks
need no ceremony; raising is also treated as failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Outcome:
    """Tagged success/failure result of one handler invocation."""

    ok: bool = True
    error: Optional[Any] = None

    @classmethod
    def success(cls) -> "Outcome":
        return _SUCCESS

    @classmethod
    def failure(cls, error: Any) -> "Outcome":
        """Build a failed outcome; ``error`` is handed back to the caller verbatim."""
        if error is None:
            raise ValueError("a failed outcome needs an error value")
        return cls(ok=False, error=error)


_SUCCESS = Outcome()


def as_outcome(result: Any) -> Outcome:
    """Normalize a handler return value into an :class:`Outcome`."""
    if result is None:
        return _SUCCESS
    if isinstance(result, Outcome):
        return result
    raise TypeError(f"handler must return None or Outcome, got {type(result).__name__}")


__all__ = ["Outcome", "as_outcome"]
