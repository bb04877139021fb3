"""Per-stream accounting returned by the coordinator.

Isolated within the streaming package to keep orchestration code small.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .events import StreamEvent


@dataclass
class StreamSummary:
    """Counters collected while one stream was processed.

    ``prompt_eval_count`` / ``eval_count`` / ``tokens_per_second`` come from
    the terminal event and stay ``None`` when the server did not send them.
    """

    events: int = 0
    fragments: int = 0
    blocks: int = 0
    batches: int = 0
    text_length: int = 0
    done: bool = False
    done_reason: Optional[str] = None
    model: Optional[str] = None
    prompt_eval_count: Optional[int] = None
    eval_count: Optional[int] = None
    tokens_per_second: Optional[float] = None
    time_to_first_fragment_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def observe(self, event: StreamEvent, elapsed_ms: float) -> None:
        """Fold one delivered event into the counters."""
        self.events += 1
        if event.model:
            self.model = event.model
        if event.fragment:
            self.fragments += 1
            self.text_length += len(event.fragment)
            if self.time_to_first_fragment_ms is None:
                self.time_to_first_fragment_ms = elapsed_ms
        if event.is_final:
            self.done = True
            self.done_reason = event.done_reason
            self.prompt_eval_count = event.prompt_eval_count
            self.eval_count = event.eval_count
            self.tokens_per_second = event.tokens_per_second()

    def tokens(self) -> Dict[str, Optional[int]]:
        """Token usage mapping in the shape logged by ``normalized_log_event``."""
        total = None
        if self.prompt_eval_count is not None and self.eval_count is not None:
            total = self.prompt_eval_count + self.eval_count
        return {"prompt": self.prompt_eval_count, "completion": self.eval_count, "total": total}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["StreamSummary"]
