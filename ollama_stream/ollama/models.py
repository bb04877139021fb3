"""
Pydantic DTOs for the Ollama generate and ps endpoints.

Purpose
-------
Describe the request body sent to ``/api/generate`` and the response of
``/api/ps``. Requests serialize under the wire names Ollama expects and omit
every unset field, so the server applies its own defaults.

External dependencies: Pydantic only (no network calls).
"""

from __future__ import annotations

import base64
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..base.streaming.events import trim_fraction
from ..config.defaults import OLLAMA_DEFAULT_VISION_MODEL


class RequestFormat(str, Enum):
    """Response format requested from the model."""

    JSON = "json"
    TEXT = "text"


class RequestOptions(BaseModel):
    """Model runtime and sampling options (``options`` in the request body).

    See https://github.com/ollama/ollama/blob/main/docs/modelfile.md#valid-parameters-and-values
    """

    model_config = ConfigDict(extra="forbid")

    num_ctx: Optional[int] = Field(default=None, ge=1)  # context window size
    num_batch: Optional[int] = Field(default=None, ge=1)
    num_keep: Optional[int] = None
    seed: Optional[int] = None
    num_predict: Optional[int] = None
    top_k: Optional[int] = None
    top_p: Optional[float] = None
    min_p: Optional[float] = None
    tfs_z: Optional[float] = None
    typical_p: Optional[float] = None
    repeat_last_n: Optional[int] = None
    temperature: Optional[float] = Field(default=None, ge=0)
    repeat_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    mirostat: Optional[int] = None
    mirostat_tau: Optional[float] = None
    mirostat_eta: Optional[float] = None
    stop: Optional[List[str]] = None
    numa: Optional[bool] = None
    num_gpu: Optional[int] = None
    main_gpu: Optional[int] = None
    num_thread: Optional[int] = None
    penalize_newline: Optional[bool] = None
    low_vram: Optional[bool] = None
    f16_kv: Optional[bool] = None
    vocab_only: Optional[bool] = None
    use_mlock: Optional[bool] = None
    use_mmap: Optional[bool] = None


class GenerateRequest(BaseModel):
    """Body of a ``POST /api/generate`` call.

    Rules:
        - ``images`` hold raw bytes and are base64 encoded on the wire.
        - A request carrying images is sent non-streaming and, when no model
          is given, targets the default vision model (see :meth:`prepared`).
    """

    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    model: str = ""
    prompt: str
    system: Optional[str] = None
    format: Optional[RequestFormat] = None
    options: Optional[RequestOptions] = None
    suffix: Optional[str] = None
    images: Optional[List[bytes]] = None
    keep_alive: Optional[str] = None
    raw: Optional[bool] = None
    stream: Optional[bool] = None

    @field_serializer("images")
    def _encode_images(self, images: Optional[List[bytes]]) -> Optional[List[str]]:
        if images is None:
            return None
        return [base64.b64encode(img).decode("ascii") for img in images]

    def prepared(self) -> "GenerateRequest":
        """Return the request as it is sent, with image defaults applied."""
        if not self.images:
            return self
        return self.model_copy(
            update={
                "stream": False,
                "model": self.model or OLLAMA_DEFAULT_VISION_MODEL,
            }
        )

    def to_json(self) -> str:
        """Serialize the prepared request, omitting unset fields."""
        return self.prepared().model_dump_json(exclude_none=True)


class ProcessModelDetails(BaseModel):
    """Format metadata of a loaded model."""

    model_config = ConfigDict(extra="ignore")

    parent_model: str = ""
    format: str = ""
    family: str = ""
    families: Optional[List[str]] = None
    parameter_size: str = ""
    quantization_level: str = ""


class ProcessModel(BaseModel):
    """A model currently loaded in memory, as listed by ``/api/ps``."""

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    name: str = ""
    model: str = ""
    size: int = 0
    digest: str = ""
    details: ProcessModelDetails = Field(default_factory=ProcessModelDetails)
    expires_at: Optional[datetime] = None
    size_vram: int = 0
    context_length: int = 0

    @field_validator("expires_at", mode="before")
    @classmethod
    def _trim_fraction(cls, value):
        return trim_fraction(value)


class ProcessStatus(BaseModel):
    """Response of ``GET /api/ps``."""

    model_config = ConfigDict(extra="ignore")

    models: List[ProcessModel] = Field(default_factory=list)


__all__ = [
    "RequestFormat",
    "RequestOptions",
    "GenerateRequest",
    "ProcessModelDetails",
    "ProcessModel",
    "ProcessStatus",
]
