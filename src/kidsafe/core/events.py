"""Pipeline event system for streaming progress to external consumers.

The pipeline emits events through a plain callback so that consumers (the
CLI, a desktop shell) can follow a run without touching pipeline logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

STAGES = ("probe", "transcribe", "detect", "silence", "cut", "validate", "mux")


@dataclass
class PipelineEvent:
    """A progress event emitted during pipeline execution.

    Attributes:
        stage: One of ``STAGES``.
        progress: Progress within this stage, 0.0 to 1.0.
        message: Human-readable status message.
        data: Optional payload (e.g. interval counts, file paths).
    """

    stage: str
    progress: float
    message: str
    data: dict | None = field(default=None)


EventCallback = Callable[[PipelineEvent], None]
