"""Job progress snapshot published by the job controller."""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class JobStatus(BaseModel):
    """Immutable view of the current (or most recent) indexing run.

    Attributes
    ----------
    running:
        Whether a run is in flight.
    processed_count:
        Chunks successfully committed so far.
    total_count:
        Documents found by the enumerator.
    changed_count:
        Documents whose fingerprint changed.
    """

    model_config = ConfigDict(frozen=True)

    running: bool = False
    processed_count: int = 0
    total_count: int = 0
    changed_count: int = 0


@dataclass(frozen=True)
class TriggerResult:
    """Outcome of a fire-and-forget trigger.

    ``future`` resolves to the processed chunk count of the accepted run,
    or is already resolved to ``0`` when the trigger was rejected.
    """

    accepted: bool
    message: str
    future: Future[int]
