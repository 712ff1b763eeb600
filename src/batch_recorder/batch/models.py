"""Domain models for batch recording jobs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

SINK_NAME_PREFIX = "recording_sink"
DISPLAY_BASE_NUMBER = 99
DISPLAY_NUMBER_STRIDE = 10


@dataclass(frozen=True, slots=True)
class Job:
    """One URL tagged with its 0-based position in the input list."""

    url: str
    index: int


@dataclass(frozen=True, slots=True, kw_only=True)
class JobContext(ABC):
    """Everything the recording capability gets to know about one job.

    Concrete jobs are either ``SequentialJobContext`` or ``ParallelJobContext``.
    """

    url: str
    output_path: Path
    job_label: str
    job_index: int
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    @abstractmethod
    def parallel_mode(self) -> bool:
        """Whether the job was dispatched by the worker pool."""


@dataclass(frozen=True, slots=True, kw_only=True)
class SequentialJobContext(JobContext):
    """Context for a job run by the sequential loop."""

    @property
    def parallel_mode(self) -> bool:
        return False


@dataclass(frozen=True, slots=True, kw_only=True)
class ParallelJobContext(JobContext):
    """Context for a job run by a pool worker, with worker-scoped resource hints."""

    worker_id: int
    display_start_number: int
    sink_name: str

    @property
    def parallel_mode(self) -> bool:
        return True

    @classmethod
    def for_worker(  # noqa: PLR0913
        cls,
        *,
        worker_id: int,
        url: str,
        output_path: Path,
        job_label: str,
        job_index: int,
        options: Mapping[str, Any],
    ) -> ParallelJobContext:
        """Build a context whose display slot and sink depend only on ``worker_id``."""

        return cls(
            url=url,
            output_path=output_path,
            job_label=job_label,
            job_index=job_index,
            options=options,
            worker_id=worker_id,
            display_start_number=worker_display_number(worker_id),
            sink_name=worker_sink_name(worker_id),
        )


@dataclass(slots=True)
class RecordOutcome:
    """Value returned by the recording capability for one job."""

    success: bool
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class JobResult:
    """Recording outcome augmented with the job it belongs to."""

    url: str
    output_path: Path
    job_index: int
    success: bool
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_outcome(cls, *, job: Job, output_path: Path, outcome: RecordOutcome) -> JobResult:
        return cls(
            url=job.url,
            output_path=output_path,
            job_index=job.index,
            success=outcome.success,
            error=outcome.error,
            details=dict(outcome.details),
        )


RecordFn = Callable[[JobContext], RecordOutcome]
LogFn = Callable[[str], None]
BatchResult = list[JobResult]


def worker_display_number(worker_id: int) -> int:
    return DISPLAY_BASE_NUMBER + worker_id * DISPLAY_NUMBER_STRIDE


def worker_sink_name(worker_id: int) -> str:
    return f"{SINK_NAME_PREFIX}_{worker_id}"
