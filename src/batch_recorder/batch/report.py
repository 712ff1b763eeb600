"""Human-readable batch summary."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from batch_recorder.batch.models import JobResult, LogFn

logger = logging.getLogger(__name__)

_RULE_WIDTH = 70


@dataclass(slots=True, frozen=True)
class BatchSummary:
    """Success/failure counts for one batch."""

    total: int
    succeeded: int
    failed: int

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0


def summarize_results(results: Sequence[JobResult]) -> BatchSummary:
    succeeded = sum(1 for result in results if result.success)
    return BatchSummary(
        total=len(results),
        succeeded=succeeded,
        failed=len(results) - succeeded,
    )


def render_batch_summary(results: Sequence[JobResult]) -> list[str]:
    """Render one OK/FAIL row per job, in stored order, followed by totals."""

    lines = [
        "=" * _RULE_WIDTH,
        "Batch Recording Summary",
        "=" * _RULE_WIDTH,
    ]
    for result in results:
        status = "OK" if result.success else "FAIL"
        detail = str(result.output_path) if result.success else (result.error or "unknown error")
        lines.append(f"  [{status}] {result.url}")
        lines.append(f"         {detail}")

    summary = summarize_results(results)
    lines.extend(
        [
            "-" * _RULE_WIDTH,
            f"Total: {summary.total} | Success: {summary.succeeded} | Failed: {summary.failed}",
            "=" * _RULE_WIDTH,
        ],
    )
    return lines


def print_batch_summary(results: Sequence[JobResult], *, log: LogFn | None = None) -> None:
    emit = log or logger.info
    for line in render_batch_summary(results):
        emit(line)
