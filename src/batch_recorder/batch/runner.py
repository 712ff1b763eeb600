"""Sequential loop and worker pool driving the recording capability."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from batch_recorder.batch.models import (
    BatchResult,
    Job,
    JobContext,
    JobResult,
    LogFn,
    ParallelJobContext,
    RecordFn,
    RecordOutcome,
    SequentialJobContext,
)
from batch_recorder.batch.paths import derive_output_path, ensure_output_dir

logger = logging.getLogger(__name__)

BANNER = "=" * 70
DEFAULT_CONCURRENCY = 2


def run_sequential(
    urls: Sequence[str],
    output_dir: Path | str,
    record: RecordFn,
    shared_options: Mapping[str, Any] | None = None,
    *,
    log: LogFn | None = None,
) -> BatchResult:
    """Record each URL in input order, waiting for every job before the next."""

    emit = _safe_log(log)
    ensure_output_dir(output_dir, log=emit)
    options = dict(shared_options or {})
    total = len(urls)

    results: BatchResult = []
    for index, url in enumerate(urls):
        job = Job(url=url, index=index)
        output_path = derive_output_path(url, index, output_dir)
        job_label = f"[{index + 1}/{total}]"

        emit(BANNER)
        emit(f"{job_label} Starting: {url}")
        emit(f"{job_label} Output: {output_path}")
        emit(BANNER)

        outcome = invoke_record(
            record,
            SequentialJobContext(
                url=url,
                output_path=output_path,
                job_label=job_label,
                job_index=index,
                options=options,
            ),
        )
        results.append(JobResult.from_outcome(job=job, output_path=output_path, outcome=outcome))
        _emit_outcome(emit, job_label, outcome)

    return results


def run_parallel(  # noqa: PLR0913
    urls: Sequence[str],
    output_dir: Path | str,
    record: RecordFn,
    shared_options: Mapping[str, Any] | None = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    *,
    log: LogFn | None = None,
) -> BatchResult:
    """Record URLs with up to ``concurrency`` worker threads.

    Workers claim jobs from a shared cursor in input order and store each result
    at the job's original index, so the returned list lines up with ``urls``
    regardless of completion order. Display slot and sink name are derived from
    the worker id, so no two live workers share them.
    """

    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    emit = _safe_log(log)
    ensure_output_dir(output_dir, log=emit)
    options = dict(shared_options or {})
    total = len(urls)

    cursor = JobCursor([Job(url=url, index=index) for index, url in enumerate(urls)])
    slots: list[JobResult | None] = [None] * total
    worker_errors: list[Exception] = []

    def worker(worker_id: int) -> None:
        try:
            while True:
                job = cursor.claim()
                if job is None:
                    return
                slots[job.index] = _run_parallel_job(
                    job,
                    worker_id=worker_id,
                    total=total,
                    output_dir=output_dir,
                    record=record,
                    options=options,
                    emit=emit,
                )
        except Exception as error:
            logger.exception("Worker %d stopped unexpectedly", worker_id)
            worker_errors.append(error)

    threads = [
        threading.Thread(
            target=worker,
            args=(worker_id,),
            name=f"batch-worker-{worker_id}",
            daemon=True,
        )
        for worker_id in range(min(concurrency, total))
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if worker_errors:
        raise worker_errors[0]

    results: BatchResult = []
    for index, result in enumerate(slots):
        if result is None:
            raise RuntimeError(f"Worker pool finished without a result for job index {index}")
        results.append(result)
    return results


class JobCursor:
    """Shared claim cursor: hands out each job once, in input order."""

    def __init__(self, jobs: Sequence[Job]) -> None:
        self._jobs = list(jobs)
        self._next = 0
        self._lock = threading.Lock()

    def claim(self) -> Job | None:
        with self._lock:
            if self._next >= len(self._jobs):
                return None
            job = self._jobs[self._next]
            self._next += 1
            return job

    @property
    def claimed(self) -> int:
        with self._lock:
            return self._next


def invoke_record(record: RecordFn, context: JobContext) -> RecordOutcome:
    """Call the recording capability and normalise what comes back.

    Covers a raised exception and a return value that is not a ``RecordOutcome``
    with a boolean ``success``.
    """

    try:
        outcome = record(context)
    except Exception as error:
        logger.exception("%s Recorder raised for %s", context.job_label, context.url)
        return RecordOutcome(success=False, error=f"{type(error).__name__}: {error}")

    if not isinstance(outcome, RecordOutcome) or not isinstance(outcome.success, bool):
        logger.error("%s Recorder returned %r for %s", context.job_label, outcome, context.url)
        return RecordOutcome(success=False, error=f"Recorder returned {type(outcome).__name__}")
    if not isinstance(outcome.details, dict):
        return RecordOutcome(success=outcome.success, error=outcome.error)
    return outcome


def _run_parallel_job(  # noqa: PLR0913
    job: Job,
    *,
    worker_id: int,
    total: int,
    output_dir: Path | str,
    record: RecordFn,
    options: Mapping[str, Any],
    emit: LogFn,
) -> JobResult:
    output_path = derive_output_path(job.url, job.index, output_dir)
    job_label = f"[W{worker_id}|{job.index + 1}/{total}]"

    emit(f"{job_label} Starting: {job.url}")
    emit(f"{job_label} Output: {output_path}")

    outcome = invoke_record(
        record,
        ParallelJobContext.for_worker(
            worker_id=worker_id,
            url=job.url,
            output_path=output_path,
            job_label=job_label,
            job_index=job.index,
            options=options,
        ),
    )
    _emit_outcome(emit, job_label, outcome)
    return JobResult.from_outcome(job=job, output_path=output_path, outcome=outcome)


def _emit_outcome(emit: LogFn, job_label: str, outcome: RecordOutcome) -> None:
    if outcome.success:
        emit(f"{job_label} Completed successfully")
    else:
        emit(f"{job_label} Failed: {outcome.error}")


def _safe_log(log: LogFn | None) -> LogFn:
    target = log or logger.info

    def emit(message: str) -> None:
        try:
            target(message)
        except Exception:
            logger.debug("Log function failed for message: %s", message, exc_info=True)

    return emit
