"""Batch dispatch of per-URL recording jobs.

Jobs run either one at a time or through a fixed-size pool of worker threads.
Both modes return results in input order, so ``results[i]`` always describes
``urls[i]`` no matter which worker finished first.
"""

from batch_recorder.batch.models import (
    BatchResult,
    Job,
    JobContext,
    JobResult,
    ParallelJobContext,
    RecordFn,
    RecordOutcome,
    SequentialJobContext,
)
from batch_recorder.batch.paths import derive_output_path, ensure_output_dir
from batch_recorder.batch.report import BatchSummary, print_batch_summary, summarize_results
from batch_recorder.batch.runner import run_parallel, run_sequential
from batch_recorder.batch.url_file import (
    EmptyUrlFileError,
    UrlFileError,
    UrlFileNotFoundError,
    UrlFileReadError,
    parse_url_lines,
    read_url_file,
)

__all__ = [
    "BatchResult",
    "BatchSummary",
    "EmptyUrlFileError",
    "Job",
    "JobContext",
    "JobResult",
    "ParallelJobContext",
    "RecordFn",
    "RecordOutcome",
    "SequentialJobContext",
    "UrlFileError",
    "UrlFileNotFoundError",
    "UrlFileReadError",
    "derive_output_path",
    "ensure_output_dir",
    "parse_url_lines",
    "print_batch_summary",
    "read_url_file",
    "run_parallel",
    "run_sequential",
    "summarize_results",
]
