"""Controller for the batch record CLI command."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from batch_recorder.batch.models import BatchResult, LogFn, RecordFn
from batch_recorder.batch.paths import ensure_output_dir
from batch_recorder.batch.report import render_batch_summary, summarize_results
from batch_recorder.batch.runner import run_parallel, run_sequential
from batch_recorder.batch.url_file import UrlFileError, read_url_file
from batch_recorder.config import Settings
from batch_recorder.recording import CommandRecorder

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchRecordCommand:
    """CLI input for one batch recording run."""

    url_file: Path
    output_dir: Path | None = None
    parallel: bool | None = None
    concurrency: int | None = None
    command_template: str | None = None
    timeout_seconds: int | None = None
    duration_seconds: int | None = None
    width: int | None = None
    height: int | None = None
    log_level: str | None = None


@dataclass(slots=True)
class BatchRecordResult:
    """Rendered output lines plus overall outcome."""

    lines: list[str]
    success: bool
    results: BatchResult


class BatchConfigError(ValueError):
    """Batch cannot start: bad settings, bad input file or unusable output directory."""


class BatchCliController:
    """Wire settings, recorder, runner and reporter for the CLI."""

    def __init__(self, *, record: RecordFn | None = None, log: LogFn | None = None) -> None:
        self._record = record
        self._log = log

    def load_settings(self, command: BatchRecordCommand) -> Settings:
        """Environment settings with the command's overrides applied, validated."""

        try:
            settings = _apply_overrides(Settings.from_env(), command)
            settings.validate(require_command=self._record is None)
        except ValueError as error:
            raise BatchConfigError(str(error)) from error
        return settings

    def record(self, command: BatchRecordCommand) -> BatchRecordResult:
        settings = self.load_settings(command)

        try:
            urls = read_url_file(command.url_file)
        except UrlFileError as error:
            raise BatchConfigError(str(error)) from error

        record = self._record or CommandRecorder(
            settings.recording.command_template,
            timeout_seconds=settings.recording.timeout_seconds,
        )
        shared_options = settings.recording.shared_options()
        mode = (
            f"parallel (concurrency={settings.batch.concurrency})"
            if settings.batch.parallel
            else "sequential"
        )
        logger.info(
            "Batch: %d URL(s), mode=%s, output_dir=%s",
            len(urls),
            mode,
            settings.batch.output_dir,
        )

        try:
            ensure_output_dir(settings.batch.output_dir)
        except OSError as error:
            raise BatchConfigError(
                f"Cannot use output directory {settings.batch.output_dir}: {error}",
            ) from error

        if settings.batch.parallel:
            results = run_parallel(
                urls,
                settings.batch.output_dir,
                record,
                shared_options,
                settings.batch.concurrency,
                log=self._log,
            )
        else:
            results = run_sequential(
                urls,
                settings.batch.output_dir,
                record,
                shared_options,
                log=self._log,
            )

        summary = summarize_results(results)
        return BatchRecordResult(
            lines=render_batch_summary(results),
            success=summary.all_succeeded,
            results=results,
        )


def _apply_overrides(settings: Settings, command: BatchRecordCommand) -> Settings:
    batch = replace(
        settings.batch,
        output_dir=command.output_dir or settings.batch.output_dir,
        parallel=settings.batch.parallel if command.parallel is None else command.parallel,
        concurrency=_pick(command.concurrency, settings.batch.concurrency),
    )
    recording = replace(
        settings.recording,
        command_template=command.command_template or settings.recording.command_template,
        timeout_seconds=_pick(command.timeout_seconds, settings.recording.timeout_seconds),
        duration_seconds=_pick(command.duration_seconds, settings.recording.duration_seconds),
        width=_pick(command.width, settings.recording.width),
        height=_pick(command.height, settings.recording.height),
    )
    log_level = command.log_level.strip().upper() if command.log_level else settings.log_level
    return replace(settings, batch=batch, recording=recording, log_level=log_level)


def _pick(override: int | None, default: int) -> int:
    return default if override is None else override
