"""Recording capability backed by an external command template."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from batch_recorder.batch.models import JobContext, ParallelJobContext, RecordOutcome

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 600
DEFAULT_DISPLAY_NUMBER = 99
DEFAULT_SINK_NAME = "recording_sink"


class RecorderCommandError(ValueError):
    """Command template cannot be rendered into an argv."""


class CommandRecorder:
    """Run one recorder process per job and judge success by exit code and output file.

    Placeholders available in the template: ``{url}``, ``{output_path}``,
    ``{label}``, ``{display}``, ``{display_number}``, ``{sink}`` and every key of
    the job's shared options. Values are shell-quoted before splitting.
    """

    def __init__(
        self,
        command_template: str,
        *,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        env: Mapping[str, str] | None = None,
        default_display_number: int = DEFAULT_DISPLAY_NUMBER,
        default_sink_name: str = DEFAULT_SINK_NAME,
    ) -> None:
        self._command_template = command_template
        self._timeout_seconds = timeout_seconds
        self._env = dict(env) if env is not None else None
        self._default_display_number = default_display_number
        self._default_sink_name = default_sink_name

    def __call__(self, context: JobContext) -> RecordOutcome:
        display_number, sink_name = self._resources_for(context)
        values = template_values(context, display_number=display_number, sink_name=sink_name)
        try:
            argv = build_command_args(self._command_template, values)
        except RecorderCommandError as error:
            return RecordOutcome(success=False, error=str(error))

        env = dict(self._env) if self._env is not None else os.environ.copy()
        env.update(
            {
                "BATCH_RECORDER_URL": context.url,
                "BATCH_RECORDER_OUTPUT": str(context.output_path),
                "BATCH_RECORDER_DISPLAY": f":{display_number}",
                "BATCH_RECORDER_SINK": sink_name,
                "BATCH_RECORDER_JOB_LABEL": context.job_label,
                "BATCH_RECORDER_PARALLEL": "1" if context.parallel_mode else "0",
            },
        )

        logger.debug("%s Running recorder: %s", context.job_label, shlex.join(argv))
        started = time.monotonic()
        try:
            completed = subprocess.run(  # noqa: S603
                argv,
                check=False,
                capture_output=True,
                text=True,
                env=env,
                timeout=self._timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            return RecordOutcome(
                success=False,
                error=f"Recorder timed out after {self._timeout_seconds}s",
                details={"elapsed_seconds": round(time.monotonic() - started, 3)},
            )
        except FileNotFoundError:
            return RecordOutcome(success=False, error=f"Recorder command not found: {argv[0]}")
        except OSError as error:
            return RecordOutcome(success=False, error=f"Recorder failed to start: {error}")

        details: dict[str, Any] = {
            "exit_code": completed.returncode,
            "elapsed_seconds": round(time.monotonic() - started, 3),
        }
        if completed.returncode != 0:
            stderr_tail = _truncate(completed.stderr)
            error = f"Recorder exit code={completed.returncode}"
            if stderr_tail:
                error = f"{error}: {stderr_tail}"
            return RecordOutcome(success=False, error=error, details=details)
        if not _has_output(context.output_path):
            return RecordOutcome(
                success=False,
                error=f"Recorder produced no output at {context.output_path}",
                details=details,
            )
        return RecordOutcome(success=True, details=details)

    def _resources_for(self, context: JobContext) -> tuple[int, str]:
        if isinstance(context, ParallelJobContext):
            return context.display_start_number, context.sink_name
        return self._default_display_number, self._default_sink_name


def template_values(
    context: JobContext,
    *,
    display_number: int,
    sink_name: str,
) -> dict[str, str]:
    values = {str(key): str(value) for key, value in context.options.items()}
    values.update(
        {
            "url": context.url,
            "output_path": str(context.output_path),
            "label": context.job_label,
            "display": f":{display_number}",
            "display_number": str(display_number),
            "sink": sink_name,
        },
    )
    return values


def build_command_args(command_template: str, values: Mapping[str, str]) -> list[str]:
    """Render ``command_template`` with shell-quoted values and split it into argv."""

    stripped = command_template.strip()
    if not stripped:
        raise RecorderCommandError("Recorder command template is empty.")
    try:
        rendered = stripped.format(**{key: shlex.quote(value) for key, value in values.items()})
    except KeyError as error:
        raise RecorderCommandError(
            f"Unsupported recorder command placeholder: {error}",
        ) from error
    except (IndexError, ValueError) as error:
        raise RecorderCommandError(f"Invalid recorder command template: {error}") from error

    try:
        argv = shlex.split(rendered)
    except ValueError as error:
        raise RecorderCommandError(f"Invalid recorder command template: {error}") from error
    if not argv:
        raise RecorderCommandError("Recorder command template rendered empty command.")
    return argv


def _has_output(path: Path) -> bool:
    try:
        return path.is_file() and path.stat().st_size > 0
    except OSError:
        return False


def _truncate(value: str, *, limit: int = 240) -> str:
    compact = value.strip().replace("\n", " ")
    if len(compact) <= limit:
        return compact
    return "..." + compact[-limit:]
