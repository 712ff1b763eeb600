"""Runtime configuration for batch recording."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(slots=True)
class BatchSettings:
    """How jobs are dispatched."""

    output_dir: Path = Path("recordings")
    parallel: bool = False
    concurrency: int = 2


@dataclass(slots=True)
class RecordingSettings:
    """External recorder command and the options shared by every job."""

    command_template: str = ""
    timeout_seconds: int = 600
    duration_seconds: int = 30
    width: int = 1280
    height: int = 720

    def shared_options(self) -> dict[str, Any]:
        """Options merged into every job context."""

        return {
            "duration_seconds": self.duration_seconds,
            "width": self.width,
            "height": self.height,
        }


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    batch: BatchSettings = field(default_factory=BatchSettings)
    recording: RecordingSettings = field(default_factory=RecordingSettings)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults for local runs."""

        return cls(
            batch=BatchSettings(
                output_dir=Path(os.getenv("BATCH_RECORDER_OUTPUT_DIR", "recordings")),
                parallel=_env_bool("BATCH_RECORDER_PARALLEL", default=False),
                concurrency=_env_int("BATCH_RECORDER_CONCURRENCY", 2),
            ),
            recording=RecordingSettings(
                command_template=os.getenv("BATCH_RECORDER_COMMAND", "").strip(),
                timeout_seconds=_env_int("BATCH_RECORDER_TIMEOUT_SECONDS", 600),
                duration_seconds=_env_int("BATCH_RECORDER_DURATION_SECONDS", 30),
                width=_env_int("BATCH_RECORDER_WIDTH", 1280),
                height=_env_int("BATCH_RECORDER_HEIGHT", 720),
            ),
            log_level=os.getenv("BATCH_RECORDER_LOG_LEVEL", "INFO").strip().upper(),
        )

    def validate(self, *, require_command: bool = True) -> None:
        """Raise configuration error naming the offending setting."""

        if self.batch.concurrency < 1:
            raise ValueError("BATCH_RECORDER_CONCURRENCY must be >= 1.")
        if require_command and not self.recording.command_template.strip():
            raise ValueError(
                "A recorder command is required. Set BATCH_RECORDER_COMMAND or pass --command.",
            )
        if self.recording.timeout_seconds <= 0:
            raise ValueError("BATCH_RECORDER_TIMEOUT_SECONDS must be > 0.")
        if self.recording.duration_seconds <= 0:
            raise ValueError("BATCH_RECORDER_DURATION_SECONDS must be > 0.")
        if self.recording.width <= 0 or self.recording.height <= 0:
            raise ValueError("BATCH_RECORDER_WIDTH and BATCH_RECORDER_HEIGHT must be > 0.")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Invalid BATCH_RECORDER_LOG_LEVEL: {self.log_level!r}")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
