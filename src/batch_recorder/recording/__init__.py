"""Recording capabilities that can be handed to the batch runners."""

from batch_recorder.recording.command_recorder import (
    CommandRecorder,
    RecorderCommandError,
    build_command_args,
)

__all__ = [
    "CommandRecorder",
    "RecorderCommandError",
    "build_command_args",
]
