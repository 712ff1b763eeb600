from __future__ import annotations

import shlex
import sys
from pathlib import Path

import allure
import pytest

from batch_recorder.batch.models import ParallelJobContext, SequentialJobContext
from batch_recorder.recording import CommandRecorder, RecorderCommandError, build_command_args

pytestmark = [
    allure.epic("Batch Recording"),
    allure.feature("Recorder Command"),
]


def _sequential_context(
    output_path: Path,
    url: str = "https://example.com/a",
) -> SequentialJobContext:
    return SequentialJobContext(
        url=url,
        output_path=output_path,
        job_label="[1/1]",
        job_index=0,
        options={"duration_seconds": 7},
    )


def test_build_command_args_quotes_values_before_splitting() -> None:
    argv = build_command_args(
        "rec --url {url} --out {output_path} --seconds {duration_seconds}",
        {
            "url": "https://example.com/a b?x=1&y=2",
            "output_path": "/tmp/my recordings/001.mp4",
            "duration_seconds": "7",
        },
    )

    assert argv == [
        "rec",
        "--url",
        "https://example.com/a b?x=1&y=2",
        "--out",
        "/tmp/my recordings/001.mp4",
        "--seconds",
        "7",
    ]


@pytest.mark.parametrize(
    ("template", "message"),
    [
        ("   ", "empty"),
        ("rec {unknown}", "Unsupported recorder command placeholder"),
        ("rec {0}", "Invalid recorder command template"),
        ("rec 'unterminated {url}", "Invalid recorder command template"),
    ],
)
def test_build_command_args_rejects_bad_templates(template: str, message: str) -> None:
    with pytest.raises(RecorderCommandError, match=message):
        build_command_args(template, {"url": "https://example.com"})


def test_command_recorder_succeeds_when_output_is_written(
    tmp_path: Path,
    fake_recorder_command: str,
) -> None:
    output_path = tmp_path / "001-example-com-a.mp4"
    recorder = CommandRecorder(fake_recorder_command, timeout_seconds=30)

    outcome = recorder(_sequential_context(output_path))

    assert outcome.success is True
    assert outcome.error is None
    assert outcome.details["exit_code"] == 0
    assert output_path.stat().st_size > 0


def test_command_recorder_reports_non_zero_exit_with_stderr(
    tmp_path: Path,
    fake_recorder_command: str,
) -> None:
    recorder = CommandRecorder(fake_recorder_command, timeout_seconds=30)

    outcome = recorder(_sequential_context(tmp_path / "x.mp4", url="https://example.com/fail"))

    assert outcome.success is False
    assert outcome.error is not None
    assert outcome.error.startswith("Recorder exit code=2")
    assert "fake recorder refused" in outcome.error
    assert outcome.details["exit_code"] == 2


def test_command_recorder_requires_output_file(tmp_path: Path, fake_recorder_command: str) -> None:
    recorder = CommandRecorder(f"{fake_recorder_command} --skip-output", timeout_seconds=30)
    output_path = tmp_path / "x.mp4"

    outcome = recorder(_sequential_context(output_path))

    assert outcome.success is False
    assert outcome.error == f"Recorder produced no output at {output_path}"


def test_command_recorder_times_out(tmp_path: Path, fake_recorder_command: str) -> None:
    recorder = CommandRecorder(f"{fake_recorder_command} --sleep-seconds 5", timeout_seconds=1)

    outcome = recorder(_sequential_context(tmp_path / "x.mp4"))

    assert outcome.success is False
    assert outcome.error == "Recorder timed out after 1s"


def test_command_recorder_missing_executable(tmp_path: Path) -> None:
    recorder = CommandRecorder("definitely-not-a-recorder-binary {url}", timeout_seconds=5)

    outcome = recorder(_sequential_context(tmp_path / "x.mp4"))

    assert outcome.success is False
    assert outcome.error == "Recorder command not found: definitely-not-a-recorder-binary"


def test_command_recorder_returns_template_errors_as_failures(tmp_path: Path) -> None:
    recorder = CommandRecorder("rec {nope}", timeout_seconds=5)

    outcome = recorder(_sequential_context(tmp_path / "x.mp4"))

    assert outcome.success is False
    assert "Unsupported recorder command placeholder" in (outcome.error or "")


def test_command_recorder_passes_worker_resources_to_parallel_jobs(tmp_path: Path) -> None:
    env_dump = tmp_path / "env.txt"
    script = (
        "import os, pathlib, sys; "
        f"pathlib.Path({str(env_dump)!r}).write_text("
        "' '.join([sys.argv[1], sys.argv[2], os.environ['BATCH_RECORDER_DISPLAY'], "
        "os.environ['BATCH_RECORDER_SINK'], os.environ['BATCH_RECORDER_PARALLEL']])); "
        "pathlib.Path(os.environ['BATCH_RECORDER_OUTPUT']).write_bytes(b'x')"
    )
    template = f"{shlex.quote(sys.executable)} -c {shlex.quote(script)} {{display}} {{sink}}"
    recorder = CommandRecorder(template, timeout_seconds=30)
    context = ParallelJobContext.for_worker(
        worker_id=2,
        url="https://example.com/a",
        output_path=tmp_path / "001-example-com-a.mp4",
        job_label="[W2|1/1]",
        job_index=0,
        options={},
    )

    outcome = recorder(context)

    assert outcome.success is True
    assert env_dump.read_text("utf-8") == ":119 recording_sink_2 :119 recording_sink_2 1"


def test_command_recorder_uses_defaults_for_sequential_jobs(tmp_path: Path) -> None:
    env_dump = tmp_path / "env.txt"
    script = (
        "import os, pathlib, sys; "
        f"pathlib.Path({str(env_dump)!r}).write_text(' '.join(sys.argv[1:])); "
        "pathlib.Path(os.environ['BATCH_RECORDER_OUTPUT']).write_bytes(b'x')"
    )
    template = (
        f"{shlex.quote(sys.executable)} -c {shlex.quote(script)} "
        "{display} {sink} {label} {duration_seconds}"
    )
    recorder = CommandRecorder(template, timeout_seconds=30)

    outcome = recorder(_sequential_context(tmp_path / "x.mp4"))

    assert outcome.success is True
    assert env_dump.read_text("utf-8") == ":99 recording_sink [1/1] 7"
