"""Shared test fixtures."""

from __future__ import annotations

import logging
import os
import shlex
import sys
from pathlib import Path

import pytest

from batch_recorder.logs import LOGGER_NAME

_SRC_DIR = Path(__file__).resolve().parents[1] / "src"

FAKE_RECORDER_COMMAND_TEMPLATE = (
    f"{shlex.quote(sys.executable)} -m batch_recorder.recording.fake_recorder "
    "--url {url} --output {output_path} --fail-substring fail"
)


@pytest.fixture(autouse=True)
def _clean_batch_recorder_env(monkeypatch):
    """Keep developer BATCH_RECORDER_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("BATCH_RECORDER_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by CLI runs so they do not outlive the test's streams."""
    yield
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def fake_recorder_command(monkeypatch) -> str:
    """Command template running the in-package fake recorder in a subprocess."""
    existing = os.environ.get("PYTHONPATH")
    pythonpath = str(_SRC_DIR) if not existing else os.pathsep.join([str(_SRC_DIR), existing])
    monkeypatch.setenv("PYTHONPATH", pythonpath)
    return FAKE_RECORDER_COMMAND_TEMPLATE
