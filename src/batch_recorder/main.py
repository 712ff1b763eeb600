"""CLI entrypoint for batch-recorder."""

from pathlib import Path

import rich_click as click

from batch_recorder import __version__
from batch_recorder.batch.controllers import (
    BatchCliController,
    BatchConfigError,
    BatchRecordCommand,
)
from batch_recorder.logs import configure_logging

click.rich_click.USE_MARKDOWN = True
BATCH_CONTROLLER = BatchCliController()
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@click.group()
@click.version_option(version=__version__, prog_name="batch-recorder")
def batch_recorder() -> None:
    """Record a list of web pages with an external recorder command."""


@batch_recorder.command("record")
@click.argument("url_file", type=click.Path(path_type=Path))
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for recordings. Defaults to BATCH_RECORDER_OUTPUT_DIR or ./recordings.",
)
@click.option(
    "--parallel/--sequential",
    default=None,
    help="Run jobs through a worker pool instead of one at a time.",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=None,
    help="Worker count in parallel mode. Defaults to BATCH_RECORDER_CONCURRENCY or 2.",
)
@click.option(
    "--command",
    "command_template",
    default=None,
    help=(
        "Recorder command template. Supports {url}, {output_path}, {label}, {display}, "
        "{display_number}, {sink}, {duration_seconds}, {width} and {height}. "
        "If omitted, BATCH_RECORDER_COMMAND is used."
    ),
)
@click.option(
    "--timeout-seconds",
    type=click.IntRange(min=1),
    default=None,
    help="Per-job recorder timeout.",
)
@click.option(
    "--duration-seconds",
    type=click.IntRange(min=1),
    default=None,
    help="Recording duration passed to the recorder.",
)
@click.option("--width", type=click.IntRange(min=1), default=None, help="Viewport width.")
@click.option("--height", type=click.IntRange(min=1), default=None, help="Viewport height.")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Progress log level. Defaults to BATCH_RECORDER_LOG_LEVEL or INFO.",
)
def record(  # noqa: PLR0913
    url_file: Path,
    output_dir: Path | None,
    parallel: bool | None,
    concurrency: int | None,
    command_template: str | None,
    timeout_seconds: int | None,
    duration_seconds: int | None,
    width: int | None,
    height: int | None,
    log_level: str | None,
) -> None:
    """Record every URL listed in URL_FILE (one per line, `#` starts a comment)."""

    command = BatchRecordCommand(
        url_file=url_file,
        output_dir=output_dir,
        parallel=parallel,
        concurrency=concurrency,
        command_template=command_template,
        timeout_seconds=timeout_seconds,
        duration_seconds=duration_seconds,
        width=width,
        height=height,
        log_level=log_level,
    )
    try:
        configure_logging(BATCH_CONTROLLER.load_settings(command).log_level)
        result = BATCH_CONTROLLER.record(command)
    except BatchConfigError as error:
        raise click.ClickException(str(error)) from error

    _emit_lines(result.lines)
    if not result.success:
        failed = sum(1 for job in result.results if not job.success)
        raise click.ClickException(f"{failed} recording(s) failed.")


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    batch_recorder()
