"""Reading URL list files."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


class UrlFileError(ValueError):
    """URL list file cannot be used as batch input."""


class UrlFileNotFoundError(UrlFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"URL file not found: {path}")
        self.path = path


class UrlFileReadError(UrlFileError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read URL file {path}: {reason}")
        self.path = path


class EmptyUrlFileError(UrlFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"No URLs found in file: {path}")
        self.path = path


def parse_url_lines(content: str) -> list[str]:
    """Return trimmed non-blank lines that are not ``#`` comments, in file order."""

    urls: list[str] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        urls.append(stripped)
    return urls


def read_url_file(path: Path | str) -> list[str]:
    """Read a UTF-8 URL list file; fails when it is missing, unreadable or has no URLs.

    Undecodable bytes are replaced rather than rejected.
    """

    file_path = Path(path)
    logger.info("Reading URL file: %s", file_path)
    if not file_path.is_file():
        raise UrlFileNotFoundError(file_path)

    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as error:
        raise UrlFileReadError(file_path, str(error)) from error

    urls = parse_url_lines(content)
    if not urls:
        raise EmptyUrlFileError(file_path)

    logger.info("Found %d URL(s) in file", len(urls))
    return urls
