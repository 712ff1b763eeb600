"""Output path derivation for recorded URLs."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

OUTPUT_EXTENSION = ".mp4"
FALLBACK_SLUG_MAX_CHARS = 50
PATH_SLUG_MAX_CHARS = 60

_FALLBACK_UNSAFE_RE = re.compile(r"[^A-Za-z0-9]")
_PATH_UNSAFE_RE = re.compile(r"[^A-Za-z0-9-]")


def derive_output_path(url: str, index: int, output_dir: Path | str) -> Path:
    """Return ``<output_dir>/<NNN>-<host>[-<path>].mp4`` for the job at ``index``.

    Never raises: strings that do not parse as an absolute URL with a host are
    turned into a sanitized slug instead.
    """

    prefix = f"{index + 1:03d}"
    host_and_path = _split_host_and_path(url)
    if host_and_path is None:
        slug = _FALLBACK_UNSAFE_RE.sub("-", url)[:FALLBACK_SLUG_MAX_CHARS]
        return Path(output_dir) / f"{prefix}-{slug}{OUTPUT_EXTENSION}"

    hostname, path = host_and_path
    hostname = hostname.removeprefix("www.")
    path = path.removeprefix("/").removesuffix("/")
    path_slug = _PATH_UNSAFE_RE.sub("-", path)[:PATH_SLUG_MAX_CHARS]

    name_parts = [prefix, hostname.replace(".", "-")]
    if path_slug:
        name_parts.append(path_slug)
    return Path(output_dir) / f"{'-'.join(name_parts)}{OUTPUT_EXTENSION}"


def ensure_output_dir(
    output_dir: Path | str,
    *,
    log: Callable[[str], None] | None = None,
) -> Path:
    """Create ``output_dir`` (with parents) unless it already exists."""

    path = Path(output_dir)
    if not path.exists():
        (log or logger.info)(f"Creating output directory: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


def _split_host_and_path(url: str) -> tuple[str, str] | None:
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError:
        return None
    if not parsed.scheme or not hostname:
        return None
    return hostname, parsed.path
