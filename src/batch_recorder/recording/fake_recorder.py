"""Local stand-in recorder for batch integration tests."""

from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path

FAKE_OUTPUT_BYTES = b"\x00\x00\x00\x18ftypmp42"


def main(argv: list[str] | None = None) -> int:
    """Write a small placeholder recording, or fail when the URL matches ``--fail-substring``."""

    parser = argparse.ArgumentParser()
    parser.add_argument("--url", required=True)
    parser.add_argument("--output", required=True)
    parser.add_argument("--fail-substring", default=None)
    parser.add_argument("--sleep-seconds", type=float, default=0.0)
    parser.add_argument("--skip-output", action="store_true")
    args = parser.parse_args(argv)

    if args.sleep_seconds > 0:
        time.sleep(args.sleep_seconds)

    if args.fail_substring and args.fail_substring in args.url:
        print(f"fake recorder refused {args.url}", file=sys.stderr)
        return 2

    if not args.skip_output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(FAKE_OUTPUT_BYTES)

    print(
        f"recorded {args.url} display={os.getenv('BATCH_RECORDER_DISPLAY', '')} "
        f"sink={os.getenv('BATCH_RECORDER_SINK', '')}",
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
