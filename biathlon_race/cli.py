"""Command line entry: read events from stdin and write the log and report."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable, Sequence
from typing import TextIO

from .config import Config, ConfigError, load_config
from .parser import parse_events
from .processor import process_events
from .report import generate_report


def run(events: Iterable[str], out: TextIO, config: Config) -> None:
    """Process event lines and write the event log and final report to ``out``."""
    summary = process_events(out, config, parse_events(events, out))
    generate_report(out, config, summary)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the competition processor; the configuration path defaults to $CONFIG_PATH."""
    parser = argparse.ArgumentParser(
        prog="biathlon-race",
        description="Process biathlon competition events read from standard input.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="path of the JSON configuration (default: $CONFIG_PATH)",
    )
    args = parser.parse_args(argv)
    path = args.config if args.config is not None else os.environ.get("CONFIG_PATH", "")
    try:
        config = load_config(path)
    except (OSError, ConfigError) as err:
        print(f"cannot load configuration: {err}", file=sys.stderr)
        return 1
    run(sys.stdin, sys.stdout, config)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())