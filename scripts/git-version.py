#!/usr/bin/env python3
"""Print the build version or URL namespace derived from git metadata."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from repo_query import GitRepository
from shared import configure_logging, log_event
from version_format import display, namespace
from versioning import InconsistentRepositoryError, classify

LOGGER = logging.getLogger("git_version.cli")
COMMANDS = {
    "version": display,
    "ns": namespace,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Derive a semantic version from git tags and branches.")
    parser.add_argument("command", nargs="?", default="", help="'version' or 'ns'.")
    parser.add_argument("--repo-root", default=".", help="Repository to inspect.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    # Only the first positional selects the command; anything else falls back to usage.
    args, _extra = parser.parse_known_args(argv)
    return args


def usage(prog: str) -> str:
    return "\n".join(f"Use: {prog} {command}" for command in COMMANDS)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    render = COMMANDS.get(args.command)
    if render is None:
        print(usage(Path(sys.argv[0]).name))
        return 0

    try:
        version = classify(GitRepository(Path(args.repo_root)))
    except InconsistentRepositoryError as exc:
        log_event(LOGGER, logging.ERROR, "version_classification_failed", error=str(exc))
        print(str(exc), file=sys.stderr)
        return 1

    print(render(version))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
