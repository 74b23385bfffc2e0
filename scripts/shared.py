#!/usr/bin/env python3
"""Shared script utilities.

Keep scripts tiny: centralize structured logging and git invocation.
"""

from __future__ import annotations

import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import Any


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))


def run_git(args: list[str], *, repo_root: Path | None = None, git: str = "git") -> str:
    """Run a read-only git command and return its stdout.

    Raises ``subprocess.CalledProcessError`` on a non-zero exit and ``OSError``
    when git cannot be started.
    """
    command = [git]
    if repo_root is not None:
        command += ["-C", str(repo_root)]
    command += args

    result = subprocess.run(
        command,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout
