#!/usr/bin/env python3
"""Read-only git queries used to classify the current build."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from shared import log_event, run_git

LOGGER = logging.getLogger("git_version.repo_query")


class RepositoryQueries(Protocol):
    def current_commit_hash(self) -> str | None: ...

    def current_commit_timestamp(self) -> str | None: ...

    def exact_tag_at_head(self, pattern: str) -> str | None: ...

    def most_recent_stable_branch(self, pattern: str) -> str | None: ...

    def most_recent_release_tag(self, pattern: str) -> str | None: ...


class GitRepository:
    """Query a git checkout; every failed or empty query returns None."""

    def __init__(self, repo_root: Path | None = None, git: str = "git"):
        self.repo_root = repo_root
        self.git = git

    def _query(self, query: str, args: list[str]) -> str | None:
        try:
            output = run_git(args, repo_root=self.repo_root, git=self.git)
        except subprocess.CalledProcessError as exc:
            log_event(
                LOGGER,
                logging.DEBUG,
                "git_query_unavailable",
                query=query,
                returncode=exc.returncode,
                stderr=(exc.stderr or "").strip(),
            )
            return None
        except (OSError, UnicodeDecodeError) as exc:
            log_event(
                LOGGER,
                logging.DEBUG,
                "git_query_unavailable",
                query=query,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return None

        value = output.strip()
        if not value:
            log_event(LOGGER, logging.DEBUG, "git_query_unavailable", query=query, reason="empty output")
            return None
        return value

    def current_commit_hash(self) -> str | None:
        return self._query("current_commit_hash", ["log", "-1", "--format=%H"])

    def current_commit_timestamp(self) -> str | None:
        return self._query("current_commit_timestamp", ["show", "-s", "--format=%ct"])

    def exact_tag_at_head(self, pattern: str) -> str | None:
        return self._query(
            "exact_tag_at_head",
            ["describe", "--tags", "--exact-match", "--match", pattern],
        )

    def most_recent_stable_branch(self, pattern: str) -> str | None:
        # --all yields refs such as "heads/3-1-stable" or "remotes/origin/3-1-stable".
        return self._query(
            "most_recent_stable_branch",
            ["describe", "--all", "--abbrev=0", "--first-parent", "--match", pattern],
        )

    def most_recent_release_tag(self, pattern: str) -> str | None:
        return self._query(
            "most_recent_release_tag",
            ["describe", "--tags", "--abbrev=0", "--match", pattern],
        )
