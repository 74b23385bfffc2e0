from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]


def load_script_module(module_name: str, relative_path: str) -> ModuleType:
    module_path = REPO_ROOT / relative_path
    scripts_dir = str(module_path.parent)
    if scripts_dir not in sys.path:
        sys.path.insert(0, scripts_dir)

    spec = importlib.util.spec_from_file_location(module_name, module_path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"unable to load module from {module_path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="session")
def repo_root() -> Path:
    return REPO_ROOT


class FakeRepository:
    """Canned answers for the five repository queries; None means unavailable."""

    def __init__(
        self,
        *,
        commit_hash: str | None = None,
        timestamp: str | None = None,
        exact_tag: str | None = None,
        stable_branch: str | None = None,
        release_tag: str | None = None,
    ):
        self._answers: dict[str, str | None] = {
            "current_commit_hash": commit_hash,
            "current_commit_timestamp": timestamp,
            "exact_tag_at_head": exact_tag,
            "most_recent_stable_branch": stable_branch,
            "most_recent_release_tag": release_tag,
        }
        self.calls: list[tuple[str, Any]] = []

    def _answer(self, query: str, pattern: str | None = None) -> str | None:
        self.calls.append((query, pattern))
        return self._answers[query]

    def current_commit_hash(self) -> str | None:
        return self._answer("current_commit_hash")

    def current_commit_timestamp(self) -> str | None:
        return self._answer("current_commit_timestamp")

    def exact_tag_at_head(self, pattern: str) -> str | None:
        return self._answer("exact_tag_at_head", pattern)

    def most_recent_stable_branch(self, pattern: str) -> str | None:
        return self._answer("most_recent_stable_branch", pattern)

    def most_recent_release_tag(self, pattern: str) -> str | None:
        return self._answer("most_recent_release_tag", pattern)

    def queried(self) -> list[str]:
        return [query for query, _pattern in self.calls]


@pytest.fixture
def fake_repository_factory():
    return FakeRepository


@pytest.fixture(scope="session")
def git_version():
    return load_script_module("git_version_cli", "scripts/git-version.py")
