#!/usr/bin/env python3
"""Render a classified version as a display string or a URL namespace segment."""

from __future__ import annotations

from typing import assert_never

from versioning import Version, VersionState

SHORT_HASH_LENGTH = 8
NO_COMMIT_MONTH = "0001-01"


def short_hash(commit_hash: str) -> str:
    """First 8 characters of the hash; shorter hashes are returned unchanged."""
    return commit_hash[:SHORT_HASH_LENGTH]


def commit_month(version: Version) -> str:
    if version.commit_date is None:
        return NO_COMMIT_MONTH
    return version.commit_date.strftime("%Y-%m")


def _numbers(version: Version) -> str:
    return f"v{version.major}.{version.minor}.{version.patch}"


def display(version: Version) -> str:
    state = version.state
    if state is VersionState.INIT:
        return "v0.0.0"
    elif state is VersionState.RELEASE:
        return _numbers(version)
    elif state is VersionState.RELEASE_CANDIDATE:
        return f"{_numbers(version)}-{short_hash(version.commit_hash)}"
    elif state is VersionState.FEATURE:
        return f"dev-{short_hash(version.commit_hash)}"
    else:
        assert_never(state)


def namespace(version: Version) -> str:
    state = version.state
    if state is VersionState.INIT:
        return "/v0.0.0"
    elif state is VersionState.RELEASE:
        return f"/{_numbers(version)}"
    elif state is VersionState.RELEASE_CANDIDATE:
        return f"/{_numbers(version)}:{version.commit_hash}"
    elif state is VersionState.FEATURE:
        return f"/dev-{commit_month(version)}:{version.commit_hash}"
    else:
        assert_never(state)
