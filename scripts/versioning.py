#!/usr/bin/env python3
"""Classify the current commit into a version state.

The classification is a fixed precedence of steps, first applicable wins:

1. exact ``v*`` tag on HEAD -> release
2. most recent first-parent ``<major>-<minor>-stable`` branch -> release candidate,
   patch is one past the most recent reachable ``v*`` tag (or 1)
3. anything else -> feature

Without a resolvable HEAD the state is ``INIT``.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from repo_query import RepositoryQueries
from shared import log_event

LOGGER = logging.getLogger("git_version.versioning")

RELEASE_TAG_PATTERN = "v*"
STABLE_BRANCH_PATTERN = "*-stable"
STABLE_BRANCH_RE = re.compile(r"(?:^|/)((?:0|[1-9]\d*)-(?:0|[1-9]\d*))-stable$", re.MULTILINE)
INT32_MAX = 2**31 - 1


class ParseError(ValueError):
    """A tag or branch name does not carry the expected version numbers."""


class InconsistentRepositoryError(RuntimeError):
    """git reported success but returned a value that cannot be interpreted."""


class VersionState(enum.Enum):
    INIT = "init"
    RELEASE = "release"
    RELEASE_CANDIDATE = "rc"
    FEATURE = "feature"


@dataclass(frozen=True)
class Version:
    state: VersionState
    major: int = 0
    minor: int = 0
    patch: int = 0
    commit_hash: str = ""
    commit_date: datetime | None = None


@dataclass(frozen=True)
class ParsedNumbers:
    major: int = 0
    minor: int = 0
    patch: int = 0
    components: int = 0


@dataclass(frozen=True)
class HeadCommit:
    commit_hash: str
    commit_date: datetime


ClassificationStep = Callable[[RepositoryQueries, HeadCommit], Version | None]


def _numbers_re(delimiter: str) -> re.Pattern[str]:
    component = r"(0|[1-9]\d*)"
    sep = re.escape(delimiter)
    return re.compile(rf"v?{component}(?:{sep}{component})?(?:{sep}{component})?(?!\d)")


def parse_numbers(text: str, delimiter: str) -> ParsedNumbers:
    """Parse the leading ``major[<d>minor[<d>patch]]`` run of ``text``.

    Components fill major, minor, patch from the left; missing ones stay 0.
    """
    match = _numbers_re(delimiter).match(text.strip())
    if not match:
        raise ParseError(f"no version numbers in {text!r}")

    values: list[int] = []
    for group in match.groups():
        if group is None:
            break
        value = int(group)
        if value > INT32_MAX:
            raise ParseError(f"version component out of range in {text!r}: {group}")
        values.append(value)

    padded = values + [0] * (3 - len(values))
    return ParsedNumbers(major=padded[0], minor=padded[1], patch=padded[2], components=len(values))


def parse_stable_branch(ref: str) -> ParsedNumbers:
    match = STABLE_BRANCH_RE.search(ref.strip())
    if not match:
        raise ParseError(f"invalid stable branch name: {ref!r}")
    return parse_numbers(match.group(1), "-")


def parse_release_tag(tag: str) -> ParsedNumbers:
    """Parse a full ``v<major>.<minor>.<patch>`` tag."""
    if not tag.startswith("v"):
        raise ParseError(f"unsupported version tag: {tag!r}")
    numbers = parse_numbers(tag, ".")
    if numbers.components != 3:
        raise ParseError(f"unsupported version tag: {tag!r}")
    return numbers


def parse_commit_timestamp(raw: str) -> datetime:
    try:
        return datetime.fromtimestamp(int(raw.strip()), tz=UTC)
    except (ValueError, OverflowError, OSError) as exc:
        raise InconsistentRepositoryError(f"invalid commit timestamp from git: {raw!r}") from exc


def _skip(step: str, exc: ParseError) -> None:
    log_event(LOGGER, logging.DEBUG, "version_parse_skipped", step=step, reason=str(exc))


def release_step(repo: RepositoryQueries, head: HeadCommit) -> Version | None:
    tag = repo.exact_tag_at_head(RELEASE_TAG_PATTERN)
    if tag is None:
        return None
    try:
        numbers = parse_numbers(tag, ".")
    except ParseError as exc:
        _skip("release", exc)
        return None

    return Version(
        state=VersionState.RELEASE,
        major=numbers.major,
        minor=numbers.minor,
        patch=numbers.patch,
        commit_hash=head.commit_hash,
        commit_date=head.commit_date,
    )


def release_candidate_step(repo: RepositoryQueries, head: HeadCommit) -> Version | None:
    ref = repo.most_recent_stable_branch(STABLE_BRANCH_PATTERN)
    if ref is None:
        return None
    try:
        branch = parse_stable_branch(ref)
    except ParseError as exc:
        _skip("release_candidate", exc)
        return None

    patch = 1
    previous_tag = repo.most_recent_release_tag(RELEASE_TAG_PATTERN)
    if previous_tag is not None:
        try:
            patch = parse_release_tag(previous_tag).patch + 1
        except ParseError as exc:
            _skip("previous_release", exc)

    return Version(
        state=VersionState.RELEASE_CANDIDATE,
        major=branch.major,
        minor=branch.minor,
        patch=patch,
        commit_hash=head.commit_hash,
        commit_date=head.commit_date,
    )


def feature_step(repo: RepositoryQueries, head: HeadCommit) -> Version | None:
    return Version(
        state=VersionState.FEATURE,
        commit_hash=head.commit_hash,
        commit_date=head.commit_date,
    )


CLASSIFICATION_STEPS: tuple[ClassificationStep, ...] = (
    release_step,
    release_candidate_step,
    feature_step,
)


def first_applicable(
    steps: Sequence[ClassificationStep],
    repo: RepositoryQueries,
    head: HeadCommit,
) -> Version:
    for step in steps:
        version = step(repo, head)
        if version is not None:
            return version
    raise RuntimeError("no classification step applied")


def classify(
    repo: RepositoryQueries,
    steps: Sequence[ClassificationStep] = CLASSIFICATION_STEPS,
) -> Version:
    commit_hash = repo.current_commit_hash()
    if commit_hash is None:
        version = Version(state=VersionState.INIT)
    else:
        raw_timestamp = repo.current_commit_timestamp()
        if raw_timestamp is None:
            version = Version(state=VersionState.INIT, commit_hash=commit_hash)
        else:
            head = HeadCommit(commit_hash=commit_hash, commit_date=parse_commit_timestamp(raw_timestamp))
            version = first_applicable(steps, repo, head)

    log_event(
        LOGGER,
        logging.INFO,
        "version_classified",
        state=version.state.value,
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        commit_hash=version.commit_hash,
    )
    return version
