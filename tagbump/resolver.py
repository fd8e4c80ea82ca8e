"""
resolver.py

Responsibility: Compute the next patch version for a (major, minor) line from a
collection of existing tag names.

This module is pure:
- No subprocess, filesystem, network, or environment access.
- Callers collect the tag list (git, GitHub API, a file) and pass it in.

Malformed tags are ignored. Only the request itself can fail validation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

# ASCII digits only; `\d` would also accept other Unicode decimal digits.
_TAG_RE = re.compile(r"v?([0-9]+)\.([0-9]+)\.([0-9]+)")


class InvalidRequest(ValueError):
    pass


@dataclass(frozen=True, order=True)
class VersionTag:
    """A well-formed `vMAJOR.MINOR.PATCH` tag, numerically parsed."""

    major: int
    minor: int
    patch: int


def _coerce_component(name: str, value: object) -> int:
    if value is None:
        raise InvalidRequest(f"`{name}` is required.")
    # bool is an int subclass; True/False are never meaningful versions.
    if isinstance(value, bool):
        raise InvalidRequest(f"`{name}` must be a non-negative integer, got {value!r}.")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and re.fullmatch(r"[0-9]+", value.strip()):
        number = int(value.strip())
    else:
        raise InvalidRequest(f"`{name}` must be a non-negative integer, got {value!r}.")
    if number < 0:
        raise InvalidRequest(f"`{name}` must be a non-negative integer, got {value!r}.")
    return number


@dataclass(frozen=True)
class VersionRequest:
    """The version line a release should be cut on."""

    major: int
    minor: int

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize in place so "2" and 2 compare equal.
        object.__setattr__(self, "major", _coerce_component("major", self.major))
        object.__setattr__(self, "minor", _coerce_component("minor", self.minor))

    @classmethod
    def coerce(cls, major: object, minor: object) -> VersionRequest:
        """
        Build a request from loosely-typed input (CLI args, env vars, YAML).

        Accepts ints and decimal-digit strings. Anything else raises InvalidRequest.
        """
        return cls(major=major, minor=minor)  # type: ignore[arg-type]


@dataclass(frozen=True, order=True)
class ResolvedVersion:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def tag(self, prefix: str = "v") -> str:
        return f"{prefix}{self}"


def parse_tag(raw: str) -> VersionTag | None:
    """
    Parse `vMAJOR.MINOR.PATCH` (leading `v` optional). Returns None for anything else.

    Leading zeros are accepted and read numerically: `v1.02.3` is (1, 2, 3).
    """
    if not isinstance(raw, str):
        return None
    m = _TAG_RE.fullmatch(raw)
    if m is None:
        return None
    major, minor, patch = (int(g) for g in m.groups())
    return VersionTag(major=major, minor=minor, patch=patch)


def resolve_next_version(request: VersionRequest, tags: Iterable[str]) -> ResolvedVersion:
    """
    Return the next patch version on `request`'s line.

    - No matching tags: patch 0 (first release on the line).
    - Otherwise: highest existing patch + 1, compared numerically.
    """
    if not isinstance(request, VersionRequest):
        raise InvalidRequest(f"Expected a VersionRequest, got {type(request).__name__}.")

    patches = {
        parsed.patch
        for parsed in (parse_tag(t) for t in tags)
        if parsed is not None and parsed.major == request.major and parsed.minor == request.minor
    }
    patch = max(patches) + 1 if patches else 0
    return ResolvedVersion(major=request.major, minor=request.minor, patch=patch)
