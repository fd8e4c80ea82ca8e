"""
tagbump package

Compute the next patch version for a release line from existing tags, then hand it
to build/publish commands and tag the release on GitHub.

Key responsibilities are split across modules:
- `resolver.py`: pure next-version computation (parse -> filter -> max -> increment)
- `git.py`: read tags and commit SHAs from a local checkout
- `github_client.py`: isolated GitHub REST API interactions (tag listing / creation)
- `commands.py`: render and run build/publish command templates
- `config.py`: parse the optional release config file
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

from tagbump.resolver import (
    InvalidRequest,
    ResolvedVersion,
    VersionRequest,
    VersionTag,
    parse_tag,
    resolve_next_version,
)

__all__ = [
    "InvalidRequest",
    "ResolvedVersion",
    "VersionRequest",
    "VersionTag",
    "__version__",
    "parse_tag",
    "resolve_next_version",
]

__version__ = "0.1.0"
