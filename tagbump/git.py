"""
git.py

Responsibility: Read release inputs from a local git checkout.

Only two things are needed from git:
- the list of existing tag names (fed to the resolver)
- the commit SHA a new tag should point at

Everything else (tag creation, pushing) goes through `github_client.py`.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    pass


def _run(cmd: list[str], *, cwd: str | Path) -> str:
    """
    Run a git command and return its stdout, raising a GitError on failure.
    """
    logger.debug("Running %s in %s", " ".join(cmd), cwd)
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            # Tag names are arbitrary bytes; undecodable ones just fail to parse.
            errors="surrogateescape",
        )
    except FileNotFoundError as e:
        raise GitError(f"Command not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        raise GitError(f"Command failed: {' '.join(cmd)}\n\n{e.stderr or e.stdout}") from e
    return result.stdout


def list_tags(cwd: str | Path = ".") -> list[str]:
    """Return every tag name in the repository at `cwd`, in git's output order."""
    out = _run(["git", "tag", "--list"], cwd=cwd)
    tags = [line.strip() for line in out.splitlines() if line.strip()]
    logger.info("Found %d tag(s) in %s", len(tags), cwd)
    return tags


def head_sha(cwd: str | Path = ".", ref: str = "HEAD") -> str:
    sha = _run(["git", "rev-parse", "--verify", f"{ref}^{{commit}}"], cwd=cwd).strip()
    if not sha:
        raise GitError(f"git rev-parse returned no commit for {ref!r}")
    return sha
