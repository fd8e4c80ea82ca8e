"""
commands.py

Responsibility: Render build/publish command templates with the resolved version
and run them in order.

Rules:
- Command strings are Jinja2 templates (`{{ version }}`, `{{ tag }}`, ...).
- Undefined variables are errors, never empty strings.
- Rendered commands are split shell-style and run without a shell.
- The first failing command stops the run.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, StrictUndefined, TemplateError

from tagbump.resolver import ResolvedVersion

logger = logging.getLogger(__name__)

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=False)


class CommandError(RuntimeError):
    pass


def version_context(version: ResolvedVersion, *, tag_prefix: str = "v") -> dict[str, Any]:
    return {
        "version": str(version),
        "tag": version.tag(tag_prefix),
        "major": version.major,
        "minor": version.minor,
        "patch": version.patch,
    }


def render_command(template: str, context: dict[str, Any]) -> list[str]:
    """Render one command template and split it into argv."""
    try:
        text = _env.from_string(template).render(**context)
    except TemplateError as e:
        raise CommandError(f"Failed rendering command template: {template!r}: {e}") from e
    try:
        argv = shlex.split(text)
    except ValueError as e:
        raise CommandError(f"Invalid command {template!r}: {e}") from e
    if not argv:
        raise CommandError(f"Command template rendered to nothing: {template!r}")
    return argv


def run_commands(
    templates: Iterable[str],
    context: dict[str, Any],
    *,
    cwd: str | Path = ".",
    dry_run: bool = False,
) -> list[list[str]]:
    """
    Render and run each template. Returns the argv lists that were (or would be) run.
    """
    # Render everything first so a template typo fails before anything executes.
    rendered = [render_command(t, context) for t in templates]
    for argv in rendered:
        if dry_run:
            logger.info("[dry-run] %s", shlex.join(argv))
            continue
        logger.info("Running %s", shlex.join(argv))
        try:
            subprocess.run(argv, cwd=str(cwd), check=True)
        except FileNotFoundError as e:
            raise CommandError(f"Command not found: {argv[0]}") from e
        except subprocess.CalledProcessError as e:
            raise CommandError(f"Command failed with exit code {e.returncode}: {shlex.join(argv)}") from e
    return rendered
