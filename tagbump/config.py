"""
config.py

Responsibility: Load a release config file into a deterministic, typed model.

Accepted inputs:
- A YAML file (`.yml` / `.yaml`) whose top level is a mapping.
- A markdown file starting with YAML frontmatter delimited by '---'.

Request validation (major/minor) is left to `resolver.VersionRequest`; this module
only checks the shape of the document.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    pass


class _ConfigLoader(yaml.SafeLoader):
    pass


def _construct_int(loader: _ConfigLoader, node: yaml.ScalarNode) -> int:
    """
    Read leading-zero integers as decimal, the way tag components are read.

    YAML 1.1 would turn `minor: 010` into 8.
    """
    value = str(loader.construct_scalar(node)).replace("_", "")
    if re.fullmatch(r"[-+]?0[0-9]+", value):
        return int(value, 10)
    return loader.construct_yaml_int(node)


_ConfigLoader.add_constructor("tag:yaml.org,2002:int", _construct_int)


@dataclass(frozen=True)
class GitHubConfig:
    owner: str | None = None
    repo: str | None = None


@dataclass(frozen=True)
class ReleaseConfig:
    """Release settings shared by the `resolve` and `release` commands."""

    major: Any = None
    minor: Any = None
    tag_prefix: str = "v"
    github: GitHubConfig = field(default_factory=GitHubConfig)
    build: tuple[str, ...] = ()
    publish: tuple[str, ...] = ()


def _parse_yaml_frontmatter(text: str) -> dict[str, Any] | None:
    """
    If the markdown begins with YAML frontmatter delimited by '---', parse it.
    """
    if not text.startswith("---\n"):
        return None

    end = text.find("\n---\n", 4)
    if end == -1:
        raise ConfigError("YAML frontmatter starts with '---' but no closing '---' was found.")
    return _load_mapping(text[4:end])


def _load_mapping(text: str) -> dict[str, Any]:
    try:
        data = yaml.load(text, Loader=_ConfigLoader) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Release config must be a mapping/object at the top level.")
    return data


def _command_list(data: dict[str, Any], key: str) -> tuple[str, ...]:
    raw = data.get(key)
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if not isinstance(raw, list) or not all(isinstance(c, str) for c in raw):
        raise ConfigError(f"`{key}` must be a command string or a list of command strings.")
    return tuple(raw)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def parse_config(data: dict[str, Any]) -> ReleaseConfig:
    gh_raw = data.get("github") or {}
    if not isinstance(gh_raw, dict):
        raise ConfigError("`github` must be an object/mapping when provided.")

    owner = _optional_str(gh_raw.get("owner"))
    repo = _optional_str(gh_raw.get("repo"))

    tag_prefix = data.get("tag_prefix", "v")
    if tag_prefix is None:
        tag_prefix = ""
    # Only prefixes the resolver can read back are allowed.
    if tag_prefix not in ("v", ""):
        raise ConfigError(f"`tag_prefix` must be \"v\" or \"\", got {tag_prefix!r}.")

    return ReleaseConfig(
        major=data.get("major"),
        minor=data.get("minor"),
        tag_prefix=tag_prefix,
        github=GitHubConfig(owner=owner, repo=repo),
        build=_command_list(data, "build"),
        publish=_command_list(data, "publish"),
    )


def load_config(path: str | Path) -> ReleaseConfig:
    """
    Parse a release config file into a `ReleaseConfig`.

    Recognised keys:
    - major, minor: the version line (required by the commands, validated later)
    - tag_prefix: str (default "v")
    - github.owner, github.repo: str
    - build, publish: command template or list of command templates
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file does not exist: {p}")
    text = p.read_text(encoding="utf-8")

    data = _parse_yaml_frontmatter(text)
    if data is None:
        data = _load_mapping(text)
    return parse_config(data)
