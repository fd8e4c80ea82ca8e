"""
cli.py

Responsibility: CLI entrypoint for tagbump, meant to run as a CI pipeline step.

Commands:
- `resolve`: collect tags -> compute next version -> print it (and write GITHUB_OUTPUT)
- `release`: resolve -> run build commands -> run publish commands -> create tag on GitHub

This module orchestrates and turns errors into exit codes; concerns stay isolated:
- Version computation: `resolver.py`
- Tags / commit SHA from the checkout: `git.py`
- GitHub API: `github_client.py`
- Build/publish command templates: `commands.py`
- Release config file: `config.py`
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from tagbump import git
from tagbump.commands import CommandError, run_commands, version_context
from tagbump.config import ConfigError, GitHubConfig, ReleaseConfig, load_config
from tagbump.github_client import GitHubClient, GitHubError
from tagbump.resolver import InvalidRequest, ResolvedVersion, VersionRequest, resolve_next_version

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


class CLIError(RuntimeError):
    pass


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    # stdout is reserved for the resolved version.
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def _load_config(args: argparse.Namespace) -> ReleaseConfig:
    return load_config(args.config) if args.config else ReleaseConfig()


def _github_target(args: argparse.Namespace, cfg: GitHubConfig) -> tuple[str, str]:
    owner = args.github_owner or cfg.owner
    repo = args.github_repo or cfg.repo
    if (not owner or not repo) and os.environ.get("GITHUB_REPOSITORY"):
        env_owner, _, env_repo = os.environ["GITHUB_REPOSITORY"].partition("/")
        owner = owner or env_owner
        repo = repo or env_repo
    if not owner or not repo:
        raise CLIError("GitHub owner/repo is required (use --github-owner/--github-repo, config, or GITHUB_REPOSITORY)")
    return owner, repo


def _github_client(args: argparse.Namespace) -> GitHubClient:
    token = args.github_token or os.environ.get("GITHUB_TOKEN") or ""
    if not token:
        raise CLIError("GitHub token is required (use --github-token or set GITHUB_TOKEN)")
    return GitHubClient(token, api_base=args.github_api)


def _read_tags_file(path: str) -> list[str]:
    if path == "-":
        # Read bytes where possible so undecodable tag names cannot abort the run.
        buffer = getattr(sys.stdin, "buffer", None)
        if buffer is not None:
            text = buffer.read().decode("utf-8", errors="surrogateescape")
        else:
            text = sys.stdin.read()
    else:
        p = Path(path)
        if not p.exists():
            raise CLIError(f"Tags file does not exist: {p}")
        text = p.read_text(encoding="utf-8", errors="surrogateescape")
    return [line.strip() for line in text.splitlines() if line.strip()]


def _collect_tags(args: argparse.Namespace, cfg: ReleaseConfig) -> list[str]:
    if args.tags_file:
        return _read_tags_file(args.tags_file)
    if args.from_github:
        owner, repo = _github_target(args, cfg.github)
        return _github_client(args).list_tags(owner, repo)
    return git.list_tags(args.repo_dir)


def _request(args: argparse.Namespace, cfg: ReleaseConfig) -> VersionRequest:
    # Precedence: flag > environment > config file. Empty env values count as unset.
    major = args.major if args.major is not None else os.environ.get("TAGBUMP_MAJOR") or cfg.major
    minor = args.minor if args.minor is not None else os.environ.get("TAGBUMP_MINOR") or cfg.minor
    return VersionRequest.coerce(major, minor)


def _write_github_output(path: str | None, version: ResolvedVersion, tag: str) -> None:
    if not path:
        return
    try:
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(f"version={version}\n")
            fh.write(f"tag={tag}\n")
    except OSError as e:
        raise CLIError(f"Cannot write GitHub output file {path}: {e}") from e


def _resolve(args: argparse.Namespace, cfg: ReleaseConfig) -> ResolvedVersion:
    request = _request(args, cfg)
    tags = _collect_tags(args, cfg)
    version = resolve_next_version(request, tags)
    logger.info("Resolved %s from %d tag(s) for line %d.%d", version, len(tags), request.major, request.minor)
    return version


def resolve_cmd(args: argparse.Namespace) -> int:
    cfg = _load_config(args)
    version = _resolve(args, cfg)
    _write_github_output(args.github_output, version, version.tag(cfg.tag_prefix))
    print(version)
    return EXIT_OK


def release_cmd(args: argparse.Namespace) -> int:
    cfg = _load_config(args)
    version = _resolve(args, cfg)
    tag = version.tag(cfg.tag_prefix)
    context = version_context(version, tag_prefix=cfg.tag_prefix)

    # Check tagging prerequisites before anything gets published.
    create_tag = not (args.skip_tag or args.dry_run)
    if create_tag:
        owner, repo = _github_target(args, cfg.github)
        client = _github_client(args)
        sha = args.sha or git.head_sha(args.repo_dir)

    run_commands(cfg.build, context, cwd=args.repo_dir, dry_run=args.dry_run)
    run_commands(cfg.publish, context, cwd=args.repo_dir, dry_run=args.dry_run)

    if create_tag:
        client.create_tag(owner=owner, repo=repo, tag=tag, sha=sha)
    elif args.skip_tag:
        logger.info("Skipping tag creation for %s", tag)
    else:
        logger.info("[dry-run] would create tag %s", tag)

    _write_github_output(args.github_output, version, tag)
    print(version)
    return EXIT_OK


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--major", default=None, help="Major version of the release line (or env TAGBUMP_MAJOR)")
    p.add_argument("--minor", default=None, help="Minor version of the release line (or env TAGBUMP_MINOR)")
    p.add_argument("--config", default=None, help="Release config file (YAML, or markdown with YAML frontmatter)")
    p.add_argument("--repo-dir", default=".", help="Git checkout to read tags from and run commands in (default: .)")
    p.add_argument("--tags-file", default=None, help="Read tags from a file, one per line ('-' for stdin)")
    p.add_argument("--from-github", action="store_true", help="Read tags from the GitHub API instead of local git")

    p.add_argument("--github-owner", default=None, help="GitHub owner (user or org)")
    p.add_argument("--github-repo", default=None, help="GitHub repository name")
    p.add_argument("--github-token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    p.add_argument("--github-api", default="https://api.github.com", help="GitHub API base URL")
    p.add_argument(
        "--github-output",
        default=os.environ.get("GITHUB_OUTPUT"),
        help="File to append version=/tag= outputs to (default: env GITHUB_OUTPUT)",
    )
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tagbump", description="Compute and publish the next patch version from git tags")
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("resolve", help="Print the next MAJOR.MINOR.PATCH for a release line")
    _add_common_args(r)
    r.set_defaults(func=resolve_cmd)

    rel = sub.add_parser("release", help="Resolve, run build/publish commands, create the tag on GitHub")
    _add_common_args(rel)
    rel.add_argument("--sha", default=None, help="Commit to tag (default: HEAD of --repo-dir)")
    rel.add_argument("--skip-tag", action="store_true", help="Do not create the tag on GitHub")
    rel.add_argument("--dry-run", action="store_true", help="Log commands and the tag instead of running them")
    rel.set_defaults(func=release_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return int(args.func(args))
    except (InvalidRequest, ConfigError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except (CLIError, CommandError, GitHubError, git.GitError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
