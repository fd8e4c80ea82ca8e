"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to api.github.com
- Interprets GitHub API responses / error payloads

Version computation lives in `resolver.py`; this client only lists and creates tags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)

_TAG_REF_PREFIX = "refs/tags/"


class GitHubError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class TagRef:
    name: str
    sha: str
    url: str


class GitHubClient:
    def __init__(self, token: str, api_base: str = "https://api.github.com", timeout: float = 30) -> None:
        if not token.strip():
            raise GitHubError("GitHub token is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "tagbump",
        }

    def _request(self, method: str, path: str, *, json_body: dict[str, Any] | None = None) -> Any:
        url = f"{self._api_base}{path}"
        logger.debug("%s %s", method, url)
        try:
            r = requests.request(method, url, headers=self._headers(), json=json_body, timeout=self._timeout)
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            message = payload.get("message", payload) if isinstance(payload, dict) else payload
            raise GitHubError(
                f"GitHub API error {r.status_code} {method} {path}: {message}",
                status_code=r.status_code,
            )
        if r.status_code == 204:
            return None
        return r.json()

    def list_tags(self, owner: str, repo: str) -> list[str]:
        """
        Return all tag names in owner/repo.

        Useful in CI checkouts fetched without tags (shallow clones).
        """
        data = self._request("GET", f"/repos/{owner}/{repo}/git/matching-refs/tags")
        tags = [
            str(item["ref"])[len(_TAG_REF_PREFIX) :]
            for item in data or []
            if str(item.get("ref", "")).startswith(_TAG_REF_PREFIX)
        ]
        logger.info("Fetched %d tag(s) from %s/%s", len(tags), owner, repo)
        return tags

    def create_tag(self, *, owner: str, repo: str, tag: str, sha: str) -> TagRef:
        """
        Create a lightweight tag `tag` pointing at commit `sha`.

        GitHub answers 422 when the ref already exists; that surfaces as GitHubError.
        """
        body = {"ref": f"{_TAG_REF_PREFIX}{tag}", "sha": sha}
        data = self._request("POST", f"/repos/{owner}/{repo}/git/refs", json_body=body)
        logger.info("Created tag %s at %s in %s/%s", tag, sha, owner, repo)
        obj = data.get("object") or {}
        return TagRef(name=tag, sha=str(obj.get("sha") or sha), url=str(data.get("url") or ""))
