import pytest


@pytest.fixture(autouse=True)
def _clean_ci_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the runner's own CI variables out of CLI tests."""
    for name in ("GITHUB_OUTPUT", "GITHUB_TOKEN", "GITHUB_REPOSITORY", "TAGBUMP_MAJOR", "TAGBUMP_MINOR"):
        monkeypatch.delenv(name, raising=False)
