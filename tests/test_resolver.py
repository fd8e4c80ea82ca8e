import pytest

from tagbump.resolver import (
    InvalidRequest,
    ResolvedVersion,
    VersionRequest,
    VersionTag,
    parse_tag,
    resolve_next_version,
)


def _next(major: int, minor: int, tags: list[str]) -> str:
    return str(resolve_next_version(VersionRequest(major, minor), tags))


@pytest.mark.parametrize("major,minor", [(0, 0), (1, 2), (10, 0), (3, 14)])
def test_empty_tag_set_seeds_patch_zero(major: int, minor: int) -> None:
    assert resolve_next_version(VersionRequest(major, minor), []) == ResolvedVersion(major, minor, 0)


def test_increments_highest_patch() -> None:
    assert _next(1, 2, ["v1.2.0", "v1.2.1", "v1.2.5"]) == "1.2.6"


def test_other_lines_are_ignored() -> None:
    assert _next(1, 2, ["v1.2.0", "v1.3.0", "v2.0.0"]) == "1.2.1"
    assert _next(1, 2, ["v1.3.7", "v2.2.9", "v11.2.4", "v1.20.3"]) == "1.2.0"


def test_patch_max_is_numeric() -> None:
    assert _next(1, 2, ["v1.2.9", "v1.2.10"]) == "1.2.11"
    assert _next(1, 2, ["v1.2.10", "v1.2.9", "v1.2.2"]) == "1.2.11"


def test_malformed_tags_are_skipped() -> None:
    assert _next(1, 2, ["release-candidate", "v1.2", "1.2.3.4", "v1.2.3"]) == "1.2.4"


def test_only_malformed_tags_seed_patch_zero() -> None:
    assert _next(1, 2, ["v1.2.3-rc1", "V1.2.3", " v1.2.3", "v1.2.3\n", "vv1.2.3", "latest"]) == "1.2.0"


def test_missing_v_prefix_is_accepted() -> None:
    assert _next(1, 2, ["1.2.4", "v1.2.1"]) == "1.2.5"


def test_duplicates_do_not_change_result() -> None:
    assert _next(1, 2, ["v1.2.3", "v1.2.3", "1.2.3", "v01.2.3"]) == "1.2.4"


def test_leading_zeros_are_numeric() -> None:
    assert parse_tag("v1.02.3") == VersionTag(1, 2, 3)
    assert _next(1, 2, ["v1.02.3"]) == "1.2.4"
    assert _next(1, 2, ["v1.2.007"]) == "1.2.8"


def test_parse_tag_rejects_non_ascii_digits() -> None:
    assert parse_tag("v1.2.٣") is None


def test_parse_tag_rejects_non_strings() -> None:
    assert parse_tag(None) is None  # type: ignore[arg-type]
    assert parse_tag(123) is None  # type: ignore[arg-type]


def test_accepts_any_iterable_of_tags() -> None:
    tags = (t for t in ["v1.2.0", "v1.2.1"])
    assert _next(1, 2, tags) == "1.2.2"  # type: ignore[arg-type]


def test_idempotent_for_unchanged_input() -> None:
    tags = ["v1.2.0", "v1.2.4", "v0.9.9", "nightly"]
    request = VersionRequest(1, 2)
    assert resolve_next_version(request, tags) == resolve_next_version(request, tags)


def test_monotonic_when_tag_set_grows() -> None:
    request = VersionRequest(1, 2)
    tags_a = ["v1.2.0", "v1.2.3", "v2.0.0"]
    before = resolve_next_version(request, tags_a)
    for p in (4, 9, 100):
        after = resolve_next_version(request, tags_a + [f"v1.2.{p}"])
        assert after > before


def test_re_adding_current_max_is_a_duplicate() -> None:
    request = VersionRequest(1, 2)
    tags_a = ["v1.2.0", "v1.2.3"]
    assert resolve_next_version(request, tags_a + ["v1.2.3"]) == resolve_next_version(request, tags_a)


def test_resolving_then_tagging_moves_forward() -> None:
    request = VersionRequest(0, 1)
    tags: list[str] = []
    seen = []
    for _ in range(12):
        version = resolve_next_version(request, tags)
        seen.append(version)
        tags.append(version.tag())
    assert [v.patch for v in seen] == list(range(12))


def test_resolved_version_formatting() -> None:
    version = ResolvedVersion(1, 2, 3)
    assert str(version) == "1.2.3"
    assert version.tag() == "v1.2.3"
    assert version.tag("") == "1.2.3"


def test_negative_request_raises() -> None:
    with pytest.raises(InvalidRequest):
        VersionRequest(-1, 2)
    with pytest.raises(InvalidRequest):
        VersionRequest(1, -2)


@pytest.mark.parametrize("bad", [None, "", "x", "1.5", "-1", 1.5, 2.0, True, [1]])
def test_non_integral_request_raises(bad: object) -> None:
    with pytest.raises(InvalidRequest):
        VersionRequest.coerce(bad, 0)
    with pytest.raises(InvalidRequest):
        VersionRequest.coerce(0, bad)


def test_coerce_accepts_digit_strings() -> None:
    assert VersionRequest.coerce("1", " 02 ") == VersionRequest(1, 2)


def test_resolve_rejects_non_request() -> None:
    with pytest.raises(InvalidRequest):
        resolve_next_version((1, 2), ["v1.2.0"])  # type: ignore[arg-type]
