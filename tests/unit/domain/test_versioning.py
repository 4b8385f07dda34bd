"""Unit tests for version parsing and comparison helpers."""

import pytest

from scaffold_sentinel.domain.errors import VersionParseError
from scaffold_sentinel.domain.versioning import (
    clean_version,
    compare_versions,
    extract_major_version,
    is_breaking_update,
    is_lts_major,
    is_version_older,
    nearest_lts_major,
    resolved_version,
    strip_comparator,
    update_type,
)


class TestExtractMajorVersion:
    @pytest.mark.parametrize("version", [">=5.2.1", "5.2.1", "^5.0.0", "~5.1", "<5.9.9"])
    def test_comparator_prefix_does_not_change_major(self, version: str) -> None:
        """Stripping any comparator leaves the same major."""
        assert extract_major_version(version) == 5

    @pytest.mark.parametrize("version", ["", "   ", "abc", ">=x.1.0", "^.1.0", "².0.0", ">=³"])
    def test_empty_or_non_numeric_raises(self, version: str) -> None:
        """Empty, non-numeric and non-ASCII leading segments are rejected."""
        with pytest.raises(VersionParseError):
            extract_major_version(version)

    def test_parse_error_is_a_value_error(self) -> None:
        """VersionParseError can be caught as ValueError."""
        with pytest.raises(ValueError):
            extract_major_version("latest")


def test_strip_comparator() -> None:
    """Operators and the whitespace after them are removed."""
    assert strip_comparator("~1.2.3") == "1.2.3"
    assert strip_comparator(">= 20.0.0") == "20.0.0"
    assert strip_comparator("1.2.3") == "1.2.3"


def test_clean_version_drops_prefix_and_v() -> None:
    assert clean_version("^v4.17.15") == "4.17.15"
    assert clean_version("v1.9.0") == "1.9.0"


def test_resolved_version() -> None:
    """Ranges resolve to their base version; tags resolve to None."""
    assert resolved_version("^4.17.15") == "4.17.15"
    assert resolved_version("latest") is None
    assert resolved_version("") is None


class TestComparison:
    def test_semantic_ordering_handles_multi_digit_majors(self) -> None:
        """9.0.0 is older than 10.0.0 semantically."""
        assert compare_versions("9.0.0", "10.0.0") == -1
        assert is_version_older("9.0.0", "10.0.0")
        assert not is_version_older("10.0.0", "9.0.0")

    def test_lexicographic_ordering_is_available(self) -> None:
        """String ordering puts 10.0.0 before 9.0.0."""
        assert is_version_older("10.0.0", "9.0.0", lexicographic=True)

    def test_pre_release_sorts_before_release(self) -> None:
        """Pre-releases precede their release and order by identifier."""
        assert compare_versions("1.0.0-alpha", "1.0.0") == -1
        assert compare_versions("1.0.0-alpha.1", "1.0.0-alpha.2") == -1

    def test_equal_versions(self) -> None:
        """Comparators and missing patch components do not affect equality."""
        assert compare_versions("^1.2.3", "1.2.3") == 0
        assert compare_versions("1.2", "1.2.0") == 0


def test_breaking_update_is_major_change() -> None:
    """Only a major bump is breaking."""
    assert is_breaking_update("4.17.15", "5.0.0")
    assert not is_breaking_update("^4.17.15", "4.17.21")
    assert update_type("4.17.15", "4.17.21") == "minor"
    assert update_type("17.0.2", "18.2.0") == "major"


def test_lts_helpers() -> None:
    """Even majors are LTS; suggestions step down to even but never below the floor."""
    assert is_lts_major(20)
    assert not is_lts_major(21)
    assert nearest_lts_major(21, 18) == 20
    assert nearest_lts_major(17, 18) == 18
    assert nearest_lts_major(22, 18) == 22
