"""Unit tests for SentinelConfig."""

import logging

import pytest

from scaffold_sentinel.domain.config import SentinelConfig
from scaffold_sentinel.domain.constants import DEFAULT_EXCLUDED_DIRS


def test_defaults() -> None:
    """An absent table yields the documented defaults."""
    config = SentinelConfig.from_dict(None)
    assert config.dry_run is False
    assert config.backup_enabled is True
    assert config.excluded_dirs == DEFAULT_EXCLUDED_DIRS
    assert config.vulnerability_source == "static"
    assert config.cache_ttl_seconds == 24 * 3600
    assert config.lexicographic_outdated is False


def test_dashed_keys_are_accepted() -> None:
    """TOML-style dashed keys map onto the underscore fields."""
    config = SentinelConfig.from_dict(
        {
            "dry-run": True,
            "disabled-rules": ["security.secrets"],
            "vulnerability-source": "osv",
            "lookup-timeout-seconds": 5,
            "outdated-comparison": "lexicographic",
        }
    )
    assert config.dry_run is True
    assert config.disabled_rules == ("security.secrets",)
    assert config.vulnerability_source == "osv"
    assert config.lookup_timeout_seconds == 5.0
    assert config.lexicographic_outdated is True


def test_unknown_key_is_logged_and_ignored(caplog: pytest.LogCaptureFixture) -> None:
    """Unknown keys warn and change nothing."""
    with caplog.at_level(logging.WARNING):
        config = SentinelConfig.from_dict({"colour": "blue"})
    assert config == SentinelConfig()
    assert "Unknown config key ignored: colour" in caplog.text


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("dry_run", "yes"),
        ("excluded_dirs", "node_modules"),
        ("vulnerability_source", "nvd"),
        ("cache_ttl_hours", -1),
        ("lookup_timeout_seconds", True),
    ],
)
def test_invalid_values_fall_back_to_default(
    key: str, value: object, caplog: pytest.LogCaptureFixture
) -> None:
    """A wrongly typed value keeps the default and logs why."""
    with caplog.at_level(logging.WARNING):
        config = SentinelConfig.from_dict({key: value})
    assert getattr(config, key) == getattr(SentinelConfig(), key)
    assert f"Invalid value for {key}" in caplog.text
