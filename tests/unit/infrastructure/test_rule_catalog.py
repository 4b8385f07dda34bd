"""Unit tests for RuleCatalogLoader."""

from pathlib import Path

import pytest

from scaffold_sentinel.domain.constants import RuleCategory, Severity
from scaffold_sentinel.domain.errors import InvalidRuleError
from scaffold_sentinel.infrastructure.services.rule_catalog import RuleCatalogLoader

CATALOG = """
docs.changelog.required:
  name: CHANGELOG Required
  description: Project should keep a CHANGELOG
  category: structure
  severity: warning
  file_types: [".md"]
quality.todo:
  name: No TODO
  description: Flag TODO markers
  category: quality
  severity: info
  enabled: false
"""


def write(tmp_path: Path, text: str) -> str:
    path = tmp_path / "rules.yaml"
    path.write_text(text)
    return str(path)


def test_loads_rules(tmp_path: Path) -> None:
    """Every field of a catalog entry lands on the ValidationRule."""
    rules = RuleCatalogLoader(write(tmp_path, CATALOG)).load()
    assert [r.id for r in rules] == ["docs.changelog.required", "quality.todo"]
    changelog, todo = rules
    assert changelog.category is RuleCategory.STRUCTURE
    assert changelog.severity is Severity.WARNING
    assert changelog.applicable_file_types == frozenset({".md"})
    assert not changelog.fixable
    assert not todo.enabled


def test_missing_catalog_is_empty(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """A configured but absent catalog is logged, not fatal."""
    assert RuleCatalogLoader(str(tmp_path / "absent.yaml")).load() == []
    assert "Rule catalog not found" in caplog.text


def test_empty_catalog(tmp_path: Path) -> None:
    assert RuleCatalogLoader(write(tmp_path, "")).load() == []


@pytest.mark.parametrize(
    "text",
    ["- a\n- b\n", "jobs: [build, test\n"],
)
def test_unusable_catalog_is_logged_and_empty(
    tmp_path: Path, text: str, caplog: pytest.LogCaptureFixture
) -> None:
    """A list or broken YAML yields no rules and a warning."""
    assert RuleCatalogLoader(write(tmp_path, text)).load() == []
    assert "rule catalog" in caplog.text.lower()


def test_bad_entries_are_skipped(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """One broken entry does not cost the rest of the catalog."""
    text = (
        "good.rule:\n  name: Good\n  description: d\n  category: quality\n  severity: info\n"
        "bad.rule:\n  name: Bad\n  description: d\n  category: nope\n  severity: error\n"
    )
    rules = RuleCatalogLoader(write(tmp_path, text)).load()
    assert [r.id for r in rules] == ["good.rule"]
    assert "Skipping catalog entry: rule bad.rule" in caplog.text


@pytest.mark.parametrize(
    "entry",
    [
        "not-a-mapping",
        {"category": "nope", "severity": "error"},
        {"category": "quality", "severity": "fatal"},
        {"category": "quality", "severity": "error", "file_types": ".md"},
    ],
)
def test_invalid_entries(entry: object) -> None:
    with pytest.raises(InvalidRuleError):
        RuleCatalogLoader.to_rule("x", entry)
