"""Unit tests for FixStrategyRegistry dispatch and the built-in handlers."""

import os

import pytest

from scaffold_sentinel.domain.constants import FixAction, RuleId, Severity
from scaffold_sentinel.domain.entities import Fix, ValidationIssue
from scaffold_sentinel.domain.fixes import FallbackRule, FixStrategy, FixStrategyRegistry
from scaffold_sentinel.domain.fixes.handlers import (
    LICENSE_CONTENT,
    README_CONTENT,
    add_template_extension,
    create_missing_file,
    create_readme,
    fix_naming,
    normalize_permissions,
)


def issue(rule: str = "", message: str = "", file: str = "/proj/x.txt") -> ValidationIssue:
    return ValidationIssue(
        type="warning", severity=Severity.WARNING, message=message, file=file, rule=rule, fixable=True
    )


class TestResolve:
    def setup_method(self) -> None:
        self.registry = FixStrategyRegistry.default()

    def test_rule_id_wins(self) -> None:
        """A registered rule id is used before any message heuristic."""
        strategy = self.registry.resolve(issue(RuleId.LICENSE_REQUIRED.value, "LICENSE file is missing"))
        assert strategy is not None
        assert strategy.rule_id == RuleId.LICENSE_REQUIRED.value

    def test_missing_file_fallback(self) -> None:
        """'missing' plus 'file' routes to the placeholder creator, which needs confirmation."""
        strategy = self.registry.resolve(issue("custom.rule", "config file is missing"))
        assert strategy is not None
        assert strategy.rule_id == RuleId.GENERIC_CREATE_MISSING_FILE.value
        assert strategy.automatic is False

    def test_spaces_fallback(self) -> None:
        """A message mentioning a space routes to the naming fix."""
        strategy = self.registry.resolve(issue("custom.rule", "name has a space in it"))
        assert strategy is not None
        assert strategy.rule_id == RuleId.GENERIC_FIX_NAMING.value

    def test_fallbacks_are_ordered(self) -> None:
        # Matches both predicates; the first registered fallback wins.
        strategy = self.registry.resolve(issue("custom.rule", "file is missing and its name has a space"))
        assert strategy is not None
        assert strategy.rule_id == RuleId.GENERIC_CREATE_MISSING_FILE.value

    def test_unresolvable(self) -> None:
        """No strategy and no heuristic match resolves to None."""
        assert self.registry.resolve(issue("custom.rule", "something else")) is None

    def test_fallback_to_unregistered_strategy_is_ignored(self) -> None:
        """A fallback naming a strategy that is not registered resolves nothing."""
        registry = FixStrategyRegistry(
            fallbacks=[FallbackRule(lambda i: True, "not.registered")]
        )
        assert registry.resolve(issue("x", "y")) is None


class TestRegistryMutation:
    def test_register_replaces_and_unregister_removes(self) -> None:
        """Registering an existing id replaces it; unregistering twice is harmless."""
        registry = FixStrategyRegistry()
        first = FixStrategy("r", "first", "", lambda i: None)
        second = FixStrategy("r", "second", "", lambda i: None)
        registry.register(first)
        registry.register(second)
        assert len(registry) == 1
        assert registry.get("r") is second
        registry.unregister("r")
        assert "r" not in registry
        registry.unregister("r")

    def test_add_fallback(self) -> None:
        """Fallbacks added later are consulted too."""
        target = FixStrategy("target", "t", "", lambda i: None)
        registry = FixStrategyRegistry([target])
        registry.add_fallback(FallbackRule(lambda i: "magic" in i.message, "target"))
        assert registry.resolve(issue("x", "magic words")) is target

    def test_default_has_builtin_rule_ids(self) -> None:
        ids = FixStrategyRegistry.default().rule_ids()
        assert RuleId.README_REQUIRED.value in ids
        assert RuleId.PERMISSIONS.value in ids
        assert RuleId.TEMPLATE_EXTENSION.value in ids


class TestHandlers:
    def test_create_readme_targets_issue_directory(self) -> None:
        """README is created next to the file the issue points at."""
        fix = create_readme(issue(RuleId.README_REQUIRED.value, file="/proj/README.md"))
        assert fix.action is FixAction.CREATE
        assert fix.file == os.path.join("/proj", "README.md")
        assert fix.content == README_CONTENT

    def test_license_content_is_mit(self) -> None:
        assert LICENSE_CONTENT.startswith("MIT License")

    def test_fix_naming_replaces_spaces(self) -> None:
        """Spaces become underscores in the rename destination."""
        fix = fix_naming(issue(message="File name contains spaces: my file.txt", file="/proj/my file.txt"))
        assert isinstance(fix, Fix)
        assert fix.action is FixAction.RENAME
        assert fix.content == os.path.join("/proj", "my_file.txt")

    def test_fix_naming_declines_other_messages(self) -> None:
        """Naming issues that are not about spaces get no fix."""
        assert fix_naming(issue(message="File name is too long")) is None

    def test_template_extension(self) -> None:
        """The .tmpl suffix is appended, never substituted."""
        fix = add_template_extension(issue(file="/proj/templates/main.go"))
        assert fix.content == "/proj/templates/main.go.tmpl"

    def test_permissions_is_chmod_descriptor(self) -> None:
        """Permission fixes only describe the target mode."""
        fix = normalize_permissions(issue(file="/proj/run.sh"))
        assert fix.action is FixAction.CHMOD
        assert fix.content == "644"

    @pytest.mark.parametrize(
        ("file", "expected"),
        [
            ("/p/NOTES.md", "# NOTES.md\n\nThis file was automatically generated.\n"),
            ("/p/a.txt", "This file was automatically generated.\n"),
            ("/p/a.json", "{}\n"),
            ("/p/Makefile", "# This file was automatically generated\n"),
        ],
    )
    def test_create_missing_file_content_by_extension(self, file: str, expected: str) -> None:
        """Placeholder content is chosen by extension and is never automatic."""
        fix = create_missing_file(issue(file=file))
        assert fix.content == expected
        assert fix.automatic is False
