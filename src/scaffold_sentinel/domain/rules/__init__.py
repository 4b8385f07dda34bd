"""Rule registry: the owned rule list plus its derived id and category indexes."""

from typing import Iterable

from scaffold_sentinel.domain.constants import RuleCategory, Severity
from scaffold_sentinel.domain.entities import ValidationRule
from scaffold_sentinel.domain.errors import (
    DuplicateRuleError,
    InvalidRuleError,
    RuleNotFoundError,
)

RULE_SEVERITIES = frozenset({Severity.INFO, Severity.WARNING, Severity.ERROR})


class RuleRegistry:
    """
    In-memory rule CRUD.

    Every mutator rewrites the list and then calls _rebuild_index(), so the
    indexes can never drift from the list. Reads return copies in insertion
    order.
    """

    def __init__(self, rules: Iterable[ValidationRule] | None = None) -> None:
        self._rules: list[ValidationRule] = []
        self._by_id: dict[str, ValidationRule] = {}
        self._by_category: dict[RuleCategory, list[ValidationRule]] = {}
        if rules is None:
            from scaffold_sentinel.domain.rules.defaults import default_rules

            rules = default_rules()
        self.set_rules(rules)

    def _rebuild_index(self) -> None:
        by_id: dict[str, ValidationRule] = {}
        by_category: dict[RuleCategory, list[ValidationRule]] = {}
        for rule in self._rules:
            by_id[rule.id] = rule
            by_category.setdefault(rule.category, []).append(rule)
        self._by_id = by_id
        self._by_category = by_category

    @staticmethod
    def validate_rule(rule: ValidationRule) -> None:
        """Raise InvalidRuleError when a rule is not well-formed."""
        if not rule.id:
            raise InvalidRuleError("rule ID is required")
        if not rule.name:
            raise InvalidRuleError(f"rule {rule.id}: name is required")
        if not rule.description:
            raise InvalidRuleError(f"rule {rule.id}: description is required")
        if not isinstance(rule.category, RuleCategory):
            raise InvalidRuleError(f"rule {rule.id}: invalid category {rule.category!r}")
        if rule.severity not in RULE_SEVERITIES:
            raise InvalidRuleError(f"rule {rule.id}: invalid severity {rule.severity!r}")
        for file_type in rule.applicable_file_types:
            if not file_type.startswith("."):
                raise InvalidRuleError(
                    f"rule {rule.id}: file type {file_type!r} must start with '.'"
                )

    def set_rules(self, rules: Iterable[ValidationRule]) -> None:
        """Replace the whole rule set. Nothing changes if any rule is rejected."""
        candidate = list(rules)
        seen: set[str] = set()
        for rule in candidate:
            self.validate_rule(rule)
            if rule.id in seen:
                raise DuplicateRuleError(rule.id)
            seen.add(rule.id)
        self._rules = candidate
        self._rebuild_index()

    def add_rule(self, rule: ValidationRule) -> None:
        self.validate_rule(rule)
        if rule.id in self._by_id:
            raise DuplicateRuleError(rule.id)
        self._rules = [*self._rules, rule]
        self._rebuild_index()

    def remove_rule(self, rule_id: str) -> None:
        if rule_id not in self._by_id:
            raise RuleNotFoundError(rule_id)
        self._rules = [r for r in self._rules if r.id != rule_id]
        self._rebuild_index()

    def get_rule(self, rule_id: str) -> ValidationRule:
        try:
            return self._by_id[rule_id]
        except KeyError:
            raise RuleNotFoundError(rule_id) from None

    def has_rule(self, rule_id: str) -> bool:
        return rule_id in self._by_id

    def get_rules(self) -> list[ValidationRule]:
        return list(self._rules)

    def get_rules_by_category(self, category: RuleCategory) -> list[ValidationRule]:
        return list(self._by_category.get(category, ()))

    def get_rules_by_severity(self, severity: Severity) -> list[ValidationRule]:
        return [r for r in self._rules if r.severity is severity]

    def get_enabled_rules(self) -> list[ValidationRule]:
        return [r for r in self._rules if r.enabled]

    def is_enabled(self, rule_id: str) -> bool:
        """Unknown rule ids count as disabled."""
        rule = self._by_id.get(rule_id)
        return rule is not None and rule.enabled

    def enable_rule(self, rule_id: str) -> None:
        self._set_enabled(rule_id, True)

    def disable_rule(self, rule_id: str) -> None:
        self._set_enabled(rule_id, False)

    def _set_enabled(self, rule_id: str, enabled: bool) -> None:
        if rule_id not in self._by_id:
            raise RuleNotFoundError(rule_id)
        self._rules = [
            r.with_enabled(enabled) if r.id == rule_id else r for r in self._rules
        ]
        self._rebuild_index()

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id
