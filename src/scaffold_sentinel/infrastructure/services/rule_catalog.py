"""RuleCatalogLoader: reads extra validation rules from a YAML catalog."""

import logging
from pathlib import Path
from typing import Any

import yaml

from scaffold_sentinel.domain.constants import RuleCategory, Severity
from scaffold_sentinel.domain.entities import ValidationRule
from scaffold_sentinel.domain.errors import InvalidRuleError

logger = logging.getLogger(__name__)


class RuleCatalogLoader:
    """
    Catalog format: a mapping of rule id to rule fields.

        docs.changelog.required:
          name: CHANGELOG Required
          description: Project should keep a CHANGELOG
          category: structure
          severity: warning
          fixable: false
          file_types: [".md"]
    """

    def __init__(self, catalog_path: str) -> None:
        self._path = Path(catalog_path)

    def load(self) -> list[ValidationRule]:
        if not self._path.exists():
            logger.warning("Rule catalog not found: %s", self._path)
            return []
        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning("Could not parse rule catalog %s: %s", self._path, e)
            return []
        if data is None:
            return []
        if not isinstance(data, dict):
            logger.warning("Rule catalog %s must be a mapping of rule ids", self._path)
            return []
        rules = []
        for rule_id, entry in data.items():
            try:
                rules.append(self.to_rule(str(rule_id), entry))
            except InvalidRuleError as e:
                logger.warning("Skipping catalog entry: %s", e)
        return rules

    @staticmethod
    def to_rule(rule_id: str, entry: Any) -> ValidationRule:
        if not isinstance(entry, dict):
            raise InvalidRuleError(f"rule {rule_id}: entry must be a mapping")
        try:
            category = RuleCategory(str(entry.get("category", "")))
            severity = Severity(str(entry.get("severity", "")))
        except ValueError as e:
            raise InvalidRuleError(f"rule {rule_id}: {e}") from e
        file_types = entry.get("file_types") or []
        if not isinstance(file_types, list):
            raise InvalidRuleError(f"rule {rule_id}: file_types must be a list")
        return ValidationRule(
            id=rule_id,
            name=str(entry.get("name", "")),
            description=str(entry.get("description", "")),
            category=category,
            severity=severity,
            enabled=bool(entry.get("enabled", True)),
            fixable=bool(entry.get("fixable", False)),
            applicable_file_types=frozenset(str(t) for t in file_types),
        )
