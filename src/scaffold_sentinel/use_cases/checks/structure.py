"""Structure and naming checks: required project files, spaces in names, template suffixes."""

import os

from scaffold_sentinel.domain.constants import TEMPLATE_SUFFIX
from scaffold_sentinel.domain.entities import ValidationIssue, ValidationRule
from scaffold_sentinel.domain.protocols import FileSystemProtocol

README_CANDIDATES = ("README.md", "README.txt", "README.rst", "README")
LICENSE_CANDIDATES = ("LICENSE", "LICENSE.txt", "LICENSE.md", "COPYING")
GITIGNORE_CANDIDATES = (".gitignore",)

TEMPLATE_DIRECTORY = "templates"


def rule_issue(
    rule: ValidationRule, message: str, file: str = "", line: int = 0, column: int = 0
) -> ValidationIssue:
    """An issue carrying the rule's current severity and fixability."""
    return ValidationIssue(
        type=rule.severity.value,
        severity=rule.severity,
        message=message,
        file=file,
        line=line,
        column=column,
        rule=rule.id,
        fixable=rule.fixable,
    )


class RequiredFileCheck:
    """
    Project-level presence check for one kind of file at the root.

    The issue points at the canonical name in the root so a fix handler can
    derive the directory from it.
    """

    def __init__(self, rule: ValidationRule, candidates: tuple[str, ...], label: str) -> None:
        self.rule = rule
        self.candidates = candidates
        self.label = label

    def check(self, filesystem: FileSystemProtocol, root: str) -> list[ValidationIssue]:
        for name in self.candidates:
            if filesystem.is_file(filesystem.join_path(root, name)):
                return []
        return [
            rule_issue(
                self.rule,
                f"{self.label} file is missing",
                file=filesystem.join_path(root, self.candidates[0]),
            )
        ]


def check_file_name(rule: ValidationRule, path: str) -> list[ValidationIssue]:
    name = os.path.basename(path)
    if " " not in name:
        return []
    return [rule_issue(rule, f"File name contains spaces: {name}", file=path)]


def is_under_templates(rel_path: str) -> bool:
    parts = rel_path.replace("\\", "/").split("/")
    return TEMPLATE_DIRECTORY in parts[:-1]


def check_template_extension(
    rule: ValidationRule, path: str, rel_path: str
) -> list[ValidationIssue]:
    """Files below a templates/ directory must end in .tmpl."""
    if not is_under_templates(rel_path) or path.endswith(TEMPLATE_SUFFIX):
        return []
    return [
        rule_issue(rule, f"Template file should have {TEMPLATE_SUFFIX} extension", file=path)
    ]
