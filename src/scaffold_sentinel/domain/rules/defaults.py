"""Rule set seeded into every new RuleRegistry."""

from scaffold_sentinel.domain.constants import RuleCategory, RuleId, Severity
from scaffold_sentinel.domain.entities import ValidationRule


def default_rules() -> list[ValidationRule]:
    return [
        ValidationRule(
            id=RuleId.README_REQUIRED.value,
            name="README Required",
            description="Project must have a README file",
            category=RuleCategory.STRUCTURE,
            severity=Severity.ERROR,
            fixable=True,
        ),
        ValidationRule(
            id=RuleId.LICENSE_REQUIRED.value,
            name="LICENSE Required",
            description="Project must have a LICENSE file",
            category=RuleCategory.STRUCTURE,
            severity=Severity.ERROR,
            fixable=True,
        ),
        ValidationRule(
            id=RuleId.GITIGNORE_RECOMMENDED.value,
            name="Gitignore Recommended",
            description="Project should have a .gitignore file",
            category=RuleCategory.STRUCTURE,
            severity=Severity.INFO,
            fixable=True,
        ),
        ValidationRule(
            id=RuleId.MANIFEST_SYNTAX.value,
            name="Manifest Syntax",
            description="Configuration and manifest files must parse",
            category=RuleCategory.CONFIG,
            severity=Severity.ERROR,
            applicable_file_types=frozenset({".json", ".yaml", ".yml"}),
        ),
        ValidationRule(
            id=RuleId.SECRET_DETECTION.value,
            name="Secret Detection",
            description="Files must not contain hard-coded credentials",
            category=RuleCategory.SECURITY,
            severity=Severity.ERROR,
        ),
        ValidationRule(
            id=RuleId.PERMISSIONS.value,
            name="File Permissions",
            description="Files must not be world-writable",
            category=RuleCategory.SECURITY,
            severity=Severity.WARNING,
            fixable=True,
        ),
        ValidationRule(
            id=RuleId.NAMING_CONVENTIONS.value,
            name="Naming Conventions",
            description="File names must not contain spaces",
            category=RuleCategory.QUALITY,
            severity=Severity.WARNING,
            fixable=True,
        ),
        ValidationRule(
            id=RuleId.TEMPLATE_EXTENSION.value,
            name="Template Extension",
            description="Files under templates/ must end in .tmpl",
            category=RuleCategory.STRUCTURE,
            severity=Severity.WARNING,
            fixable=True,
        ),
        ValidationRule(
            id=RuleId.DEPENDENCY_FORMAT.value,
            name="Dependency Format",
            description="Dependency names and versions must follow their ecosystem grammar",
            category=RuleCategory.DEPENDENCIES,
            severity=Severity.ERROR,
            applicable_file_types=frozenset({".json", ".mod", ".txt"}),
        ),
        ValidationRule(
            id=RuleId.DEPENDENCY_CONFLICT.value,
            name="Dependency Conflict",
            description="A dependency must be declared with one version",
            category=RuleCategory.DEPENDENCIES,
            severity=Severity.WARNING,
        ),
        ValidationRule(
            id=RuleId.DEPENDENCY_VULNERABILITY.value,
            name="Dependency Vulnerability",
            description="Dependencies must not have known vulnerabilities",
            category=RuleCategory.DEPENDENCIES,
            severity=Severity.WARNING,
        ),
        ValidationRule(
            id=RuleId.VERSION_COMPATIBILITY.value,
            name="Version Compatibility",
            description="Runtime and type package versions must be compatible",
            category=RuleCategory.CONFIG,
            severity=Severity.ERROR,
        ),
    ]
