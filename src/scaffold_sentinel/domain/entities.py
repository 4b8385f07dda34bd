from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from scaffold_sentinel.domain.constants import (
    DependencyClass,
    Ecosystem,
    FixAction,
    RuleCategory,
    Severity,
    VulnerabilitySeverity,
)


@dataclass(frozen=True)
class ValidationRule:
    """A registered validation rule. Identity is `id`."""
    id: str
    name: str
    description: str
    category: RuleCategory
    severity: Severity
    enabled: bool = True
    fixable: bool = False
    applicable_file_types: frozenset[str] = frozenset()

    def with_enabled(self, enabled: bool) -> "ValidationRule":
        return replace(self, enabled=enabled)

    def applies_to(self, file_name: str) -> bool:
        """Rules with no declared file types apply to every file."""
        if not self.applicable_file_types:
            return True
        lowered = file_name.lower()
        return any(lowered.endswith(ext) for ext in self.applicable_file_types)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "severity": self.severity.value,
            "enabled": self.enabled,
            "fixable": self.fixable,
            "applicable_file_types": sorted(self.applicable_file_types),
        }


@dataclass(frozen=True)
class ValidationIssue:
    """One finding. Value object: copied, never mutated."""
    type: str
    severity: Severity
    message: str
    file: str = ""
    line: int = 0
    column: int = 0
    rule: str = ""
    fixable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "severity": self.severity.value,
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "rule": self.rule,
            "fixable": self.fixable,
        }


@dataclass(frozen=True)
class Fix:
    """
    Pure description of a file mutation.

    `content` is the new file body for CREATE, the line text for
    REPLACE/INSERT, the destination path for RENAME/MOVE and the target mode
    for CHMOD. `line` is 1-based and only meaningful for line actions.
    """
    id: str
    type: str
    description: str
    file: str
    action: FixAction | None = None
    content: str = ""
    line: int = 0
    automatic: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "file": self.file,
            "action": self.action.value if self.action else None,
            "content": self.content,
            "line": self.line,
            "automatic": self.automatic,
        }


@dataclass(frozen=True)
class FixFailure:
    fix: Fix
    error: str


@dataclass
class FixResult:
    """Outcome of one fix_issues() batch."""
    applied: list[Fix] = field(default_factory=list)
    failed: list[FixFailure] = field(default_factory=list)
    skipped: list[Fix] = field(default_factory=list)
    total_fixes: int = 0
    files_modified: int = 0

    @property
    def applied_fixes(self) -> int:
        return len(self.applied)

    @property
    def failed_fixes(self) -> int:
        return len(self.failed)

    @property
    def skipped_fixes(self) -> int:
        return len(self.skipped)

    def summary(self) -> dict[str, int]:
        return {
            "total_fixes": self.total_fixes,
            "applied_fixes": self.applied_fixes,
            "failed_fixes": self.failed_fixes,
            "skipped_fixes": self.skipped_fixes,
            "files_modified": self.files_modified,
        }


@dataclass(frozen=True)
class FileChange:
    """Human-readable preview of a single would-be fix."""
    file: str
    action: FixAction | None
    preview: str
    lines_before: int = 0
    lines_after: int = 0


@dataclass
class FixPreview(FixResult):
    """A dry-run FixResult plus per-fix change previews. Never touches disk."""
    changes: list[FileChange] = field(default_factory=list)


# Version configuration


@dataclass(frozen=True)
class NodeVersionConfig:
    """Runtime/types/build-tool/image tuple for one ecosystem."""
    runtime: str = ""
    types_package: str = ""
    build_tool_version: str = ""
    image: str = ""
    is_lts: bool = False
    description: str = ""


@dataclass(frozen=True)
class VersionConfig:
    node: str = ""
    go: str = ""
    nodejs: NodeVersionConfig | None = None


@dataclass(frozen=True)
class ProjectConfig:
    name: str = ""
    organization: str = ""
    versions: VersionConfig | None = None


@dataclass(frozen=True)
class VersionValidationError:
    field: str
    value: str
    message: str
    severity: Severity
    code: str


@dataclass(frozen=True)
class VersionValidationWarning:
    field: str
    value: str
    message: str
    code: str


@dataclass(frozen=True)
class VersionSuggestion:
    field: str
    current_value: str
    suggested_value: str
    reason: str
    priority: str
    breaking_change: bool = False


@dataclass
class VersionValidationResult:
    valid: bool = True
    errors: list[VersionValidationError] = field(default_factory=list)
    warnings: list[VersionValidationWarning] = field(default_factory=list)
    suggestions: list[VersionSuggestion] = field(default_factory=list)
    validated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add_error(self, error: VersionValidationError) -> None:
        self.errors.append(error)
        if error.severity.blocking:
            self.valid = False

    def errors_at_least(self, severity: Severity) -> list[VersionValidationError]:
        """Filter by minimum severity; CRITICAL always passes an ERROR filter."""
        return [e for e in self.errors if e.severity.at_least(severity)]

    @property
    def critical_errors(self) -> list[VersionValidationError]:
        return [e for e in self.errors if e.severity is Severity.CRITICAL]


@dataclass(frozen=True)
class PreGenerationResult:
    valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


# Dependencies


@dataclass(frozen=True)
class DependencyRecord:
    name: str
    declared_version: str
    ecosystem: Ecosystem
    dependency_class: DependencyClass
    source_file: str = ""
    resolved_valid: bool = True
    known_vulnerability_count: int = 0


@dataclass(frozen=True)
class VulnerabilityRecord:
    """Static advisory. `fixed_in` None means no release fixes it."""
    package_name: str
    affected_version: str
    advisory_id: str
    severity: VulnerabilitySeverity
    description: str
    fixed_in: str | None = None


@dataclass(frozen=True)
class DependencyVulnerability:
    dependency: DependencyRecord
    vulnerability: VulnerabilityRecord

    @property
    def severity(self) -> VulnerabilitySeverity:
        return self.vulnerability.severity


@dataclass(frozen=True)
class DependencyConflict:
    name: str
    version_1: str
    version_2: str
    source_1: str = ""
    source_2: str = ""
    reason: str = "Multiple versions of the same dependency"
    severity: Severity = Severity.WARNING


@dataclass(frozen=True)
class OutdatedDependency:
    name: str
    current_version: str
    latest_version: str
    update_type: str
    breaking: bool


@dataclass
class DependencyValidationResult:
    valid: bool = True
    dependencies: list[DependencyRecord] = field(default_factory=list)
    vulnerabilities: list[DependencyVulnerability] = field(default_factory=list)
    outdated: list[OutdatedDependency] = field(default_factory=list)
    conflicts: list[DependencyConflict] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        return {
            "total_dependencies": len(self.dependencies),
            "valid_dependencies": sum(1 for d in self.dependencies if d.resolved_valid),
            "vulnerabilities": len(self.vulnerabilities),
            "outdated_count": len(self.outdated),
            "conflict_count": len(self.conflicts),
        }


# Leaf checker boundary


@dataclass(frozen=True)
class ConfigIssue:
    message: str
    field: str = ""
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ConfigValidationSummary:
    total_properties: int = 0
    valid_properties: int = 0
    error_count: int = 0
    warning_count: int = 0
    missing_required: int = 0


@dataclass(frozen=True)
class ConfigValidationResult:
    valid: bool
    errors: tuple[ConfigIssue, ...] = ()
    warnings: tuple[ConfigIssue, ...] = ()
    summary: ConfigValidationSummary = ConfigValidationSummary()


# Aggregate


@dataclass
class ValidationResult:
    """Everything one orchestrator pass found."""
    valid: bool = True
    issues: list[ValidationIssue] = field(default_factory=list)
    files_checked: int = 0
    dependency_result: DependencyValidationResult | None = None
    version_results: list[VersionValidationResult] = field(default_factory=list)

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)
        if issue.severity.blocking:
            self.valid = False

    def extend(self, issues: list[ValidationIssue]) -> None:
        for issue in issues:
            self.add_issue(issue)

    def issues_at_least(self, severity: Severity) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity.at_least(severity)]

    def fixable_issues(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.fixable]

    def summary(self) -> dict[str, int]:
        counts = {s.value: 0 for s in Severity}
        for issue in self.issues:
            counts[issue.severity.value] += 1
        counts["total_issues"] = len(self.issues)
        counts["files_checked"] = self.files_checked
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "files_checked": self.files_checked,
            "summary": self.summary(),
            "issues": [issue.to_dict() for issue in self.issues],
        }
