"""Use Case: validate a whole project tree and aggregate every finding into one result."""

import logging
import os
import threading
from dataclasses import replace
from typing import Iterable

from scaffold_sentinel.domain.constants import (
    DEFAULT_EXCLUDED_DIRS,
    RuleId,
    Severity,
)
from scaffold_sentinel.domain.entities import (
    DependencyValidationResult,
    FixPreview,
    FixResult,
    NodeVersionConfig,
    PreGenerationResult,
    ProjectConfig,
    ValidationIssue,
    ValidationResult,
    ValidationRule,
)
from scaffold_sentinel.domain.errors import (
    PathTraversalError,
    ProjectRootError,
    ValidationCancelledError,
)
from scaffold_sentinel.domain.fixes import FixStrategyRegistry
from scaffold_sentinel.domain.protocols import (
    FileSystemProtocol,
    SyntaxCheckerProtocol,
    TelemetryPort,
)
from scaffold_sentinel.domain.rules import RuleRegistry
from scaffold_sentinel.domain.vulnerabilities import prioritize_security_updates
from scaffold_sentinel.use_cases.apply_fixes import AutoFixExecutor
from scaffold_sentinel.use_cases.checks.manifests import ManifestParse, parser_for
from scaffold_sentinel.use_cases.checks.security import (
    check_permissions,
    is_scannable,
    scan_for_secrets,
)
from scaffold_sentinel.use_cases.checks.structure import (
    GITIGNORE_CANDIDATES,
    LICENSE_CANDIDATES,
    README_CANDIDATES,
    RequiredFileCheck,
    check_file_name,
    check_template_extension,
    rule_issue,
)
from scaffold_sentinel.use_cases.pre_generation import PreGenerationGate
from scaffold_sentinel.use_cases.validate_dependencies import DependencyGraphValidator
from scaffold_sentinel.use_cases.validate_versions import VersionCompatibilityValidator

logger = logging.getLogger(__name__)

REQUIRED_FILES = (
    (RuleId.README_REQUIRED, README_CANDIDATES, "README"),
    (RuleId.LICENSE_REQUIRED, LICENSE_CANDIDATES, "LICENSE"),
    (RuleId.GITIGNORE_RECOMMENDED, GITIGNORE_CANDIDATES, ".gitignore"),
)


class ValidationOrchestrator:
    """
    The engine facade.

    One call to validate_project() walks the tree once, runs every enabled
    rule against each file, then analyzes the collected manifests as a single
    dependency graph. Only a missing project root, a path outside it, or a
    cancellation request raise; everything else lands in the result.
    """

    def __init__(
        self,
        filesystem: FileSystemProtocol,
        rules: RuleRegistry | None = None,
        fix_executor: AutoFixExecutor | None = None,
        version_validator: VersionCompatibilityValidator | None = None,
        dependency_validator: DependencyGraphValidator | None = None,
        checkers: Iterable[SyntaxCheckerProtocol] = (),
        telemetry: TelemetryPort | None = None,
        excluded_dirs: tuple[str, ...] = DEFAULT_EXCLUDED_DIRS,
        pre_generation_gate: PreGenerationGate | None = None,
    ) -> None:
        self.filesystem = filesystem
        self.rules = rules if rules is not None else RuleRegistry()
        self.fix_executor = fix_executor or AutoFixExecutor(filesystem, telemetry=telemetry)
        self.version_validator = version_validator or VersionCompatibilityValidator()
        self.dependency_validator = dependency_validator or DependencyGraphValidator(
            filesystem, telemetry=telemetry
        )
        self.checkers = list(checkers)
        self.telemetry = telemetry
        self.excluded_dirs = excluded_dirs
        self.pre_generation_gate = pre_generation_gate or PreGenerationGate(
            self.version_validator, filesystem, telemetry
        )

    @property
    def strategies(self) -> FixStrategyRegistry:
        return self.fix_executor.strategies

    def validate_project(
        self, project_path: str, cancel_event: threading.Event | None = None
    ) -> ValidationResult:
        """
        Validate everything under `project_path`.

        Args:
            project_path: Root of the project. Must exist.
            cancel_event: Checked before each file; once set the walk stops
                with ValidationCancelledError.

        Raises:
            ProjectRootError: The root is missing or not a directory.
            PathTraversalError: The path itself is malformed.
        """
        root = self.filesystem.validate_path(project_path)
        if not self.filesystem.is_directory(root):
            raise ProjectRootError(f"project root does not exist: {project_path}")
        self._step(f"Validating project: {root}")

        result = ValidationResult()
        result.extend(self._check_required_files(root))

        manifests: list[str] = []
        for path in self.filesystem.walk_files(root, self.excluded_dirs):
            if cancel_event is not None and cancel_event.is_set():
                self._warning(f"path={root} status=cancelled files_checked={result.files_checked}")
                raise ValidationCancelledError(
                    f"validation cancelled after {result.files_checked} files"
                )
            result.files_checked += 1
            result.extend(self._check_file(root, path))
            if parser_for(path) is not None:
                manifests.append(path)

        if manifests:
            self._check_dependencies(root, manifests, result)

        counts = result.summary()
        self._step(
            f"path={root} status={'valid' if result.valid else 'invalid'} "
            f"files={result.files_checked} issues={counts['total_issues']} "
            f"errors={counts['error'] + counts['critical']} warnings={counts['warning']}"
        )
        return result

    def fix_issues(self, target_path: str, issues: Iterable[ValidationIssue]) -> FixResult:
        return self.fix_executor.fix_issues(target_path, issues)

    def preview_fixes(self, target_path: str, issues: Iterable[ValidationIssue]) -> FixPreview:
        return self.fix_executor.preview_fixes(target_path, issues)

    def validate_pre_generation(
        self, config: ProjectConfig | None, template_path: str
    ) -> PreGenerationResult:
        return self.pre_generation_gate.validate(config, template_path)

    def _enabled(self, rule_id: RuleId) -> ValidationRule | None:
        if not self.rules.is_enabled(rule_id.value):
            return None
        return self.rules.get_rule(rule_id.value)

    def _check_required_files(self, root: str) -> list[ValidationIssue]:
        issues = []
        for rule_id, candidates, label in REQUIRED_FILES:
            rule = self._enabled(rule_id)
            if rule is not None:
                issues.extend(RequiredFileCheck(rule, candidates, label).check(self.filesystem, root))
        return issues

    def _check_file(self, root: str, path: str) -> list[ValidationIssue]:
        name = os.path.basename(path)
        rel_path = self.filesystem.relative_to(path, root)
        issues: list[ValidationIssue] = []

        rule = self._enabled(RuleId.NAMING_CONVENTIONS)
        if rule is not None and rule.applies_to(name):
            issues.extend(check_file_name(rule, path))

        rule = self._enabled(RuleId.TEMPLATE_EXTENSION)
        if rule is not None and rule.applies_to(name):
            issues.extend(check_template_extension(rule, path, rel_path))

        rule = self._enabled(RuleId.PERMISSIONS)
        if rule is not None and rule.applies_to(name):
            mode = self._mode(path)
            if mode is not None:
                issues.extend(check_permissions(rule, path, mode))

        rule = self._enabled(RuleId.MANIFEST_SYNTAX)
        if rule is not None and rule.applies_to(name):
            issues.extend(self._check_syntax(rule, path))

        rule = self._enabled(RuleId.SECRET_DETECTION)
        if rule is not None and rule.applies_to(name) and is_scannable(path):
            text = self._read(root, path)
            if text is not None:
                issues.extend(scan_for_secrets(rule, path, text))
        return issues

    def _check_syntax(self, rule: ValidationRule, path: str) -> list[ValidationIssue]:
        name = os.path.basename(path)
        issues = []
        for checker in self.checkers:
            if not checker.supports(name):
                continue
            try:
                checked = checker.validate(path)
            except (OSError, UnicodeDecodeError) as e:
                issues.append(rule_issue(rule, f"could not read file: {e}", file=path))
                continue
            for error in checked.errors:
                issues.append(
                    rule_issue(rule, error.message, file=path, line=error.line, column=error.column)
                )
            for warning in checked.warnings:
                issues.append(
                    ValidationIssue(
                        type=Severity.WARNING.value,
                        severity=Severity.WARNING,
                        message=warning.message,
                        file=path,
                        line=warning.line,
                        column=warning.column,
                        rule=rule.id,
                    )
                )
        return issues

    def _read(self, root: str, path: str) -> str | None:
        try:
            return self.filesystem.safe_read_text(path, root)
        except UnicodeDecodeError:
            logger.debug("Skipping non-text file %s", path)
        except (OSError, PathTraversalError) as e:
            self._warning(f"file={path} status=unreadable reason={e}")
        return None

    def _mode(self, path: str) -> int | None:
        """Permission bits, or None for files that vanished or dangle."""
        try:
            return self.filesystem.file_mode(path)
        except OSError as e:
            self._warning(f"file={path} status=unreadable reason={e}")
            return None

    def _check_dependencies(
        self, root: str, manifests: list[str], result: ValidationResult
    ) -> None:
        parses: list[ManifestParse] = []
        for path in manifests:
            try:
                parses.append(self.dependency_validator.parse_manifest(path, root))
            except (OSError, UnicodeDecodeError) as e:
                self._warning(f"file={path} status=unreadable reason={e}")
        dependencies = self.dependency_validator.analyze(parses)
        result.dependency_result = dependencies

        format_rule = self._enabled(RuleId.DEPENDENCY_FORMAT)
        if format_rule is not None:
            for parse in parses:
                for message in parse.errors:
                    result.add_issue(rule_issue(format_rule, message, file=parse.source_file))
                for record in parse.records:
                    if not record.resolved_valid:
                        result.add_issue(
                            rule_issue(
                                format_rule,
                                f"Invalid version for {record.name}: {record.declared_version}",
                                file=record.source_file,
                            )
                        )

        conflict_rule = self._enabled(RuleId.DEPENDENCY_CONFLICT)
        if conflict_rule is not None:
            for conflict in dependencies.conflicts:
                result.add_issue(
                    rule_issue(
                        conflict_rule,
                        f"Dependency conflict for {conflict.name}: "
                        f"{conflict.version_1} vs {conflict.version_2}",
                        file=conflict.source_1,
                    )
                )

        vulnerability_rule = self._enabled(RuleId.DEPENDENCY_VULNERABILITY)
        if vulnerability_rule is not None:
            result.extend(self._vulnerability_issues(vulnerability_rule, dependencies))

        compatibility_rule = self._enabled(RuleId.VERSION_COMPATIBILITY)
        if compatibility_rule is not None:
            for parse in parses:
                if parse.node_versions is not None:
                    self._check_node_versions(
                        compatibility_rule, parse.source_file, parse.node_versions, result
                    )

    @staticmethod
    def _vulnerability_issues(
        rule: ValidationRule, dependencies: DependencyValidationResult
    ) -> list[ValidationIssue]:
        issues = []
        for found in prioritize_security_updates(dependencies.vulnerabilities):
            advisory = found.vulnerability
            fixed = f", fixed in {advisory.fixed_in}" if advisory.fixed_in else ""
            issues.append(
                rule_issue(
                    rule,
                    f"{found.dependency.name}@{found.dependency.declared_version}: "
                    f"{advisory.advisory_id} ({advisory.severity.value}) "
                    f"{advisory.description}{fixed}",
                    file=found.dependency.source_file,
                )
            )
        for message in dependencies.warnings:
            issues.append(
                ValidationIssue(
                    type=Severity.WARNING.value,
                    severity=Severity.WARNING,
                    message=message,
                    rule=rule.id,
                )
            )
        return issues

    def _check_node_versions(
        self,
        rule: ValidationRule,
        source_file: str,
        node_versions: NodeVersionConfig,
        result: ValidationResult,
    ) -> None:
        """
        Runtime/types pairing from a package.json.

        The recommended build tool and image stand in for the fields a
        package.json never declares.
        """
        recommended = self.version_validator.profile.recommended
        declared = replace(
            node_versions,
            build_tool_version=node_versions.build_tool_version or recommended.build_tool_version,
            image=node_versions.image or recommended.image,
        )
        checked = self.version_validator.validate(declared)
        result.version_results.append(checked)
        for error in checked.errors:
            result.add_issue(
                ValidationIssue(
                    type=error.code,
                    severity=error.severity,
                    message=error.message,
                    file=source_file,
                    rule=rule.id,
                )
            )
        for warning in checked.warnings:
            result.add_issue(
                ValidationIssue(
                    type=warning.code,
                    severity=Severity.WARNING,
                    message=warning.message,
                    file=source_file,
                    rule=rule.id,
                )
            )

    def _step(self, message: str) -> None:
        if self.telemetry:
            self.telemetry.step(message)

    def _warning(self, message: str) -> None:
        if self.telemetry:
            self.telemetry.warning(message)
