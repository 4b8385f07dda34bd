"""Use Case: refuse to render a template whose ecosystem versions are missing or unsupported."""

import os
import re

from scaffold_sentinel.domain.constants import (
    GO_MINIMUM_TEMPLATE_VERSION,
    TEMPLATE_SUFFIX,
    Severity,
)
from scaffold_sentinel.domain.entities import (
    NodeVersionConfig,
    PreGenerationResult,
    ProjectConfig,
    VersionConfig,
)
from scaffold_sentinel.domain.errors import GenerationBlockedError
from scaffold_sentinel.domain.protocols import FileSystemProtocol, TelemetryPort
from scaffold_sentinel.domain.template_types import (
    BACKEND,
    FRONTEND,
    TemplateEcosystem,
    classify_template,
)
from scaffold_sentinel.use_cases.validate_versions import (
    VersionCompatibilityValidator,
    image_format_error,
    runtime_types_error,
)

GO_TEMPLATE_VERSION_PATTERN = re.compile(r"^\d+\.\d+(\.\d+)?$")


def is_valid_go_version_format(version: str) -> bool:
    """'1.22', '1.21.5' pass; '1', '1.22.0.1' and '' do not."""
    return bool(GO_TEMPLATE_VERSION_PATTERN.match(version))


def go_version_supported(version: str) -> bool:
    major, minor = (int(p) for p in version.split(".")[:2])
    return (major, minor) >= GO_MINIMUM_TEMPLATE_VERSION


class _Findings:
    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def result(self) -> PreGenerationResult:
        return PreGenerationResult(
            valid=not self.errors,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
        )


class PreGenerationGate:
    """
    Runs before a template is rendered.

    Absent configuration short-circuits with a single error. Otherwise every
    ecosystem the template path indicates is checked, followed by checks
    specific to the template file (package.json, Dockerfile, go.mod).
    """

    def __init__(
        self,
        version_validator: VersionCompatibilityValidator | None = None,
        filesystem: FileSystemProtocol | None = None,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self.version_validator = version_validator or VersionCompatibilityValidator()
        self.filesystem = filesystem
        self.telemetry = telemetry

    def validate(self, config: ProjectConfig | None, template_path: str) -> PreGenerationResult:
        findings = _Findings()
        versions = self._versions_or_report(config, findings)
        if versions is not None:
            for ecosystem in classify_template(template_path):
                self._check_ecosystem(ecosystem, versions, findings)
            self._check_template_file(template_path, versions, findings)
        result = findings.result()
        self._report(template_path, result)
        return result

    def ensure_can_generate(
        self, config: ProjectConfig | None, template_path: str
    ) -> PreGenerationResult:
        """validate(), raising GenerationBlockedError when it fails."""
        result = self.validate(config, template_path)
        if not result.valid:
            raise GenerationBlockedError(template_path, list(result.errors))
        return result

    def collect_template_files(self, template_dir: str) -> list[str]:
        if self.filesystem is None:
            raise RuntimeError("collect_template_files needs a filesystem")
        return [
            path
            for path in self.filesystem.walk_files(template_dir)
            if path.endswith(TEMPLATE_SUFFIX)
        ]

    def validate_directory(
        self, config: ProjectConfig | None, template_dir: str
    ) -> PreGenerationResult:
        """Ecosystem checks once per ecosystem present, file checks once per template."""
        findings = _Findings()
        versions = self._versions_or_report(config, findings)
        if versions is not None:
            templates = self.collect_template_files(template_dir)
            present: list[TemplateEcosystem] = []
            for path in templates:
                for ecosystem in classify_template(path):
                    if ecosystem not in present:
                        present.append(ecosystem)
            for ecosystem in present:
                self._check_ecosystem(ecosystem, versions, findings)
            for path in templates:
                file_findings = _Findings()
                self._check_template_file(path, versions, file_findings)
                rel = os.path.relpath(path, template_dir)
                findings.errors.extend(f"{rel}: {e}" for e in file_findings.errors)
                findings.warnings.extend(f"{rel}: {w}" for w in file_findings.warnings)
        result = findings.result()
        self._report(template_dir, result)
        return result

    @staticmethod
    def _versions_or_report(
        config: ProjectConfig | None, findings: _Findings
    ) -> VersionConfig | None:
        if config is None:
            findings.errors.append("project configuration is required")
            return None
        if config.versions is None:
            findings.errors.append("version configuration is required")
            return None
        return config.versions

    def _check_ecosystem(
        self, ecosystem: TemplateEcosystem, versions: VersionConfig, findings: _Findings
    ) -> None:
        if ecosystem is FRONTEND:
            self._check_nodejs(versions.nodejs, findings)
        elif ecosystem is BACKEND:
            self._check_go(versions.go, findings)

    def _check_nodejs(self, nodejs: NodeVersionConfig | None, findings: _Findings) -> None:
        if nodejs is None:
            findings.errors.append(
                "Node.js version configuration is required for frontend templates"
            )
            return
        checked = self.version_validator.validate(nodejs)
        findings.errors.extend(
            f"Node.js {e.field}: {e.message}" for e in checked.errors_at_least(Severity.ERROR)
        )
        findings.warnings.extend(w.message for w in checked.warnings)

    @staticmethod
    def _check_go(go_version: str, findings: _Findings) -> None:
        if not go_version:
            findings.errors.append("Go version is required for backend templates")
        elif not is_valid_go_version_format(go_version):
            findings.errors.append(f"invalid Go version format: {go_version}")
        elif not go_version_supported(go_version):
            floor = ".".join(str(p) for p in GO_MINIMUM_TEMPLATE_VERSION)
            findings.errors.append(
                f"Go version {go_version} is not supported, minimum is {floor}"
            )

    def _check_template_file(
        self, template_path: str, versions: VersionConfig, findings: _Findings
    ) -> None:
        name = os.path.basename(template_path)
        if name.startswith("package.json"):
            self._check_package_json_template(versions.nodejs, findings)
        elif name.startswith("Dockerfile") and FRONTEND.matches(template_path):
            self._check_dockerfile_template(versions.nodejs, findings)
        elif name.startswith("go.mod") and not versions.go:
            findings.errors.append("go.mod template requires a Go version")

    @staticmethod
    def _check_package_json_template(
        nodejs: NodeVersionConfig | None, findings: _Findings
    ) -> None:
        if nodejs is None:
            findings.errors.append("package.json template requires Node.js version configuration")
        elif not nodejs.runtime:
            findings.errors.append("package.json template requires a Node.js runtime version")
        elif not nodejs.types_package:
            findings.errors.append("package.json template requires a @types/node version")
        else:
            message = runtime_types_error(nodejs.runtime, nodejs.types_package)
            if message:
                findings.errors.append(f"package.json template: {message}")

    def _check_dockerfile_template(
        self, nodejs: NodeVersionConfig | None, findings: _Findings
    ) -> None:
        if nodejs is None:
            return
        if not nodejs.image:
            findings.warnings.append("Dockerfile template has no image configured")
            return
        profile = self.version_validator.profile
        message = image_format_error(nodejs.image, profile.image_family, profile.name)
        if message:
            findings.errors.append(f"Dockerfile template: {message}")

    def _report(self, target: str, result: PreGenerationResult) -> None:
        if not self.telemetry:
            return
        status = "passed" if result.valid else "blocked"
        self.telemetry.step(
            f"template={target} gate={status} errors={len(result.errors)} "
            f"warnings={len(result.warnings)}"
        )
        for error in result.errors:
            self.telemetry.error(f"template={target} reason={error}")
