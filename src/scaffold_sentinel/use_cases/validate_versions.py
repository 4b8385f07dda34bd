"""Use Case: validate one ecosystem's runtime/types/build-tool/image tuple."""

import re
from typing import Sequence

from scaffold_sentinel.domain.compatibility import CompatibilityMatrix, EcosystemProfile
from scaffold_sentinel.domain.constants import (
    INVALID_DOCKER_IMAGE,
    INVALID_VERSION_FORMAT,
    NON_LTS_VERSION,
    RUNTIME_VERSION_MISMATCH,
    TYPES_MAJOR_LEAD,
    TYPES_VERSION_MISMATCH,
    VERSION_COMPATIBILITY_MISMATCH,
    VERSION_PARSE_ERROR,
    Severity,
)
from scaffold_sentinel.domain.entities import (
    NodeVersionConfig,
    VersionSuggestion,
    VersionValidationError,
    VersionValidationResult,
    VersionValidationWarning,
)
from scaffold_sentinel.domain.errors import VersionParseError
from scaffold_sentinel.domain.versioning import (
    extract_major_version,
    is_lts_major,
    nearest_lts_major,
)

FIELD_PATTERNS: dict[str, re.Pattern[str]] = {
    "runtime": re.compile(
        r"^(>=|>|<=|<|~|\^)?(\d+)\.(\d+)\.(\d+)(-[a-zA-Z0-9\-.]+)?(\+[a-zA-Z0-9\-.]+)?$"
    ),
    "types": re.compile(r"^(\^|~)?(\d+)\.(\d+)\.(\d+)(-[a-zA-Z0-9\-.]+)?$"),
    "build_tool": re.compile(r"^(>=|>|<=|<|~|\^)?(\d+)\.(\d+)\.(\d+)(-[a-zA-Z0-9\-.]+)?$"),
}
IMAGE_PATTERN = re.compile(r"^([a-zA-Z0-9\-.]+/)?[a-zA-Z0-9\-.]+:[a-zA-Z0-9\-.]+$")


def version_format_error(version: str, field: str) -> str | None:
    """Message describing why `version` violates the grammar of `field`, or None."""
    if not version:
        return f"{field} version cannot be empty"
    pattern = FIELD_PATTERNS.get(field, FIELD_PATTERNS["runtime"])
    if not pattern.match(version):
        return f"invalid {field} version format: {version}"
    return None


def image_format_error(image: str, family: str, label: str) -> str | None:
    if not image:
        return "image reference cannot be empty"
    if not IMAGE_PATTERN.match(image):
        return f"invalid image reference format: {image}"
    if family.lower() not in image.lower():
        return f"image should be a {label} image: {image}"
    return None


def runtime_types_error(runtime: str, types: str) -> str | None:
    """
    None when major(types) lies in [major(runtime), major(runtime) + 2].

    An unparsable side is itself an incompatibility.
    """
    try:
        runtime_major = extract_major_version(runtime)
    except VersionParseError as e:
        return f"cannot extract runtime major version: {e}"
    try:
        types_major = extract_major_version(types)
    except VersionParseError as e:
        return f"cannot extract types major version: {e}"
    if types_major < runtime_major or types_major > runtime_major + TYPES_MAJOR_LEAD:
        return (
            f"types version {types_major} is not compatible with "
            f"runtime version {runtime_major}"
        )
    return None


class VersionCompatibilityValidator:
    """Format, compatibility, LTS and drift checks for one version tuple."""

    def __init__(
        self,
        matrix: CompatibilityMatrix | None = None,
        ecosystem: str = "nodejs",
    ) -> None:
        self.matrix = matrix or CompatibilityMatrix.default()
        self.ecosystem = ecosystem

    @property
    def profile(self) -> EcosystemProfile:
        return self.matrix.profile(self.ecosystem)

    def validate(self, config: NodeVersionConfig) -> VersionValidationResult:
        """Run every check. One failing check never hides the others."""
        result = VersionValidationResult()
        self._check_formats(config, result)
        self._check_image(config, result)
        self._check_compatibility(config, result)
        self._lts_pass(config, result, report_parse_errors=False)
        result.suggestions.extend(self.drift_suggestions(config))
        return result

    def _check_formats(self, config: NodeVersionConfig, result: VersionValidationResult) -> None:
        for field, value in (
            ("runtime", config.runtime),
            ("types", config.types_package),
            ("build_tool", config.build_tool_version),
        ):
            message = version_format_error(value, field)
            if message:
                result.add_error(
                    VersionValidationError(
                        field=field,
                        value=value,
                        message=message,
                        severity=Severity.ERROR,
                        code=INVALID_VERSION_FORMAT,
                    )
                )

    def _check_image(self, config: NodeVersionConfig, result: VersionValidationResult) -> None:
        message = image_format_error(
            config.image, self.profile.image_family, self.profile.name
        )
        if message:
            result.add_error(
                VersionValidationError(
                    field="image",
                    value=config.image,
                    message=message,
                    severity=Severity.ERROR,
                    code=INVALID_DOCKER_IMAGE,
                )
            )

    def _check_compatibility(
        self, config: NodeVersionConfig, result: VersionValidationResult
    ) -> None:
        message = runtime_types_error(config.runtime, config.types_package)
        if message:
            result.add_error(
                VersionValidationError(
                    field="compatibility",
                    value=f"runtime: {config.runtime}, types: {config.types_package}",
                    message=message,
                    severity=Severity.CRITICAL,
                    code=VERSION_COMPATIBILITY_MISMATCH,
                )
            )

    def validate_against_lts(self, config: NodeVersionConfig) -> VersionValidationResult:
        """The LTS pass on its own. An unparsable runtime is an error here."""
        result = VersionValidationResult()
        self._lts_pass(config, result, report_parse_errors=True)
        return result

    def _lts_pass(
        self,
        config: NodeVersionConfig,
        result: VersionValidationResult,
        report_parse_errors: bool,
    ) -> None:
        try:
            major = extract_major_version(config.runtime)
        except VersionParseError as e:
            if report_parse_errors:
                result.add_error(
                    VersionValidationError(
                        field="runtime",
                        value=config.runtime,
                        message=f"Cannot extract major version: {e}",
                        severity=Severity.ERROR,
                        code=VERSION_PARSE_ERROR,
                    )
                )
            return
        if is_lts_major(major):
            return
        label = self.profile.name
        result.warnings.append(
            VersionValidationWarning(
                field="runtime",
                value=config.runtime,
                message=(
                    f"{label} {major} is not an LTS version. Consider using an "
                    "LTS version for production stability."
                ),
                code=NON_LTS_VERSION,
            )
        )
        suggested = nearest_lts_major(major, self.profile.minimum_major)
        result.suggestions.append(
            VersionSuggestion(
                field="runtime",
                current_value=config.runtime,
                suggested_value=f">={suggested}.0.0",
                reason=f"{label} {suggested} is the nearest LTS version with long-term support",
                priority="medium",
                breaking_change=False,
            )
        )

    def drift_suggestions(self, config: NodeVersionConfig) -> list[VersionSuggestion]:
        """One suggestion per field that differs from the recommended tuple."""
        recommended = self.profile.recommended
        checks = (
            ("runtime", config.runtime, recommended.runtime, "medium",
             "Use the recommended LTS version for better stability and support"),
            ("types", config.types_package, recommended.types_package, "high",
             "Use types version that matches the runtime version"),
            ("build_tool", config.build_tool_version, recommended.build_tool_version, "low",
             "Use the recommended build tool version"),
            ("image", config.image, recommended.image, "low",
             "Use the recommended image for consistency"),
        )
        return [
            VersionSuggestion(
                field=field,
                current_value=current,
                suggested_value=wanted,
                reason=reason,
                priority=priority,
            )
            for field, current, wanted, priority, reason in checks
            if current != wanted
        ]

    def validate_consistency(
        self, configs: Sequence[NodeVersionConfig]
    ) -> VersionValidationResult:
        """Warn for every config whose runtime or types differ from the first."""
        result = VersionValidationResult()
        if len(configs) < 2:
            return result
        base = configs[0]
        for index, config in enumerate(configs[1:], start=1):
            if config.runtime != base.runtime:
                result.warnings.append(
                    VersionValidationWarning(
                        field=f"config[{index}].runtime",
                        value=config.runtime,
                        message=(
                            f"Runtime version mismatch: expected {base.runtime}, "
                            f"got {config.runtime}"
                        ),
                        code=RUNTIME_VERSION_MISMATCH,
                    )
                )
            if config.types_package != base.types_package:
                result.warnings.append(
                    VersionValidationWarning(
                        field=f"config[{index}].types",
                        value=config.types_package,
                        message=(
                            f"Types package version mismatch: expected "
                            f"{base.types_package}, got {config.types_package}"
                        ),
                        code=TYPES_VERSION_MISMATCH,
                    )
                )
        return result
