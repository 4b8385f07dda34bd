"""Use Case: parse dependency manifests and check conflicts, advisories and staleness."""

from dataclasses import replace
from typing import Iterable, Mapping

from scaffold_sentinel.domain.entities import (
    DependencyConflict,
    DependencyRecord,
    DependencyValidationResult,
    DependencyVulnerability,
    OutdatedDependency,
)
from scaffold_sentinel.domain.errors import VulnerabilityLookupError
from scaffold_sentinel.domain.protocols import (
    FileSystemProtocol,
    TelemetryPort,
    VulnerabilitySourceProtocol,
)
from scaffold_sentinel.domain.versioning import (
    clean_version,
    is_breaking_update,
    is_version_older,
    resolved_version,
    update_type,
)
from scaffold_sentinel.domain.vulnerabilities import (
    DEFAULT_LATEST_VERSIONS,
    VulnerabilityIndex,
)
from scaffold_sentinel.use_cases.checks.manifests import (
    MANIFEST_PARSERS,
    ManifestParse,
    parser_for,
)


def detect_conflicts(records: Iterable[DependencyRecord]) -> list[DependencyConflict]:
    """
    One conflict per pair of same-name records whose declared versions differ.

    Groups keep first-seen order; pairs are (i, j) with i < j.
    """
    groups: dict[str, list[DependencyRecord]] = {}
    for record in records:
        groups.setdefault(record.name, []).append(record)
    conflicts: list[DependencyConflict] = []
    for name, group in groups.items():
        for i, first in enumerate(group):
            for second in group[i + 1:]:
                if first.declared_version != second.declared_version:
                    conflicts.append(
                        DependencyConflict(
                            name=name,
                            version_1=first.declared_version,
                            version_2=second.declared_version,
                            source_1=first.source_file,
                            source_2=second.source_file,
                        )
                    )
    return conflicts


def detect_outdated(
    records: Iterable[DependencyRecord],
    latest_versions: Mapping[str, str],
    lexicographic: bool = False,
) -> list[OutdatedDependency]:
    outdated: list[OutdatedDependency] = []
    for record in records:
        latest = latest_versions.get(record.name)
        if latest is None:
            continue
        if lexicographic:
            current = record.declared_version
        else:
            current = resolved_version(record.declared_version)
            if current is None:
                continue
        if current == latest or not is_version_older(current, latest, lexicographic):
            continue
        outdated.append(
            OutdatedDependency(
                name=record.name,
                current_version=record.declared_version,
                latest_version=latest,
                update_type=update_type(clean_version(current), latest),
                breaking=is_breaking_update(clean_version(current), latest),
            )
        )
    return outdated


class DependencyGraphValidator:
    """
    Turns manifests into DependencyRecords and analyzes them as one graph.

    Vulnerabilities never flip `valid`; escalating them is the caller's call.
    Lookup failures degrade to a warning for that one dependency.
    """

    def __init__(
        self,
        filesystem: FileSystemProtocol,
        vulnerability_source: VulnerabilitySourceProtocol | None = None,
        latest_versions: Mapping[str, str] | None = None,
        telemetry: TelemetryPort | None = None,
        lexicographic_outdated: bool = False,
    ) -> None:
        self.filesystem = filesystem
        self.vulnerability_source = vulnerability_source or VulnerabilityIndex.default()
        self.latest_versions = (
            DEFAULT_LATEST_VERSIONS if latest_versions is None else latest_versions
        )
        self.telemetry = telemetry
        self.lexicographic_outdated = lexicographic_outdated

    def find_manifests(self, directory: str) -> list[str]:
        """Supported manifests directly inside `directory`."""
        found = []
        for file_name in MANIFEST_PARSERS:
            path = self.filesystem.join_path(directory, file_name)
            if self.filesystem.is_file(path):
                found.append(path)
        return found

    def parse_manifest(self, path: str, root: str | None = None) -> ManifestParse:
        parser = parser_for(path)
        if parser is None:
            raise ValueError(f"no manifest parser for {path}")
        text = (
            self.filesystem.safe_read_text(path, root)
            if root is not None
            else self.filesystem.read_text(path)
        )
        return parser(text, path)

    def validate_project(self, project_path: str) -> DependencyValidationResult:
        """Every manifest at the top of `project_path`."""
        root = self.filesystem.validate_path(project_path)
        return self.validate_manifests(self.find_manifests(root), root=root)

    def validate_manifests(
        self, paths: Iterable[str], root: str | None = None
    ) -> DependencyValidationResult:
        parses = [self.parse_manifest(path, root) for path in paths]
        return self.analyze(parses)

    def analyze(self, parses: Iterable[ManifestParse]) -> DependencyValidationResult:
        result = DependencyValidationResult()
        for parse in parses:
            result.errors.extend(parse.errors)
            if not parse.valid:
                result.valid = False
            for record in parse.records:
                if not record.resolved_valid:
                    result.errors.append(
                        f"{record.source_file}: invalid dependency "
                        f"{record.name}@{record.declared_version}"
                    )
                result.dependencies.append(self._check_vulnerabilities(record, result))
        result.conflicts = detect_conflicts(result.dependencies)
        result.outdated = detect_outdated(
            result.dependencies, self.latest_versions, self.lexicographic_outdated
        )
        return result

    def _check_vulnerabilities(
        self, record: DependencyRecord, result: DependencyValidationResult
    ) -> DependencyRecord:
        try:
            found = self.vulnerability_source.lookup(
                record.ecosystem, record.name, record.declared_version
            )
        except VulnerabilityLookupError as e:
            message = f"could not check security for {record.name}@{record.declared_version}"
            result.warnings.append(message)
            if self.telemetry:
                self.telemetry.warning(f"{message} reason={e}")
            return record
        if not found:
            return record
        flagged = replace(record, known_vulnerability_count=len(found))
        for vulnerability in found:
            result.vulnerabilities.append(DependencyVulnerability(flagged, vulnerability))
        return flagged
