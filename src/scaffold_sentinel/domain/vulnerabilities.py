"""Static vulnerability lookup table and security-update prioritization."""

from types import MappingProxyType
from typing import Iterable, Mapping, Protocol, Sequence, TypeVar

from scaffold_sentinel.domain.constants import Ecosystem, VulnerabilitySeverity
from scaffold_sentinel.domain.entities import VulnerabilityRecord
from scaffold_sentinel.domain.errors import VersionParseError
from scaffold_sentinel.domain.versioning import is_at_least, resolved_version


class _HasSeverity(Protocol):
    @property
    def severity(self) -> VulnerabilitySeverity: ...


T = TypeVar("T", bound=_HasSeverity)


def prioritize_security_updates(vulnerabilities: Sequence[T]) -> list[T]:
    """
    New list ordered critical > high > moderate > low > info.

    Stable: equal severities keep their input order.
    """
    return sorted(vulnerabilities, key=lambda v: -v.severity.rank)


def is_version_affected(declared_version: str, record: VulnerabilityRecord) -> bool:
    """
    A version is affected until it reaches `fixed_in`.

    Advisories without a fix affect every version. A declaration with no
    concrete version (e.g. "latest") cannot be judged and is not flagged.
    """
    if record.fixed_in is None:
        return True
    resolved = resolved_version(declared_version)
    if resolved is None:
        return False
    try:
        return not is_at_least(resolved, record.fixed_in)
    except VersionParseError:
        return False


class VulnerabilityIndex:
    """
    Package name -> known advisories.

    Also satisfies VulnerabilitySourceProtocol so it can stand in for a
    network source. The static table is ecosystem-agnostic.
    """

    def __init__(self, records: Iterable[VulnerabilityRecord] = ()) -> None:
        table: dict[str, list[VulnerabilityRecord]] = {}
        for record in records:
            table.setdefault(record.package_name, []).append(record)
        self._table: Mapping[str, tuple[VulnerabilityRecord, ...]] = MappingProxyType(
            {name: tuple(items) for name, items in table.items()}
        )

    def __contains__(self, package_name: object) -> bool:
        return package_name in self._table

    def __len__(self) -> int:
        return len(self._table)

    def get(self, package_name: str) -> tuple[VulnerabilityRecord, ...]:
        return self._table.get(package_name, ())

    def lookup(
        self, ecosystem: Ecosystem | str, name: str, version: str
    ) -> list[VulnerabilityRecord]:
        return [r for r in self.get(name) if is_version_affected(version, r)]

    @classmethod
    def default(cls) -> "VulnerabilityIndex":
        return cls(DEFAULT_VULNERABILITIES)


DEFAULT_VULNERABILITIES: tuple[VulnerabilityRecord, ...] = (
    VulnerabilityRecord(
        package_name="lodash",
        affected_version="4.17.15",
        advisory_id="CVE-2020-8203",
        severity=VulnerabilitySeverity.HIGH,
        description="Prototype pollution vulnerability",
        fixed_in="4.17.19",
    ),
    VulnerabilityRecord(
        package_name="express",
        affected_version="4.16.0",
        advisory_id="CVE-2022-24999",
        severity=VulnerabilitySeverity.MODERATE,
        description="Open redirect vulnerability",
        fixed_in="4.17.3",
    ),
)

# Latest known releases used for outdated detection.
DEFAULT_LATEST_VERSIONS: Mapping[str, str] = MappingProxyType(
    {
        "lodash": "4.17.21",
        "express": "4.18.2",
        "react": "18.2.0",
        "vue": "3.3.4",
    }
)
