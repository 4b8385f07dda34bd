"""Network vulnerability source backed by the OSV query API."""

import logging
from typing import Any

import requests

from scaffold_sentinel.domain.constants import (
    LOOKUP_TIMEOUT_SECONDS,
    Ecosystem,
    VulnerabilitySeverity,
)
from scaffold_sentinel.domain.entities import VulnerabilityRecord
from scaffold_sentinel.domain.errors import VulnerabilityLookupError
from scaffold_sentinel.domain.protocols import VulnerabilitySourceProtocol
from scaffold_sentinel.domain.versioning import resolved_version

logger = logging.getLogger(__name__)

OSV_QUERY_URL = "https://api.osv.dev/v1/query"

OSV_ECOSYSTEMS = {
    Ecosystem.NPM: "npm",
    Ecosystem.GO: "Go",
    Ecosystem.PYPI: "PyPI",
}


def osv_ecosystem(ecosystem: Ecosystem | str) -> str:
    key = getattr(ecosystem, "value", ecosystem)
    for known, label in OSV_ECOSYSTEMS.items():
        if known.value == key:
            return label
    return str(key)


_SEVERITY_NAMES = {
    "CRITICAL": VulnerabilitySeverity.CRITICAL,
    "HIGH": VulnerabilitySeverity.HIGH,
    "MODERATE": VulnerabilitySeverity.MODERATE,
    "MEDIUM": VulnerabilitySeverity.MODERATE,
    "LOW": VulnerabilitySeverity.LOW,
}


class OsvVulnerabilitySource(VulnerabilitySourceProtocol):
    """
    One POST per lookup, blocking, bounded by `timeout`.

    Network failures and bad responses raise VulnerabilityLookupError so the
    caller can degrade that single dependency to a warning.
    """

    def __init__(self, timeout: float = LOOKUP_TIMEOUT_SECONDS, url: str = OSV_QUERY_URL) -> None:
        self.timeout = timeout
        self.url = url

    def lookup(
        self, ecosystem: Ecosystem | str, name: str, version: str
    ) -> list[VulnerabilityRecord]:
        concrete = resolved_version(version)
        if concrete is None:
            return []
        payload = {
            "package": {"name": name, "ecosystem": osv_ecosystem(ecosystem)},
            "version": concrete,
        }
        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.Timeout as e:
            raise VulnerabilityLookupError(
                f"lookup for {name}@{concrete} timed out after {self.timeout}s"
            ) from e
        except (requests.RequestException, ValueError) as e:
            raise VulnerabilityLookupError(f"lookup for {name}@{concrete} failed: {e}") from e
        vulns = body.get("vulns", []) if isinstance(body, dict) else []
        logger.debug("osv lookup %s@%s returned %d advisories", name, concrete, len(vulns))
        return [self._to_record(name, concrete, v) for v in vulns if isinstance(v, dict)]

    @staticmethod
    def _to_record(name: str, version: str, vuln: dict[str, Any]) -> VulnerabilityRecord:
        return VulnerabilityRecord(
            package_name=name,
            affected_version=version,
            advisory_id=str(vuln.get("id", "")),
            severity=_severity(vuln),
            description=str(vuln.get("summary") or vuln.get("details", ""))[:200],
            fixed_in=_fixed_in(vuln),
        )


def _severity(vuln: dict[str, Any]) -> VulnerabilitySeverity:
    specific = vuln.get("database_specific")
    if isinstance(specific, dict):
        label = str(specific.get("severity", "")).upper()
        if label in _SEVERITY_NAMES:
            return _SEVERITY_NAMES[label]
    return VulnerabilitySeverity.MODERATE


def _fixed_in(vuln: dict[str, Any]) -> str | None:
    for affected in vuln.get("affected", []) or []:
        for version_range in affected.get("ranges", []) or []:
            for event in version_range.get("events", []) or []:
                if "fixed" in event:
                    return str(event["fixed"])
    return None
