"""Unit tests for CachedVulnerabilitySource."""

import unittest
from unittest.mock import MagicMock

from scaffold_sentinel.domain.constants import Ecosystem, VulnerabilitySeverity
from scaffold_sentinel.domain.entities import VulnerabilityRecord
from scaffold_sentinel.domain.errors import VulnerabilityLookupError
from scaffold_sentinel.infrastructure.services.lookup_cache import CachedVulnerabilitySource

ADVISORY = VulnerabilityRecord(
    package_name="lodash",
    affected_version="4.17.15",
    advisory_id="CVE-2020-8203",
    severity=VulnerabilitySeverity.HIGH,
    description="Prototype pollution",
    fixed_in="4.17.19",
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestCachedVulnerabilitySource(unittest.TestCase):
    """Lookups are memoized per (ecosystem, name, version) until the TTL runs out."""

    def setUp(self) -> None:
        """A source that always reports the lodash advisory, and a frozen clock."""
        self.clock = FakeClock()
        self.source = MagicMock()
        self.source.lookup.return_value = [ADVISORY]

    def test_hit_within_ttl(self) -> None:
        """A second lookup inside the TTL never reaches the source."""
        cache = CachedVulnerabilitySource(self.source, ttl_seconds=60, clock=self.clock)
        self.assertEqual(cache.lookup(Ecosystem.NPM, "lodash", "4.17.15"), [ADVISORY])
        self.clock.now += 59
        self.assertEqual(cache.lookup("npm", "lodash", "4.17.15"), [ADVISORY])
        self.source.lookup.assert_called_once()

    def test_refetch_after_ttl(self) -> None:
        """An entry exactly TTL seconds old is stale."""
        cache = CachedVulnerabilitySource(self.source, ttl_seconds=60, clock=self.clock)
        cache.lookup(Ecosystem.NPM, "lodash", "4.17.15")
        self.clock.now += 60
        cache.lookup(Ecosystem.NPM, "lodash", "4.17.15")
        self.assertEqual(self.source.lookup.call_count, 2)

    def test_keys_include_version_and_ecosystem(self) -> None:
        cache = CachedVulnerabilitySource(self.source, clock=self.clock)
        cache.lookup(Ecosystem.NPM, "lodash", "4.17.15")
        cache.lookup(Ecosystem.NPM, "lodash", "4.17.21")
        cache.lookup(Ecosystem.PYPI, "lodash", "4.17.15")
        self.assertEqual(len(cache), 3)

    def test_failures_are_not_cached(self) -> None:
        """A failed lookup is retried on the next call."""
        failing = MagicMock()
        failing.lookup.side_effect = [VulnerabilityLookupError("down"), []]
        cache = CachedVulnerabilitySource(failing, clock=self.clock)
        with self.assertRaises(VulnerabilityLookupError):
            cache.lookup(Ecosystem.NPM, "lodash", "4.17.15")
        self.assertEqual(len(cache), 0)
        self.assertEqual(cache.lookup(Ecosystem.NPM, "lodash", "4.17.15"), [])

    def test_returned_list_is_a_copy(self) -> None:
        """Callers mutating a result do not corrupt the cache; clear() empties it."""
        cache = CachedVulnerabilitySource(self.source, clock=self.clock)
        cache.lookup(Ecosystem.NPM, "lodash", "4.17.15").clear()
        self.assertEqual(cache.lookup(Ecosystem.NPM, "lodash", "4.17.15"), [ADVISORY])
        cache.clear()
        self.assertEqual(len(cache), 0)
