"""In-memory TTL cache in front of a vulnerability source."""

import time
from dataclasses import dataclass
from typing import Callable

from scaffold_sentinel.domain.constants import LOOKUP_CACHE_TTL_SECONDS, Ecosystem
from scaffold_sentinel.domain.entities import VulnerabilityRecord
from scaffold_sentinel.domain.protocols import VulnerabilitySourceProtocol

CacheKey = tuple[str, str, str]


@dataclass(frozen=True)
class CacheEntry:
    records: tuple[VulnerabilityRecord, ...]
    fetched_at: float


class CachedVulnerabilitySource(VulnerabilitySourceProtocol):
    """
    Caches lookups per (ecosystem, name, version) until `ttl_seconds` elapse.

    Failed lookups are not cached. Entries live for the process only.
    """

    def __init__(
        self,
        source: VulnerabilitySourceProtocol,
        ttl_seconds: float = LOOKUP_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.source = source
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}

    def lookup(
        self, ecosystem: Ecosystem | str, name: str, version: str
    ) -> list[VulnerabilityRecord]:
        key = (str(getattr(ecosystem, "value", ecosystem)), name, version)
        now = self.clock()
        entry = self._entries.get(key)
        if entry is not None and now - entry.fetched_at < self.ttl_seconds:
            return list(entry.records)
        records = self.source.lookup(ecosystem, name, version)
        self._entries[key] = CacheEntry(tuple(records), now)
        return list(records)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
