"""Engine settings. Immutable value object created by Infrastructure."""

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

from scaffold_sentinel.domain.constants import (
    DEFAULT_EXCLUDED_DIRS,
    LOOKUP_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

VULNERABILITY_SOURCES = ("static", "osv")
OUTDATED_COMPARISONS = ("semantic", "lexicographic")


@dataclass(frozen=True)
class SentinelConfig:
    """
    Settings read from `[tool.scaffold-sentinel]`.

    Domain does not read the filesystem; Infrastructure calls
    ConfigFileLoader.load_config_from_fs() and builds this with from_dict().
    """
    dry_run: bool = False
    backup_enabled: bool = True
    disabled_rules: tuple[str, ...] = ()
    excluded_dirs: tuple[str, ...] = DEFAULT_EXCLUDED_DIRS
    rules_file: str | None = None
    vulnerability_source: str = "static"
    lookup_timeout_seconds: float = LOOKUP_TIMEOUT_SECONDS
    cache_ttl_hours: float = 24.0
    outdated_comparison: str = "semantic"

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 3600

    @property
    def lexicographic_outdated(self) -> bool:
        return self.outdated_comparison == "lexicographic"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "SentinelConfig":
        """
        Build from a TOML table. Keys may use dashes or underscores.

        Unknown keys and wrongly typed values are logged and ignored.
        """
        if not raw:
            return cls()
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in raw.items():
            name = str(key).replace("-", "_")
            if name not in known:
                logger.warning("Unknown config key ignored: %s", key)
                continue
            coerced = _coerce(name, value)
            if coerced is _INVALID:
                logger.warning("Invalid value for %s: %r (using default)", key, value)
                continue
            values[name] = coerced
        return cls(**values)


_INVALID = object()


def _coerce(name: str, value: Any) -> Any:
    if name in ("dry_run", "backup_enabled"):
        return value if isinstance(value, bool) else _INVALID
    if name in ("disabled_rules", "excluded_dirs"):
        if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            return tuple(value)
        return _INVALID
    if name == "rules_file":
        return value if value is None or isinstance(value, str) else _INVALID
    if name == "vulnerability_source":
        return value if value in VULNERABILITY_SOURCES else _INVALID
    if name == "outdated_comparison":
        return value if value in OUTDATED_COMPARISONS else _INVALID
    if name in ("lookup_timeout_seconds", "cache_ttl_hours"):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            return _INVALID
        return float(value)
    return _INVALID
