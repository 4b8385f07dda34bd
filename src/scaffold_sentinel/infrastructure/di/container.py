import logging
import os
from typing import TYPE_CHECKING, Any, Optional, cast

from scaffold_sentinel.domain.config import SentinelConfig
from scaffold_sentinel.domain.errors import RuleError
from scaffold_sentinel.domain.fixes import FixStrategyRegistry
from scaffold_sentinel.domain.rules import RuleRegistry
from scaffold_sentinel.domain.vulnerabilities import VulnerabilityIndex
from scaffold_sentinel.infrastructure.checkers.json_checker import JsonSyntaxChecker
from scaffold_sentinel.infrastructure.checkers.yaml_checker import YamlSyntaxChecker
from scaffold_sentinel.infrastructure.config_file_loader import ConfigFileLoader
from scaffold_sentinel.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from scaffold_sentinel.infrastructure.gateways.osv_gateway import OsvVulnerabilitySource
from scaffold_sentinel.infrastructure.services.lookup_cache import CachedVulnerabilitySource
from scaffold_sentinel.infrastructure.services.rule_catalog import RuleCatalogLoader
from scaffold_sentinel.infrastructure.telemetry import LoggingTelemetry
from scaffold_sentinel.use_cases.apply_fixes import AutoFixExecutor
from scaffold_sentinel.use_cases.pre_generation import PreGenerationGate
from scaffold_sentinel.use_cases.validate_dependencies import DependencyGraphValidator
from scaffold_sentinel.use_cases.validate_project import ValidationOrchestrator
from scaffold_sentinel.use_cases.validate_versions import VersionCompatibilityValidator

if TYPE_CHECKING:
    from scaffold_sentinel.domain.protocols import (
        FileSystemProtocol,
        TelemetryPort,
        VulnerabilitySourceProtocol,
    )

logger = logging.getLogger(__name__)


class SentinelContainer:
    """Dependency Injection Container for Scaffold Sentinel."""

    _instance: Optional["SentinelContainer"] = None

    def __init__(self, start: str | None = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._start = start
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        config_dict, _tool_section = ConfigFileLoader.load_config_from_fs(self._start)
        config = SentinelConfig.from_dict(config_dict)
        self.register_singleton("SentinelConfig", config)

        telemetry = LoggingTelemetry("scaffold_sentinel", "Scaffold Sentinel online")
        self.register_singleton("TelemetryPort", telemetry)
        filesystem = FileSystemGateway()
        self.register_singleton("FileSystemGateway", filesystem)

        self.register_singleton("RuleRegistry", self._build_rules(config))
        self.register_singleton("FixStrategyRegistry", FixStrategyRegistry.default())
        self.register_singleton("VulnerabilitySource", self._build_vulnerability_source(config))

        version_validator = VersionCompatibilityValidator()
        self.register_singleton("VersionCompatibilityValidator", version_validator)
        self.register_singleton(
            "DependencyGraphValidator",
            DependencyGraphValidator(
                filesystem,
                vulnerability_source=self.get_vulnerability_source(),
                telemetry=telemetry,
                lexicographic_outdated=config.lexicographic_outdated,
            ),
        )
        self.register_singleton(
            "AutoFixExecutor",
            AutoFixExecutor(
                filesystem,
                strategies=self.get("FixStrategyRegistry"),
                telemetry=telemetry,
                dry_run=config.dry_run,
                backup_enabled=config.backup_enabled,
            ),
        )
        self.register_singleton(
            "PreGenerationGate",
            PreGenerationGate(version_validator, filesystem, telemetry),
        )
        self.register_singleton(
            "ValidationOrchestrator",
            ValidationOrchestrator(
                filesystem,
                rules=self.get_rule_registry(),
                fix_executor=self.get_fix_executor(),
                version_validator=version_validator,
                dependency_validator=self.get("DependencyGraphValidator"),
                checkers=(JsonSyntaxChecker(), YamlSyntaxChecker()),
                telemetry=telemetry,
                excluded_dirs=config.excluded_dirs,
                pre_generation_gate=self.get_pre_generation_gate(),
            ),
        )

    def _build_rules(self, config: SentinelConfig) -> RuleRegistry:
        """Defaults, plus the YAML catalog if configured, minus disabled rules."""
        registry = RuleRegistry()
        if config.rules_file:
            catalog_path = config.rules_file
            if not os.path.isabs(catalog_path):
                catalog_path = os.path.join(self._start or os.getcwd(), catalog_path)
            for rule in RuleCatalogLoader(catalog_path).load():
                try:
                    registry.add_rule(rule)
                except RuleError as e:
                    logger.warning("Cannot add catalog rule: %s", e)
        for rule_id in config.disabled_rules:
            try:
                registry.disable_rule(rule_id)
            except RuleError as e:
                logger.warning("Cannot disable rule: %s", e)
        return registry

    @staticmethod
    def _build_vulnerability_source(config: SentinelConfig) -> "VulnerabilitySourceProtocol":
        if config.vulnerability_source == "osv":
            return CachedVulnerabilitySource(
                OsvVulnerabilitySource(timeout=config.lookup_timeout_seconds),
                ttl_seconds=config.cache_ttl_seconds,
            )
        return VulnerabilityIndex.default()

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config(self) -> SentinelConfig:
        return cast(SentinelConfig, self.get("SentinelConfig"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_rule_registry(self) -> RuleRegistry:
        return cast(RuleRegistry, self.get("RuleRegistry"))

    def get_vulnerability_source(self) -> "VulnerabilitySourceProtocol":
        """Return the static index, or the cached OSV source when configured."""
        return cast("VulnerabilitySourceProtocol", self.get("VulnerabilitySource"))

    def get_fix_executor(self) -> AutoFixExecutor:
        return cast(AutoFixExecutor, self.get("AutoFixExecutor"))

    def get_pre_generation_gate(self) -> PreGenerationGate:
        return cast(PreGenerationGate, self.get("PreGenerationGate"))

    def get_orchestrator(self) -> ValidationOrchestrator:
        """Return the engine facade wired with every collaborator above."""
        return cast(ValidationOrchestrator, self.get("ValidationOrchestrator"))

    @classmethod
    def get_instance(cls) -> "SentinelContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = SentinelContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
