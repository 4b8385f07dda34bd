"""Ports the domain and use cases depend on. Infrastructure implements them."""

from typing import Any, Protocol

from scaffold_sentinel.domain.constants import Ecosystem
from scaffold_sentinel.domain.entities import (
    ConfigValidationResult,
    ValidationResult,
    VulnerabilityRecord,
)


class TelemetryPort(Protocol):
    """Protocol for telemetry/progress updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations confined to a project root."""

    def validate_path(self, path: str, root: str | None = None) -> str:
        """Return the resolved path, or raise PathTraversalError."""
        ...

    def exists(self, path: str) -> bool:
        """Return True if path exists (file or directory)."""
        ...

    def is_directory(self, path: str) -> bool:
        ...

    def is_file(self, path: str) -> bool:
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        ...

    def safe_read_text(self, path: str, root: str) -> str:
        """Read a file only if it resolves inside `root`."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file, creating parent directories."""
        ...

    def copy_file(self, source: str, destination: str) -> None:
        ...

    def rename(self, source: str, destination: str) -> None:
        ...

    def make_dirs(self, path: str, exist_ok: bool = True) -> None:
        ...

    def join_path(self, *paths: str) -> str:
        ...

    def relative_to(self, path: str, root: str) -> str:
        ...

    def walk_files(self, root: str, excluded_dirs: tuple[str, ...] = ()) -> list[str]:
        """Every file under root in sorted order, skipping excluded directory names."""
        ...

    def file_mode(self, path: str) -> int:
        """Permission bits of a file."""
        ...


class SyntaxCheckerProtocol(Protocol):
    """A leaf checker for one file format. Stateless."""

    def supports(self, file_name: str) -> bool: ...

    def validate(self, path: str) -> ConfigValidationResult: ...


class VulnerabilitySourceProtocol(Protocol):
    """
    Where advisories come from.

    Raises VulnerabilityLookupError when the source cannot answer.
    """

    def lookup(
        self, ecosystem: Ecosystem | str, name: str, version: str
    ) -> list[VulnerabilityRecord]: ...


class ReportRendererProtocol(Protocol):
    """Serializes a ValidationResult. Renderers live outside the core."""

    def render(
        self, result: ValidationResult, format: str, options: dict[str, Any] | None = None
    ) -> bytes: ...
