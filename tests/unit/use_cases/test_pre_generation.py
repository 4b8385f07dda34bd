"""Unit tests for PreGenerationGate."""

from dataclasses import replace
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from scaffold_sentinel.domain.entities import NodeVersionConfig, ProjectConfig, VersionConfig
from scaffold_sentinel.domain.errors import GenerationBlockedError
from scaffold_sentinel.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from scaffold_sentinel.use_cases.pre_generation import (
    PreGenerationGate,
    go_version_supported,
    is_valid_go_version_format,
)

PACKAGE_JSON = "templates/frontend/nextjs-app/package.json.tmpl"
NEXT_CONFIG = "templates/frontend/nextjs-app/next.config.js.tmpl"
MAIN_GO = "templates/backend/go-gin/main.go.tmpl"
GO_MOD = "templates/backend/go-gin/go.mod.tmpl"
DOCKERFILE = "templates/infrastructure/docker/Dockerfile.tmpl"


def project(nodejs: NodeVersionConfig | None = None, go: str = "") -> ProjectConfig:
    return ProjectConfig(name="app", versions=VersionConfig(go=go, nodejs=nodejs))


@pytest.fixture
def gate() -> PreGenerationGate:
    return PreGenerationGate()


class TestShortCircuit:
    def test_missing_config(self, gate: PreGenerationGate) -> None:
        """Test that a missing project config blocks generation."""
        result = gate.validate(None, PACKAGE_JSON)
        assert result.errors == ("project configuration is required",)

    def test_missing_versions(self, gate: PreGenerationGate) -> None:
        result = gate.validate(ProjectConfig(name="app"), PACKAGE_JSON)
        assert result.errors == ("version configuration is required",)


class TestFrontend:
    def test_valid_config_passes(self, gate: PreGenerationGate, recommended_node: NodeVersionConfig) -> None:
        """Test that the recommended Node.js versions pass the gate."""
        result = gate.validate(project(recommended_node), PACKAGE_JSON)
        assert result.valid
        assert result.errors == ()

    def test_incompatible_types_blocks_twice(
        self, gate: PreGenerationGate, recommended_node: NodeVersionConfig
    ) -> None:
        """Incompatible types fail both the ecosystem and the manifest check."""
        config = project(replace(recommended_node, types_package="^16.0.0"))
        result = gate.validate(config, PACKAGE_JSON)
        assert not result.valid
        assert len(result.errors) == 2
        assert result.errors[1].startswith("package.json template:")

    def test_missing_nodejs_block(self, gate: PreGenerationGate) -> None:
        result = gate.validate(project(None), PACKAGE_JSON)
        assert result.errors == (
            "Node.js version configuration is required for frontend templates",
            "package.json template requires Node.js version configuration",
        )

    def test_non_manifest_frontend_template_runs_ecosystem_checks_only(
        self, gate: PreGenerationGate
    ) -> None:
        """Frontend templates other than package.json only get the ecosystem check."""
        result = gate.validate(project(None), NEXT_CONFIG)
        assert len(result.errors) == 1

    def test_dockerfile_with_empty_image_warns(
        self, gate: PreGenerationGate, recommended_node: NodeVersionConfig
    ) -> None:
        config = project(replace(recommended_node, image=""))
        result = gate.validate(config, "templates/frontend/Dockerfile.tmpl")
        assert "Dockerfile template has no image configured" in result.warnings
        assert result.errors == ("Node.js image: image reference cannot be empty",)

    def test_dockerfile_with_foreign_image_errors(
        self, gate: PreGenerationGate, recommended_node: NodeVersionConfig
    ) -> None:
        """Test that a non-Node.js image blocks a frontend Dockerfile."""
        config = project(replace(recommended_node, image="python:3.9"))
        result = gate.validate(config, "templates/frontend/Dockerfile.tmpl")
        assert "Dockerfile template: image should be a Node.js image: python:3.9" in result.errors


class TestBackend:
    @pytest.mark.parametrize(("go", "errors"), [("1.22.0", 0), ("1.20.0", 0), ("1.19.0", 1), ("1.x", 1)])
    def test_go_floor(self, gate: PreGenerationGate, go: str, errors: int) -> None:
        """Go versions below 1.20 or unparsable ones are rejected."""
        assert len(gate.validate(project(go=go), MAIN_GO).errors) == errors

    def test_go_mod_without_go_version(self, gate: PreGenerationGate) -> None:
        result = gate.validate(project(), GO_MOD)
        assert result.errors == (
            "Go version is required for backend templates",
            "go.mod template requires a Go version",
        )


def test_unclassified_template_passes(gate: PreGenerationGate) -> None:
    assert gate.validate(project(), DOCKERFILE).valid


def test_go_helpers() -> None:
    assert is_valid_go_version_format("1.22")
    assert is_valid_go_version_format("1.21.5")
    assert not is_valid_go_version_format("1")
    assert not is_valid_go_version_format("1.22.0.1")
    assert go_version_supported("1.20")
    assert not go_version_supported("1.19.9")


def test_ensure_can_generate_raises_with_every_error(gate: PreGenerationGate) -> None:
    """Test that the raised error lists every gate error."""
    with pytest.raises(GenerationBlockedError) as excinfo:
        gate.ensure_can_generate(project(), GO_MOD)
    assert len(excinfo.value.errors) == 2
    assert excinfo.value.template_path == GO_MOD


def test_telemetry_reports_blocked_gate() -> None:
    """A blocked gate logs one step and one error."""
    telemetry = MagicMock()
    PreGenerationGate(telemetry=telemetry).validate(None, PACKAGE_JSON)
    telemetry.step.assert_called_once()
    assert "gate=blocked" in telemetry.step.call_args[0][0]
    telemetry.error.assert_called_once()


class TestValidateDirectory:
    def test_checks_each_ecosystem_once(self, tmp_path: Path) -> None:
        """Ecosystem errors are reported once per directory, template errors once per file."""
        for rel in (PACKAGE_JSON, NEXT_CONFIG, MAIN_GO, GO_MOD, "templates/README.md"):
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("x")
        gate = PreGenerationGate(filesystem=FileSystemGateway())

        templates = gate.collect_template_files(str(tmp_path))
        assert len(templates) == 4

        result = gate.validate_directory(project(None, go=""), str(tmp_path))
        assert result.errors.count("Node.js version configuration is required for frontend templates") == 1
        assert result.errors.count("Go version is required for backend templates") == 1
        assert any(e.startswith("templates/backend/go-gin/go.mod.tmpl: ") for e in result.errors)
        assert any(e.startswith("templates/frontend/nextjs-app/package.json.tmpl: ") for e in result.errors)
        assert len(result.errors) == 4

    def test_requires_filesystem(self) -> None:
        with pytest.raises(RuntimeError):
            PreGenerationGate().collect_template_files("/tmp")
