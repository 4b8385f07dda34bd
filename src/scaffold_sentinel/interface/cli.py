"""CLI entry points for Scaffold Sentinel - Thin Controller using Typer."""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

import typer

from scaffold_sentinel.domain.entities import (
    FixResult,
    NodeVersionConfig,
    PreGenerationResult,
    ProjectConfig,
    ValidationIssue,
    ValidationResult,
    VersionConfig,
)
from scaffold_sentinel.domain.errors import ProjectRootError, SentinelError
from scaffold_sentinel.domain.protocols import ReportRendererProtocol, TelemetryPort
from scaffold_sentinel.interface.reporters import JsonReportRenderer
from scaffold_sentinel.use_cases.pre_generation import PreGenerationGate
from scaffold_sentinel.use_cases.validate_project import ValidationOrchestrator


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    orchestrator: ValidationOrchestrator
    pre_generation_gate: PreGenerationGate
    telemetry: TelemetryPort
    renderer: ReportRendererProtocol = field(default_factory=JsonReportRenderer)


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def format_issue(issue: ValidationIssue, root: str) -> str:
        location = os.path.relpath(issue.file, root) if issue.file else "-"
        if issue.line:
            location += f":{issue.line}"
            if issue.column:
                location += f":{issue.column}"
        fixable = " (fixable)" if issue.fixable else ""
        return f"{issue.severity.value.upper():8} {location} [{issue.rule}] {issue.message}{fixable}"

    @staticmethod
    def print_result(result: ValidationResult, root: str) -> None:
        for issue in result.issues:
            print(CLIAppFactory.format_issue(issue, root))
        counts = result.summary()
        print(
            f"\n{result.files_checked} files checked: {counts['critical']} critical, "
            f"{counts['error']} errors, {counts['warning']} warnings, {counts['info']} info"
        )

    @staticmethod
    def print_fix_result(result: FixResult) -> None:
        for fix in result.applied:
            print(f"applied  {fix.description} ({fix.file})")
        for fix in result.skipped:
            print(f"skipped  {fix.description}")
        for failure in result.failed:
            print(f"failed   {failure.fix.description}: {failure.error}")
        summary = result.summary()
        print(
            f"\n{summary['total_fixes']} fixes: {summary['applied_fixes']} applied, "
            f"{summary['skipped_fixes']} skipped, {summary['failed_fixes']} failed, "
            f"{summary['files_modified']} files modified"
        )

    @staticmethod
    def print_gate_result(result: PreGenerationResult) -> None:
        for error in result.errors:
            print(f"ERROR    {error}")
        for warning in result.warnings:
            print(f"WARNING  {warning}")
        print("generation allowed" if result.valid else "generation blocked")

    @staticmethod
    def build_project_config(
        node_runtime: str | None,
        node_types: str | None,
        build_tool: str | None,
        image: str | None,
        go_version: str | None,
    ) -> ProjectConfig:
        """Node.js settings are only present when at least one Node option was given."""
        nodejs = None
        if any(v is not None for v in (node_runtime, node_types, build_tool, image)):
            nodejs = NodeVersionConfig(
                runtime=node_runtime or "",
                types_package=node_types or "",
                build_tool_version=build_tool or "",
                image=image or "",
            )
        return ProjectConfig(
            versions=VersionConfig(
                node=node_runtime or "",
                go=go_version or "",
                nodejs=nodejs,
            )
        )

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="sentinel",
            help="Scaffold Sentinel: validate generated projects and repair what can be repaired.",
            add_completion=False,
        )

        def _validate(path: Path) -> tuple[str, ValidationResult]:
            deps.telemetry.handshake()
            root = str(path.resolve())
            try:
                return root, deps.orchestrator.validate_project(root)
            except ProjectRootError as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(2)

        @app.command()
        def check(
            path: Path = typer.Argument(Path("."), help="Project directory to validate"),  # noqa: B008
            output_format: str = typer.Option("text", "--format", help="text or json"),
        ) -> None:
            """Validate a project and print every issue. Exits 1 when the project is invalid."""
            root, result = _validate(path)
            if output_format == "text":
                CLIAppFactory.print_result(result, root)
            else:
                try:
                    print(deps.renderer.render(result, output_format).decode("utf-8"))
                except ValueError as e:
                    print(f"Error: {e}", file=sys.stderr)
                    sys.exit(2)
            sys.exit(0 if result.valid else 1)

        @app.command()
        def fix(
            path: Path = typer.Argument(Path("."), help="Project directory to repair"),  # noqa: B008
            dry_run: bool = typer.Option(False, "--dry-run", help="Report fixes without writing"),
            no_backup: bool = typer.Option(False, "--no-backup", help="Skip .backup copies"),
        ) -> None:
            """Validate, then apply every fix the registered strategies can build."""
            root, result = _validate(path)
            executor = deps.orchestrator.fix_executor
            executor.set_dry_run(dry_run)
            executor.set_backup_enabled(not no_backup)
            try:
                fix_result = executor.fix_issues(root, result.fixable_issues())
            except SentinelError as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(2)
            CLIAppFactory.print_fix_result(fix_result)
            sys.exit(1 if fix_result.failed else 0)

        @app.command()
        def preview(
            path: Path = typer.Argument(Path("."), help="Project directory to preview fixes for"),  # noqa: B008
        ) -> None:
            """Show what `fix` would change. Never writes to disk."""
            root, result = _validate(path)
            fix_preview = deps.orchestrator.preview_fixes(root, result.fixable_issues())
            for change in fix_preview.changes:
                print(f"{os.path.relpath(change.file, root)}: {change.preview}")
            print(f"\n{len(fix_preview.changes)} changes previewed")

        @app.command()
        def gate(
            template_path: Path = typer.Argument(..., help="Template file or directory"),  # noqa: B008
            node_runtime: str | None = typer.Option(None, "--node-runtime"),
            node_types: str | None = typer.Option(None, "--node-types"),
            build_tool: str | None = typer.Option(None, "--build-tool"),
            image: str | None = typer.Option(None, "--image"),
            go_version: str | None = typer.Option(None, "--go"),
        ) -> None:
            """Check template versions before generation. Exits 1 when generation is blocked."""
            deps.telemetry.handshake()
            config = CLIAppFactory.build_project_config(
                node_runtime, node_types, build_tool, image, go_version
            )
            target = str(template_path)
            if template_path.is_dir():
                result = deps.pre_generation_gate.validate_directory(config, target)
            else:
                result = deps.pre_generation_gate.validate(config, target)
            CLIAppFactory.print_gate_result(result)
            sys.exit(0 if result.valid else 1)

        return app
