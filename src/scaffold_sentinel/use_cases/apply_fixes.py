"""Use Case: turn fixable issues into file mutations, with backups and dry-run preview."""

import os
from dataclasses import replace
from typing import Iterable

from scaffold_sentinel.domain.constants import BACKUP_SUFFIX, FixAction
from scaffold_sentinel.domain.entities import (
    FileChange,
    Fix,
    FixFailure,
    FixPreview,
    FixResult,
    ValidationIssue,
)
from scaffold_sentinel.domain.errors import (
    AlreadyExistsError,
    BackupError,
    FixApplicationError,
    InvalidLineError,
    PathTraversalError,
    UnsupportedFixActionError,
)
from scaffold_sentinel.domain.fixes import FixStrategyRegistry
from scaffold_sentinel.domain.protocols import FileSystemProtocol, TelemetryPort


class AutoFixExecutor:
    """
    Resolves, backs up and applies fixes one issue at a time.

    A problem with one issue is recorded (skipped or failed) and never stops
    the batch. Only a target path outside the project root aborts the call.
    """

    def __init__(
        self,
        filesystem: FileSystemProtocol,
        strategies: FixStrategyRegistry | None = None,
        telemetry: TelemetryPort | None = None,
        dry_run: bool = False,
        backup_enabled: bool = True,
        project_root: str | None = None,
    ) -> None:
        self.filesystem = filesystem
        self.strategies = strategies or FixStrategyRegistry.default()
        self.telemetry = telemetry
        self.dry_run = dry_run
        self.backup_enabled = backup_enabled
        self.project_root = project_root

    def set_dry_run(self, dry_run: bool) -> None:
        self.dry_run = dry_run

    def set_backup_enabled(self, enabled: bool) -> None:
        self.backup_enabled = enabled

    @staticmethod
    def get_fixable_issues(issues: Iterable[ValidationIssue]) -> list[ValidationIssue]:
        return [issue for issue in issues if issue.fixable]

    def fix_issues(self, target_path: str, issues: Iterable[ValidationIssue]) -> FixResult:
        """Raises PathTraversalError when target_path escapes the project root."""
        root = self.filesystem.validate_path(target_path, self.project_root)
        result = FixResult()
        modified: set[str] = set()
        for issue in self.get_fixable_issues(issues):
            self._fix_one(root, issue, result, modified)
        result.total_fixes = result.applied_fixes + result.failed_fixes + result.skipped_fixes
        result.files_modified = len(modified)
        if self.telemetry:
            mode = "dry-run" if self.dry_run else "apply"
            self.telemetry.step(
                f"fixes mode={mode} applied={result.applied_fixes} "
                f"failed={result.failed_fixes} skipped={result.skipped_fixes} "
                f"files_modified={result.files_modified}"
            )
        return result

    def _fix_one(
        self,
        root: str,
        issue: ValidationIssue,
        result: FixResult,
        modified: set[str],
    ) -> None:
        strategy = self.strategies.resolve(issue)
        if strategy is None:
            self._skip(result, _skip_fix(issue, f"No fix strategy available for rule: {issue.rule}"))
            return
        try:
            fix = strategy.handler(issue)
        except Exception as e:
            failed = Fix(
                id=f"failed_{issue.rule}",
                type="failed",
                description=f"Failed to generate fix for rule: {issue.rule}",
                file=issue.file,
            )
            self._fail(result, failed, str(e))
            return
        if fix is None:
            self._skip(result, _skip_fix(issue, f"No fix generated for rule: {issue.rule}"))
            return
        fix = self._anchor(root, fix)

        if self.dry_run:
            result.applied.append(fix)
            self._step(f"fix={fix.id} status=simulated action={_action_name(fix)}")
            return
        if fix.action is FixAction.CHMOD:
            self._skip(result, fix, f"permission change documented, mode {fix.content} not applied")
            return
        try:
            self.apply_fix(fix, root)
        except (FixApplicationError, PathTraversalError, OSError) as e:
            self._fail(result, fix, str(e))
            return
        result.applied.append(fix)
        modified.add(fix.file)
        self._step(f"fix={fix.id} status=applied file={fix.file}")

    def _anchor(self, root: str, fix: Fix) -> Fix:
        """Relative paths, including rename and move destinations, are taken from the fix root."""
        if not os.path.isabs(fix.file):
            fix = replace(fix, file=os.path.join(root, fix.file))
        if fix.action in (FixAction.RENAME, FixAction.MOVE) and not os.path.isabs(fix.content):
            fix = replace(fix, content=os.path.join(root, fix.content))
        return fix

    def apply_fix(self, fix: Fix, root: str | None = None) -> None:
        """
        Perform one fix against the filesystem.

        Either the whole mutation happens or the target is left untouched.
        """
        confined_root = root or self.project_root
        target = self.filesystem.validate_path(fix.file, confined_root)
        if fix.action is FixAction.CREATE:
            if self.filesystem.exists(target):
                raise AlreadyExistsError(f"file already exists: {target}")
            self.filesystem.write_text(target, fix.content)
            return
        if fix.action not in _MUTATORS:
            raise UnsupportedFixActionError(f"unsupported fix action: {_action_name(fix)}")
        if not self.filesystem.is_file(target):
            raise FixApplicationError(f"file does not exist: {target}")
        destination = ""
        if fix.action in (FixAction.RENAME, FixAction.MOVE):
            destination = self.filesystem.validate_path(fix.content, confined_root)
            if self.filesystem.exists(destination):
                raise AlreadyExistsError(f"destination already exists: {destination}")
        else:
            lines = self.filesystem.read_text(target).split("\n")
            _check_line(fix, len(lines))
        if self.backup_enabled:
            self._backup(target)
        _MUTATORS[fix.action](self, fix, target, destination)

    def _backup(self, target: str) -> None:
        try:
            self.filesystem.copy_file(target, target + BACKUP_SUFFIX)
        except OSError as e:
            raise BackupError(f"failed to create backup of {target}: {e}") from e

    def _rewrite_lines(self, fix: Fix, target: str, destination: str) -> None:
        lines = self.filesystem.read_text(target).split("\n")
        index = fix.line - 1
        if fix.action is FixAction.REPLACE:
            lines[index] = fix.content
        elif fix.action is FixAction.INSERT:
            lines.insert(index, fix.content)
        else:
            del lines[index]
        self.filesystem.write_text(target, "\n".join(lines))

    def _rename(self, fix: Fix, target: str, destination: str) -> None:
        self.filesystem.rename(target, destination)

    def _move(self, fix: Fix, target: str, destination: str) -> None:
        self.filesystem.make_dirs(os.path.dirname(destination))
        self.filesystem.rename(target, destination)

    def preview_fixes(self, target_path: str, issues: Iterable[ValidationIssue]) -> FixPreview:
        """Dry-run fix_issues() plus one FileChange per simulated fix. Never writes."""
        previous = self.dry_run
        self.dry_run = True
        try:
            result = self.fix_issues(target_path, issues)
        finally:
            self.dry_run = previous
        preview = FixPreview(
            applied=result.applied,
            failed=result.failed,
            skipped=result.skipped,
            total_fixes=result.total_fixes,
            files_modified=result.files_modified,
        )
        preview.changes = [self.describe_change(fix) for fix in result.applied]
        return preview

    def describe_change(self, fix: Fix) -> FileChange:
        """Best-effort text for one fix, using the file's current line count."""
        before = self._line_count(fix.file) if fix.action is not FixAction.CREATE else 0
        action = fix.action
        if action is FixAction.CREATE:
            after = len(fix.content.split("\n"))
            text = f"Create file with {after} lines"
        elif action is FixAction.REPLACE:
            after, text = before, f"Replace line {fix.line}: {fix.content}"
        elif action is FixAction.INSERT:
            after, text = before + 1, f"Insert at line {fix.line}: {fix.content}"
        elif action is FixAction.DELETE:
            after, text = max(before - 1, 0), f"Delete line {fix.line}"
        elif action is FixAction.RENAME:
            after, text = before, f"Rename to: {fix.content}"
        elif action is FixAction.MOVE:
            after, text = before, f"Move to: {fix.content}"
        elif action is FixAction.CHMOD:
            after, text = before, f"Change permissions to: {fix.content}"
        else:
            after, text = before, fix.description
        return FileChange(
            file=fix.file, action=action, preview=text, lines_before=before, lines_after=after
        )

    def _line_count(self, path: str) -> int:
        try:
            return len(self.filesystem.read_text(path).split("\n"))
        except (OSError, UnicodeDecodeError):
            return 0

    def _skip(self, result: FixResult, fix: Fix, reason: str | None = None) -> None:
        result.skipped.append(fix)
        if self.telemetry:
            self.telemetry.warning(
                f"fix={fix.id} status=skipped reason={reason or fix.description}"
            )

    def _fail(self, result: FixResult, fix: Fix, error: str) -> None:
        result.failed.append(FixFailure(fix=fix, error=error))
        if self.telemetry:
            self.telemetry.error(f"fix={fix.id} status=failed reason={error}")

    def _step(self, message: str) -> None:
        if self.telemetry:
            self.telemetry.step(message)


_MUTATORS = {
    FixAction.REPLACE: AutoFixExecutor._rewrite_lines,
    FixAction.INSERT: AutoFixExecutor._rewrite_lines,
    FixAction.DELETE: AutoFixExecutor._rewrite_lines,
    FixAction.RENAME: AutoFixExecutor._rename,
    FixAction.MOVE: AutoFixExecutor._move,
}


def _check_line(fix: Fix, line_count: int) -> None:
    upper = line_count + 1 if fix.action is FixAction.INSERT else line_count
    if not 1 <= fix.line <= upper:
        raise InvalidLineError(fix.line, line_count)


def _skip_fix(issue: ValidationIssue, description: str) -> Fix:
    return Fix(id=f"skip_{issue.rule}", type="skip", description=description, file=issue.file)


def _action_name(fix: Fix) -> str:
    return fix.action.value if fix.action else "none"
