"""Security checks: hard-coded credentials and world-writable files."""

import os
import re

from scaffold_sentinel.domain.entities import ValidationIssue, ValidationRule
from scaffold_sentinel.use_cases.checks.structure import rule_issue

SECRET_PATTERNS: dict[str, re.Pattern[str]] = {
    "aws_access_key": re.compile(r"AKIA[0-9A-Z]{16}"),
    "private_key": re.compile(r"-----BEGIN [A-Z ]*PRIVATE KEY-----"),
    "api_key": re.compile(r"(?i)(api[_-]?key|apikey)\s*[:=]\s*['\"]?([a-zA-Z0-9]{20,})['\"]?"),
    "password": re.compile(r"(?i)(password|passwd|pwd|secret)\s*[:=]\s*['\"]?([^'\"\s]{8,})['\"]?"),
    "token": re.compile(r"(?i)(token|auth[_-]?token)\s*[:=]\s*['\"]?([a-zA-Z0-9]{20,})['\"]?"),
}

BINARY_EXTENSIONS = frozenset(
    {".exe", ".bin", ".jpg", ".jpeg", ".png", ".gif", ".pdf", ".zip", ".tar", ".gz", ".ico"}
)

WORLD_WRITABLE = 0o002


def mask_secret(secret: str) -> str:
    """Keep four characters at each end; short values are fully masked."""
    if len(secret) <= 8:
        return "*" * len(secret)
    return secret[:4] + "*" * (len(secret) - 8) + secret[-4:]


def is_scannable(path: str) -> bool:
    return os.path.splitext(path)[1].lower() not in BINARY_EXTENSIONS


def scan_for_secrets(rule: ValidationRule, path: str, text: str) -> list[ValidationIssue]:
    """One issue per pattern per line, with a 1-based line and column."""
    issues = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        for kind, pattern in SECRET_PATTERNS.items():
            match = pattern.search(line)
            if match is None:
                continue
            issues.append(
                rule_issue(
                    rule,
                    f"Possible hard-coded {kind.replace('_', ' ')}: {mask_secret(match.group(0))}",
                    file=path,
                    line=line_number,
                    column=match.start() + 1,
                )
            )
    return issues


def check_permissions(rule: ValidationRule, path: str, mode: int) -> list[ValidationIssue]:
    if not mode & WORLD_WRITABLE:
        return []
    return [rule_issue(rule, f"File is world-writable (mode {mode:o})", file=path)]
