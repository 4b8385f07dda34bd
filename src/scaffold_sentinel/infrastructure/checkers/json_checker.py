"""JSON syntax checker."""

import json
from pathlib import Path

from scaffold_sentinel.domain.entities import (
    ConfigIssue,
    ConfigValidationResult,
    ConfigValidationSummary,
)
from scaffold_sentinel.domain.protocols import SyntaxCheckerProtocol


class JsonSyntaxChecker(SyntaxCheckerProtocol):
    """Parses *.json files. Raises OSError when the file cannot be read."""

    def supports(self, file_name: str) -> bool:
        return file_name.lower().endswith(".json")

    def validate(self, path: str) -> ConfigValidationResult:
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            issue = ConfigIssue(message=f"invalid JSON: {e.msg}", line=e.lineno, column=e.colno)
            return ConfigValidationResult(
                valid=False,
                errors=(issue,),
                summary=ConfigValidationSummary(error_count=1),
            )
        count = len(data) if isinstance(data, dict) else 0
        return ConfigValidationResult(
            valid=True,
            summary=ConfigValidationSummary(total_properties=count, valid_properties=count),
        )
