"""YAML syntax checker (multi-document aware)."""

from pathlib import Path

import yaml

from scaffold_sentinel.domain.entities import (
    ConfigIssue,
    ConfigValidationResult,
    ConfigValidationSummary,
)
from scaffold_sentinel.domain.protocols import SyntaxCheckerProtocol


class YamlSyntaxChecker(SyntaxCheckerProtocol):
    """Parses *.yaml / *.yml with yaml.safe_load_all."""

    def supports(self, file_name: str) -> bool:
        return file_name.lower().endswith((".yaml", ".yml"))

    def validate(self, path: str) -> ConfigValidationResult:
        text = Path(path).read_text(encoding="utf-8")
        try:
            documents = list(yaml.safe_load_all(text))
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            issue = ConfigIssue(
                message=f"invalid YAML: {getattr(e, 'problem', None) or e}",
                line=mark.line + 1 if mark else 0,
                column=mark.column + 1 if mark else 0,
            )
            return ConfigValidationResult(
                valid=False,
                errors=(issue,),
                summary=ConfigValidationSummary(error_count=1),
            )
        count = sum(len(doc) for doc in documents if isinstance(doc, dict))
        return ConfigValidationResult(
            valid=True,
            summary=ConfigValidationSummary(total_properties=count, valid_properties=count),
        )
