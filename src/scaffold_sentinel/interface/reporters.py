"""Report renderers for validation results."""

import json
from typing import Any

from scaffold_sentinel.domain.entities import ValidationResult
from scaffold_sentinel.domain.protocols import ReportRendererProtocol


class JsonReportRenderer(ReportRendererProtocol):
    """Structured-data rendering of a ValidationResult. Other formats live elsewhere."""

    FORMATS = ("json",)

    def render(
        self, result: ValidationResult, format: str = "json", options: dict[str, Any] | None = None
    ) -> bytes:
        if format not in self.FORMATS:
            raise ValueError(f"unsupported report format: {format}")
        options = options or {}
        payload = result.to_dict()
        if options.get("fixable_only"):
            payload["issues"] = [i for i in payload["issues"] if i["fixable"]]
        return json.dumps(payload, indent=options.get("indent", 2)).encode("utf-8")
