"""Which ecosystem a template path belongs to. Pure predicates over the path string."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TemplateEcosystem:
    """An ecosystem the pre-generation gate knows how to check."""
    key: str
    label: str
    indicators: tuple[str, ...]

    def matches(self, template_path: str) -> bool:
        normalized = template_path.replace("\\", "/")
        return any(indicator in normalized for indicator in self.indicators)


FRONTEND = TemplateEcosystem(
    key="nodejs",
    label="frontend",
    indicators=(
        "frontend/",
        "package.json",
        "next.config",
        "tsconfig.json",
        ".tsx",
        ".jsx",
        "nextjs",
    ),
)

BACKEND = TemplateEcosystem(
    key="go",
    label="backend",
    indicators=(
        "backend/",
        "go.mod",
        ".go.tmpl",
        "go-gin",
    ),
)

TEMPLATE_ECOSYSTEMS: tuple[TemplateEcosystem, ...] = (FRONTEND, BACKEND)


def is_frontend_template(template_path: str) -> bool:
    return FRONTEND.matches(template_path)


def is_backend_template(template_path: str) -> bool:
    return BACKEND.matches(template_path)


def classify_template(template_path: str) -> list[TemplateEcosystem]:
    """Every ecosystem whose indicators match; may be empty or hold both."""
    return [eco for eco in TEMPLATE_ECOSYSTEMS if eco.matches(template_path)]
