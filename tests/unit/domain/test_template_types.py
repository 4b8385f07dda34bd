"""Unit tests for template ecosystem classification."""

import pytest

from scaffold_sentinel.domain.template_types import (
    BACKEND,
    FRONTEND,
    classify_template,
    is_backend_template,
    is_frontend_template,
)


@pytest.mark.parametrize(
    "path",
    [
        "templates/frontend/nextjs-app/package.json.tmpl",
        "templates/frontend/nextjs-app/next.config.js.tmpl",
        "templates/frontend/nextjs-app/tsconfig.json.tmpl",
    ],
)
def test_frontend_paths(path: str) -> None:
    """Next.js manifests and config files are frontend only."""
    assert is_frontend_template(path)
    assert not is_backend_template(path)


@pytest.mark.parametrize(
    "path",
    ["templates/backend/go-gin/main.go.tmpl", "templates/backend/go-gin/go.mod.tmpl"],
)
def test_backend_paths(path: str) -> None:
    """Go sources and go.mod are backend only."""
    assert is_backend_template(path)
    assert not is_frontend_template(path)


@pytest.mark.parametrize(
    "path",
    [
        "templates/infrastructure/docker/Dockerfile.tmpl",
        "templates/infrastructure/kubernetes/deployment.yaml.tmpl",
    ],
)
def test_neither(path: str) -> None:
    """Infrastructure templates belong to no ecosystem."""
    assert classify_template(path) == []


def test_both_ecosystems_can_match() -> None:
    """Classification is not exclusive; order follows the ecosystem table."""
    assert classify_template("templates/frontend/backend/app.tsx") == [FRONTEND, BACKEND]


def test_windows_separators() -> None:
    """Backslash paths classify like forward-slash ones."""
    assert is_frontend_template("templates\\frontend\\app\\index.js.tmpl")
