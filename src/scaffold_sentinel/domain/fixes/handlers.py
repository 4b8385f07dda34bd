"""Built-in fix handlers. Each builds a Fix from one issue and never touches disk."""

import os

from scaffold_sentinel.domain.constants import (
    PERMISSION_TARGET_MODE,
    TEMPLATE_SUFFIX,
    FixAction,
    RuleId,
)
from scaffold_sentinel.domain.entities import Fix, ValidationIssue
from scaffold_sentinel.domain.fixes import FallbackRule, FixStrategy

README_CONTENT = """# Project Name

## Description

Brief description of your project.

## Installation

Instructions on how to install and set up your project.

## Usage

Examples of how to use your project.

## Contributing

Guidelines for contributing to your project.

## License

Information about the project license.
"""

LICENSE_CONTENT = """MIT License

Copyright (c) 2024 Project Name

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

GITIGNORE_CONTENT = """# Dependencies
node_modules/
vendor/

# Build outputs
dist/
build/
*.exe
*.dll
*.so
*.dylib

# Logs
*.log
logs/

# Environment variables
.env
.env.local
.env.*.local

# IDE files
.vscode/
.idea/
*.swp
*.swo

# OS generated files
.DS_Store
.DS_Store?
._*
.Spotlight-V100
.Trashes
ehthumbs.db
Thumbs.db

# Temporary files
*.tmp
*.temp
"""

GENERATED_NOTICE = "This file was automatically generated."


def _sibling(issue: ValidationIssue, file_name: str) -> str:
    return os.path.join(os.path.dirname(issue.file), file_name)


def create_readme(issue: ValidationIssue) -> Fix:
    return Fix(
        id=f"create_readme_{issue.file}",
        type="create_file",
        description="Create README.md file",
        file=_sibling(issue, "README.md"),
        action=FixAction.CREATE,
        content=README_CONTENT,
    )


def create_license(issue: ValidationIssue) -> Fix:
    return Fix(
        id=f"create_license_{issue.file}",
        type="create_file",
        description="Create LICENSE file",
        file=_sibling(issue, "LICENSE"),
        action=FixAction.CREATE,
        content=LICENSE_CONTENT,
    )


def create_gitignore(issue: ValidationIssue) -> Fix:
    return Fix(
        id=f"create_gitignore_{issue.file}",
        type="create_file",
        description="Create .gitignore file",
        file=_sibling(issue, ".gitignore"),
        action=FixAction.CREATE,
        content=GITIGNORE_CONTENT,
    )


def fix_naming(issue: ValidationIssue) -> Fix | None:
    """Spaces in the file name become underscores. Other naming issues are declined."""
    if "space" not in issue.message:
        return None
    new_name = os.path.basename(issue.file).replace(" ", "_")
    return Fix(
        id=f"fix_naming_{issue.file}",
        type="rename_file",
        description=f"Rename file to follow naming conventions: {new_name}",
        file=issue.file,
        action=FixAction.RENAME,
        content=os.path.join(os.path.dirname(issue.file), new_name),
    )


def add_template_extension(issue: ValidationIssue) -> Fix:
    return Fix(
        id=f"fix_template_ext_{issue.file}",
        type="rename_file",
        description=f"Add {TEMPLATE_SUFFIX} extension to template file",
        file=issue.file,
        action=FixAction.RENAME,
        content=issue.file + TEMPLATE_SUFFIX,
    )


def normalize_permissions(issue: ValidationIssue) -> Fix:
    return Fix(
        id=f"fix_permissions_{issue.file}",
        type="fix_permissions",
        description="Fix file permissions to be more secure",
        file=issue.file,
        action=FixAction.CHMOD,
        content=PERMISSION_TARGET_MODE,
    )


def create_missing_file(issue: ValidationIssue) -> Fix:
    """Placeholder content picked by extension. Needs confirmation."""
    base = os.path.basename(issue.file)
    ext = os.path.splitext(base)[1].lower()
    if ext == ".md":
        content = f"# {base}\n\n{GENERATED_NOTICE}\n"
    elif ext == ".txt":
        content = f"{GENERATED_NOTICE}\n"
    elif ext == ".json":
        content = "{}\n"
    else:
        content = "# This file was automatically generated\n"
    return Fix(
        id=f"create_missing_{issue.file}",
        type="create_file",
        description=f"Create missing file: {base}",
        file=issue.file,
        action=FixAction.CREATE,
        content=content,
        automatic=False,
    )


def mentions_missing_file(issue: ValidationIssue) -> bool:
    return "missing" in issue.message and "file" in issue.message


def mentions_spaces_in_name(issue: ValidationIssue) -> bool:
    return "space" in issue.message and "name" in issue.message


def default_strategies() -> list[FixStrategy]:
    return [
        FixStrategy(RuleId.README_REQUIRED.value, "Create README",
                    "Creates a basic README.md file", create_readme),
        FixStrategy(RuleId.LICENSE_REQUIRED.value, "Create LICENSE",
                    "Creates a basic LICENSE file", create_license),
        FixStrategy(RuleId.NAMING_CONVENTIONS.value, "Fix Naming Conventions",
                    "Fixes file and directory naming issues", fix_naming),
        FixStrategy(RuleId.TEMPLATE_EXTENSION.value, "Add Template Extension",
                    "Adds .tmpl extension to template files", add_template_extension),
        FixStrategy(RuleId.GITIGNORE_RECOMMENDED.value, "Create Gitignore",
                    "Creates a basic .gitignore file", create_gitignore),
        FixStrategy(RuleId.PERMISSIONS.value, "Fix File Permissions",
                    "Fixes overly permissive file permissions", normalize_permissions),
        FixStrategy(RuleId.GENERIC_CREATE_MISSING_FILE.value, "Create Missing File",
                    "Creates a missing file with basic content", create_missing_file,
                    automatic=False),
        FixStrategy(RuleId.GENERIC_FIX_NAMING.value, "Fix Naming",
                    "Fixes naming convention issues", fix_naming),
    ]


def default_fallbacks() -> list[FallbackRule]:
    return [
        FallbackRule(mentions_missing_file, RuleId.GENERIC_CREATE_MISSING_FILE.value),
        FallbackRule(mentions_spaces_in_name, RuleId.GENERIC_FIX_NAMING.value),
    ]
