"""
Manifest parsers: package.json, go.mod and requirements.txt.

Each parser takes file text and returns a ManifestParse. Parsers never
raise on bad content; problems land in ManifestParse.errors.
"""

import json
import os
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from scaffold_sentinel.domain.constants import (
    GO_MINIMUM_MODULE_VERSION,
    DependencyClass,
    Ecosystem,
)
from scaffold_sentinel.domain.entities import DependencyRecord, NodeVersionConfig

GO_VERSION_PATTERN = re.compile(r"^1\.\d+(\.\d+)?$")
NPM_NAME_PATTERN = re.compile(r"^(@[a-z0-9-~][a-z0-9-._~]*/)?[a-z0-9-~][a-z0-9-._~]*$")
PYTHON_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9._-]*[a-zA-Z0-9])?$")
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)
PEP440_RELEASE_PATTERN = re.compile(
    r"^\d+(\.\d+)*((a|b|rc)\d+)?(\.post\d+)?(\.dev\d+)?(\.\*)?$"
)
_VERSION_TRIPLE = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
_NPM_RANGE_PREFIXES = ("^", "~", ">=", "<=", ">", "<")
_REQUIREMENT = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)(?:\[[^\]]*\])?\s*(==|>=|<=|~=|!=|>|<)\s*(\S+)")

PACKAGE_JSON_SECTIONS = (
    ("dependencies", DependencyClass.PRODUCTION),
    ("devDependencies", DependencyClass.DEVELOPMENT),
    ("peerDependencies", DependencyClass.PEER),
)


@dataclass
class ManifestParse:
    """What one manifest declared, plus anything wrong with it."""
    source_file: str
    ecosystem: Ecosystem
    records: list[DependencyRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    node_versions: NodeVersionConfig | None = None

    @property
    def valid(self) -> bool:
        return not self.errors and all(r.resolved_valid for r in self.records)


def is_semantic_version(version: str) -> bool:
    if version.startswith("v"):
        version = version[1:]
    return bool(SEMVER_PATTERN.match(version))


def is_npm_version(version: str) -> bool:
    """Ranges are accepted when the version they wrap is semver."""
    if version.startswith(_NPM_RANGE_PREFIXES):
        match = _VERSION_TRIPLE.search(version)
        if match:
            return is_semantic_version(match.group(0))
    return is_semantic_version(version)


def is_npm_package_name(name: str) -> bool:
    return bool(NPM_NAME_PATTERN.match(name))


def is_python_package_name(name: str) -> bool:
    return bool(PYTHON_NAME_PATTERN.match(name))


def go_version_error(version: str) -> str | None:
    """None when `version` is a supported `go` directive value."""
    if not GO_VERSION_PATTERN.match(version):
        return f"invalid Go version format: {version}"
    minor = int(version.split(".")[1])
    if (1, minor) < GO_MINIMUM_MODULE_VERSION:
        floor = ".".join(str(p) for p in GO_MINIMUM_MODULE_VERSION)
        return f"go version {version} is too old, consider upgrading to {floor}+"
    return None


def parse_package_json(text: str, source_file: str = "package.json") -> ManifestParse:
    result = ManifestParse(source_file=source_file, ecosystem=Ecosystem.NPM)
    try:
        pkg = json.loads(text)
    except json.JSONDecodeError as e:
        result.errors.append(f"invalid JSON in {source_file}: {e}")
        return result
    if not isinstance(pkg, dict):
        result.errors.append(f"{source_file} must contain a JSON object")
        return result

    for section, dependency_class in PACKAGE_JSON_SECTIONS:
        if section not in pkg:
            continue
        deps = pkg[section]
        if not isinstance(deps, dict):
            result.errors.append(f"{section} must be an object")
            continue
        for name, version in deps.items():
            if not isinstance(version, str):
                continue
            result.records.append(
                DependencyRecord(
                    name=name,
                    declared_version=version,
                    ecosystem=Ecosystem.NPM,
                    dependency_class=dependency_class,
                    source_file=source_file,
                    resolved_valid=is_npm_version(version),
                )
            )

    _check_package_structure(pkg, result)
    result.node_versions = _node_versions(pkg)
    return result


def _check_package_structure(pkg: dict[str, Any], result: ManifestParse) -> None:
    for required in ("name", "version"):
        if required not in pkg:
            result.errors.append(f"{result.source_file}: missing required field '{required}'")
    name = pkg.get("name")
    if isinstance(name, str) and not is_npm_package_name(name):
        result.errors.append(f"invalid NPM package name: {name}")
    version = pkg.get("version")
    if isinstance(version, str) and not is_npm_version(version):
        result.errors.append(f"invalid package version: {version}")


def _node_versions(pkg: dict[str, Any]) -> NodeVersionConfig | None:
    """engines.node paired with @types/node, when both are declared."""
    engines = pkg.get("engines")
    dev = pkg.get("devDependencies")
    runtime = engines.get("node") if isinstance(engines, dict) else None
    types = dev.get("@types/node") if isinstance(dev, dict) else None
    if isinstance(runtime, str) and isinstance(types, str):
        return NodeVersionConfig(runtime=runtime, types_package=types)
    return None


def parse_go_mod(text: str, source_file: str = "go.mod") -> ManifestParse:
    result = ManifestParse(source_file=source_file, ecosystem=Ecosystem.GO)
    in_require_block = False
    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line or line.startswith("module ") or line.startswith("//"):
            continue
        if line.startswith("go "):
            message = go_version_error(line[3:].strip())
            if message:
                result.errors.append(f"line {line_number}: {message}")
            continue
        if line.startswith("require ("):
            in_require_block = True
            continue
        if in_require_block and line == ")":
            in_require_block = False
            continue
        if in_require_block or line.startswith("require "):
            _parse_go_requirement(line, line_number, result)
    return result


def _parse_go_requirement(line: str, line_number: int, result: ManifestParse) -> None:
    body = line[len("require "):] if line.startswith("require ") else line
    indirect = "// indirect" in body
    parts = body.split("//", 1)[0].split()
    if not parts:
        return
    if len(parts) < 2:
        result.errors.append(f"line {line_number}: invalid require statement: {body}")
        return
    name, version = parts[0], parts[1]
    result.records.append(
        DependencyRecord(
            name=name,
            declared_version=version,
            ecosystem=Ecosystem.GO,
            dependency_class=DependencyClass.INDIRECT if indirect else DependencyClass.DIRECT,
            source_file=result.source_file,
            resolved_valid=is_semantic_version(version),
        )
    )


def parse_requirements(text: str, source_file: str = "requirements.txt") -> ManifestParse:
    result = ManifestParse(source_file=source_file, ecosystem=Ecosystem.PYPI)
    for raw_line in text.split("\n"):
        line = raw_line.split("#", 1)[0].split(";", 1)[0].strip()
        if not line or line.startswith("-"):
            continue
        match = _REQUIREMENT.match(line)
        if match:
            name, version = match.group(1), match.group(3).split(",", 1)[0]
            valid = is_python_package_name(name) and bool(
                PEP440_RELEASE_PATTERN.match(version)
            )
        else:
            name, version = line, "latest"
            valid = is_python_package_name(name)
        result.records.append(
            DependencyRecord(
                name=name,
                declared_version=version,
                ecosystem=Ecosystem.PYPI,
                dependency_class=DependencyClass.DIRECT,
                source_file=source_file,
                resolved_valid=valid,
            )
        )
    return result


MANIFEST_PARSERS: dict[str, Callable[[str, str], ManifestParse]] = {
    "package.json": parse_package_json,
    "go.mod": parse_go_mod,
    "requirements.txt": parse_requirements,
}


def parser_for(path: str) -> Callable[[str, str], ManifestParse] | None:
    return MANIFEST_PARSERS.get(os.path.basename(path))
