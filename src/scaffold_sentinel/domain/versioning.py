"""
Version comparison helpers.

Pure functions over version strings as they appear in manifests
(">=20.0.0", "^4.17.15", "v1.9.0", "1.22"). No state, no I/O.
"""

import re

from scaffold_sentinel.domain.errors import VersionParseError

_COMPARATOR_PREFIX = re.compile(r"^\s*(>=|<=|>|<|~=|==|!=|~|\^|=)*\s*")
_SEMVER_CORE = re.compile(
    r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)
_FIRST_TRIPLE = re.compile(r"\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?")

SemverKey = tuple[int, int, int, tuple[tuple[int, int | str], ...]]


def strip_comparator(version: str) -> str:
    """Remove a leading range operator (>=, >, <=, <, ~, ^, ...)."""
    return _COMPARATOR_PREFIX.sub("", version or "", count=1).strip()


def clean_version(version: str) -> str:
    """Comparator and leading 'v' removed: '^v4.17.15' -> '4.17.15'."""
    cleaned = strip_comparator(version)
    if cleaned[:1] in ("v", "V") and cleaned[1:2].isdigit():
        cleaned = cleaned[1:]
    return cleaned


def extract_major_version(version: str) -> int:
    """
    Major component of a version or range.

    extract_major_version(">=5.2.1") == extract_major_version("5.2.1") == 5.
    Raises VersionParseError on empty input or a non-numeric leading segment.
    """
    if not version or not version.strip():
        raise VersionParseError("invalid version format: empty version")
    head = strip_comparator(version).split(".")[0]
    if not (head.isascii() and head.isdigit()):
        raise VersionParseError(f"invalid major version: {head!r} in {version!r}")
    return int(head)


def resolved_version(declared: str) -> str | None:
    """
    Best-effort concrete version behind a declaration.

    '^4.17.15' -> '4.17.15', 'v1.9.0' -> '1.9.0', 'latest' -> None.
    """
    cleaned = clean_version(declared)
    if _SEMVER_CORE.match(cleaned):
        return cleaned
    match = _FIRST_TRIPLE.search(declared or "")
    return match.group(0) if match else None


def parse_version(version: str) -> SemverKey:
    """Sortable key for a version. Missing minor/patch count as 0."""
    cleaned = clean_version(version)
    match = _SEMVER_CORE.match(cleaned)
    if not match:
        raise VersionParseError(f"invalid semantic version: {version!r}")
    major, minor, patch, pre = match.groups()
    pre_key: tuple[tuple[int, int | str], ...]
    if pre:
        # A release sorts after any of its pre-releases.
        pre_key = tuple(
            (0, int(part)) if part.isdigit() else (1, part) for part in pre.split(".")
        )
    else:
        pre_key = ((2, 0),)
    return (int(major), int(minor or 0), int(patch or 0), pre_key)


def compare_versions(left: str, right: str) -> int:
    """-1, 0 or 1, semantically."""
    a, b = parse_version(left), parse_version(right)
    if a == b:
        return 0
    return -1 if a < b else 1


def is_version_older(current: str, candidate: str, lexicographic: bool = False) -> bool:
    """
    True when `current` precedes `candidate`.

    `lexicographic=True` reproduces plain string ordering, under which
    "10.0.0" sorts before "9.0.0".
    """
    if lexicographic:
        return current < candidate
    try:
        return compare_versions(current, candidate) < 0
    except VersionParseError:
        return current < candidate


def is_at_least(version: str, minimum: str) -> bool:
    return compare_versions(version, minimum) >= 0


def is_breaking_update(current: str, latest: str) -> bool:
    """Major component differs."""
    return _major_text(current) != _major_text(latest)


def update_type(current: str, latest: str) -> str:
    return "major" if is_breaking_update(current, latest) else "minor"


def is_lts_major(major: int) -> bool:
    """Even majors are long-term-support releases."""
    return major % 2 == 0


def nearest_lts_major(major: int, minimum: int) -> int:
    """Closest even major at or below `major`, never below `minimum`."""
    candidate = major if is_lts_major(major) else major - 1
    return max(candidate, minimum)


def _major_text(version: str) -> str:
    return clean_version(version).split(".")[0]
