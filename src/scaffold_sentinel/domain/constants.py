"""Enumerations and fixed thresholds shared across the engine."""

from enum import Enum


class Severity(str, Enum):
    """Issue severity. CRITICAL is a superset of ERROR for filtering purposes."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def at_least(self, other: "Severity") -> bool:
        """True when this severity is as severe as `other` or worse."""
        return self.rank >= other.rank

    @property
    def blocking(self) -> bool:
        """Errors and critical findings invalidate a result."""
        return self.at_least(Severity.ERROR)


_SEVERITY_RANK = {
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
    Severity.CRITICAL: 4,
}


class RuleCategory(str, Enum):
    STRUCTURE = "structure"
    DEPENDENCIES = "dependencies"
    SECURITY = "security"
    QUALITY = "quality"
    CONFIG = "config"


class FixAction(str, Enum):
    """File mutations a Fix can describe."""
    CREATE = "create"
    REPLACE = "replace"
    INSERT = "insert"
    DELETE = "delete"
    RENAME = "rename"
    MOVE = "move"
    CHMOD = "chmod"  # documented only, never executed against the OS


LINE_ACTIONS = frozenset({FixAction.REPLACE, FixAction.INSERT, FixAction.DELETE})


class Ecosystem(str, Enum):
    NPM = "npm"
    GO = "go"
    PYPI = "pypi"


class DependencyClass(str, Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"
    PEER = "peer"
    DIRECT = "direct"
    INDIRECT = "indirect"


class VulnerabilitySeverity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _VULNERABILITY_RANK[self]


_VULNERABILITY_RANK = {
    VulnerabilitySeverity.CRITICAL: 5,
    VulnerabilitySeverity.HIGH: 4,
    VulnerabilitySeverity.MODERATE: 3,
    VulnerabilitySeverity.LOW: 2,
    VulnerabilitySeverity.INFO: 1,
}


class RuleId(str, Enum):
    """Closed set of rule ids known to the engine and its fix strategies."""
    README_REQUIRED = "structure.readme.required"
    LICENSE_REQUIRED = "structure.license.required"
    GITIGNORE_RECOMMENDED = "structure.gitignore.recommended"
    MANIFEST_SYNTAX = "config.manifest.syntax"
    SECRET_DETECTION = "security.secrets"
    PERMISSIONS = "security.permissions"
    NAMING_CONVENTIONS = "quality.naming.conventions"
    TEMPLATE_EXTENSION = "template.file.extension"
    DEPENDENCY_FORMAT = "dependencies.version.format"
    DEPENDENCY_CONFLICT = "dependencies.conflict"
    DEPENDENCY_VULNERABILITY = "dependencies.vulnerability"
    VERSION_COMPATIBILITY = "config.version.compatibility"
    GENERIC_CREATE_MISSING_FILE = "generic.create_missing_file"
    GENERIC_FIX_NAMING = "generic.fix_naming"


# Version validation codes
INVALID_VERSION_FORMAT = "INVALID_VERSION_FORMAT"
INVALID_DOCKER_IMAGE = "INVALID_DOCKER_IMAGE"
VERSION_COMPATIBILITY_MISMATCH = "VERSION_COMPATIBILITY_MISMATCH"
VERSION_PARSE_ERROR = "VERSION_PARSE_ERROR"
NON_LTS_VERSION = "NON_LTS_VERSION"
RUNTIME_VERSION_MISMATCH = "RUNTIME_VERSION_MISMATCH"
TYPES_VERSION_MISMATCH = "TYPES_VERSION_MISMATCH"

# Types package may lead the runtime by at most this many majors.
TYPES_MAJOR_LEAD = 2

NODE_MINIMUM_LTS_MAJOR = 18
GO_MINIMUM_TEMPLATE_VERSION = (1, 20)
GO_MINIMUM_MODULE_VERSION = (1, 18)

BACKUP_SUFFIX = ".backup"
TEMPLATE_SUFFIX = ".tmpl"
PERMISSION_TARGET_MODE = "644"

LOOKUP_TIMEOUT_SECONDS = 30.0
LOOKUP_CACHE_TTL_SECONDS = 24 * 60 * 60

DEFAULT_EXCLUDED_DIRS = (
    ".git",
    "node_modules",
    "vendor",
    "dist",
    "build",
    "__pycache__",
    ".venv",
)
