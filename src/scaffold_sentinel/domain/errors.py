"""Exception taxonomy for the validation and remediation engine."""


class SentinelError(Exception):
    """Base class for every error raised by scaffold_sentinel."""


class VersionParseError(SentinelError, ValueError):
    """A version string could not be parsed."""


class RuleError(SentinelError):
    pass


class DuplicateRuleError(RuleError):
    def __init__(self, rule_id: str) -> None:
        super().__init__(f"rule with ID {rule_id} already exists")
        self.rule_id = rule_id


class RuleNotFoundError(RuleError, KeyError):
    def __init__(self, rule_id: str) -> None:
        super().__init__(f"rule with ID {rule_id} not found")
        self.rule_id = rule_id

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidRuleError(RuleError, ValueError):
    pass


class PathTraversalError(SentinelError):
    """A path is malformed or escapes the project root."""


class ProjectRootError(SentinelError):
    """The project root does not exist or cannot be read."""


class FixGenerationError(SentinelError):
    """A fix strategy handler failed to build a fix."""


class FixApplicationError(SentinelError):
    """Applying a fix to the filesystem failed."""


class AlreadyExistsError(FixApplicationError):
    pass


class InvalidLineError(FixApplicationError):
    def __init__(self, line: int, line_count: int) -> None:
        super().__init__(f"invalid line number: {line} (file has {line_count} lines)")
        self.line = line
        self.line_count = line_count


class UnsupportedFixActionError(FixApplicationError):
    pass


class BackupError(FixApplicationError):
    pass


class VulnerabilityLookupError(SentinelError):
    """The vulnerability source could not answer a lookup."""


class ValidationCancelledError(SentinelError):
    pass


class GenerationBlockedError(SentinelError):
    """Pre-generation validation rejected a template."""

    def __init__(self, template_path: str, errors: list[str]) -> None:
        joined = "; ".join(errors)
        super().__init__(f"generation blocked for {template_path}: {joined}")
        self.template_path = template_path
        self.errors = errors
