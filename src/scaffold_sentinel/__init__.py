"""Rule-driven validation and remediation for generated project scaffolds."""

__version__ = "0.1.0"
