"""Load [tool.scaffold-sentinel] from pyproject.toml. Infrastructure I/O only."""

import logging
import tomllib
from pathlib import Path

logger = logging.getLogger(__name__)

TOOL_SECTION = "scaffold-sentinel"


class ConfigFileLoader:
    """Loads config from the nearest pyproject.toml."""

    @staticmethod
    def load_config_from_fs(start: str | None = None) -> tuple[dict[str, object], dict[str, object]]:
        """Walk up from `start` (default cwd). Returns (config_dict, tool_section)."""
        current_path = Path(start).resolve() if start else Path.cwd()
        empty: dict[str, object] = {}
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if not config_file.exists():
                continue
            try:
                with config_file.open("rb") as f:
                    data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning("Could not read %s: %s", config_file, e)
                return (empty, empty)
            tool_section = data.get("tool", {}) or {}
            config_dict = tool_section.get(TOOL_SECTION, {}) or tool_section.get(
                "scaffold_sentinel", {}
            )
            return (config_dict, tool_section)
        return (empty, empty)
