"""Load .swiftstyle.toml or [tool.swiftstyle] from pyproject.toml. Infrastructure I/O only."""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from swift_style_linter.domain.exceptions import ConfigurationError

CONFIG_FILE_NAME = ".swiftstyle.toml"
TOOL_SECTION = "swiftstyle"


class ConfigFileLoader:
    """
    Finds and reads the linter configuration.

    An explicit path wins. Otherwise the search walks up from the working
    directory; in each directory `.swiftstyle.toml` is preferred over a
    pyproject.toml that carries a [tool.swiftstyle] table.
    """

    @staticmethod
    def load_config_from_fs(
        explicit_path: Optional[str] = None, start: Optional[Path] = None
    ) -> tuple[dict[str, object], Optional[Path]]:
        """Return (config_dict, source_path); ({}, None) when nothing is found."""
        if explicit_path is not None:
            config_file = Path(explicit_path)
            if not config_file.is_file():
                raise ConfigurationError(f"configuration file not found: {explicit_path}")
            return (ConfigFileLoader._read(config_file), config_file)

        current_path = (start or Path.cwd()).resolve()
        while True:
            dedicated = current_path / CONFIG_FILE_NAME
            if dedicated.is_file():
                return (ConfigFileLoader._read(dedicated), dedicated)
            pyproject = current_path / "pyproject.toml"
            if pyproject.is_file():
                section = ConfigFileLoader._read(pyproject).get("tool", {})
                if isinstance(section, dict) and TOOL_SECTION in section:
                    return (ConfigFileLoader._table(section[TOOL_SECTION], pyproject), pyproject)
            if current_path.parent == current_path:
                return ({}, None)
            current_path = current_path.parent

    @staticmethod
    def _read(config_file: Path) -> dict[str, object]:
        try:
            with config_file.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"invalid TOML in {config_file}: {exc}") from exc
        except OSError as exc:
            raise ConfigurationError(f"cannot read {config_file}: {exc}") from exc
        logging.debug("Loaded configuration from %s", config_file)
        return data

    @staticmethod
    def _table(value: object, source: Path) -> dict[str, object]:
        if not isinstance(value, dict):
            raise ConfigurationError(f"[tool.{TOOL_SECTION}] in {source} must be a table")
        return value
