"""Defines a global set of configurations that define how residual logging operates."""

from __future__ import annotations

# Standard Library Imports
import os
from configparser import ConfigParser
from configparser import Error as ConfigError
from importlib import resources
from logging import CRITICAL, DEBUG, ERROR, INFO, NOTSET, WARNING
from pathlib import Path
from typing import TYPE_CHECKING

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from typing import Any, Final


CONFIG_ENV_VARIABLE: str = "ODRESIDUALS_BEHAVIOR_CONFIG"
"""``str``: environment variable pointing to a custom behavior config file."""

LOGGING_LEVELS: dict[str, int] = {
    "CRITICAL": CRITICAL,
    "ERROR": ERROR,
    "WARNING": WARNING,
    "INFO": INFO,
    "DEBUG": DEBUG,
    "NOTSET": NOTSET,
}
"""``dict``: logging level names accepted in config files, case-insensitive."""


class SubConfig:
    """One section of the configuration, with options exposed as attributes.

    Options are accessed as `BehavioralConfig.section.option`, rather than
    `BehavioralConfig["section"]["option"]`.
    """

    def __init__(self, section: str, options: dict[str, Any]):
        """Store the parsed `options` of `section`."""
        self.section = section
        for option, value in options.items():
            setattr(self, option, value)

    def __repr__(self) -> str:
        """Show the section name and its options."""
        options = {key: value for key, value in vars(self).items() if key != "section"}
        return f"SubConfig({self.section!r}, {options!r})"


class BehavioralConfig:
    """Singleton, config settings class."""

    DEFAULT_CONFIG_FILE: Final[str] = "default_behavior.config"

    OPTIONS: Final[dict[str, dict[str, tuple[str, Any]]]] = {
        "logging": {
            "OutputLocation": ("str", "stdout"),
            "Level": ("level", DEBUG),
            "MaxFileSize": ("int", 1048576),
            "MaxFileCount": ("int", 50),
            "AllowMultipleHandlers": ("bool", False),
        },
        "residuals": {
            "OutputDirectory": ("str", "."),
            "Encoding": ("str", "utf-8"),
        },
    }
    """``dict``: ``(type, default)`` of each option, per section."""

    __shared_inst: BehavioralConfig | None = None

    def __init__(self, config_file_path: str | None = None):
        """Initialize the configuration object.

        Args:
            config_file_path (``str``, optional): custom config file. The packaged default file is
                read if ``None``. Options missing from the file, or the whole file if it does not
                exist, take their default value.
        """
        self._parser = ConfigParser()

        if config_file_path is None:
            res = resources.files("odresiduals.common").joinpath(self.DEFAULT_CONFIG_FILE)
            with (
                resources.as_file(res) as res_filepath,
                open(res_filepath, encoding="utf-8") as config_file,
            ):
                self._parser.read_file(config_file)

        elif Path(config_file_path).exists():
            with open(config_file_path, encoding="utf-8") as config_file:
                self._parser.read_file(config_file)

        getters = {
            "str": self._parser.get,
            "int": self._parser.getint,
            "bool": self._parser.getboolean,
            "level": self._getLoggingLevel,
        }
        for section, options in self.OPTIONS.items():
            values = {}
            for option, (option_type, default) in options.items():
                try:
                    values[option] = getters[option_type](section, option)
                except ConfigError:
                    values[option] = default

            setattr(self, section, SubConfig(section, values))

        BehavioralConfig.__shared_inst = self

    def _getLoggingLevel(self, section: str, option: str) -> int:
        """Return the logging level named by `option`, ``NOTSET`` if unknown."""
        return LOGGING_LEVELS.get(self._parser.get(section, option).upper(), NOTSET)

    @classmethod
    def getConfig(cls, config_file_path: str | None = None) -> BehavioralConfig:
        """Return a reference to the singleton shared config.

        If no path is given, the file named by :data:`.CONFIG_ENV_VARIABLE` is used when set.
        """
        if cls.__shared_inst is None:
            if not config_file_path:
                config_file_path = os.environ.get(CONFIG_ENV_VARIABLE)

            cls.__shared_inst = BehavioralConfig(config_file_path=config_file_path or None)

        return cls.__shared_inst

    @classmethod
    def resetConfig(cls) -> None:
        """Drop the shared config so the next :meth:`.getConfig` call re-reads it."""
        cls.__shared_inst = None
