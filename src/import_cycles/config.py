# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Configuration loading and validation for import cycle analysis."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from import_cycles.models import (
    DEFAULT_ALIAS_PREFIXES,
    DEFAULT_BARREL_NAMES,
    DEFAULT_EXTENSIONS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SOURCE_DIR,
    CycleDetectionOptions,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".import_cycles.yml"


class ConfigurationError(Exception):
    """Raised when configuration cannot be interpreted at all."""

    pass


class Config:
    """Configuration for import cycle analysis.

    Loads configuration from .import_cycles.yml with validation and defaults.
    Invalid values are logged and replaced by their defaults.
    """

    DEFAULTS: Dict[str, Any] = {
        "max_depth": DEFAULT_MAX_DEPTH,
        "report_all_cycles": False,
        "barrel_names": list(DEFAULT_BARREL_NAMES),
        "extensions": list(DEFAULT_EXTENSIONS),
        "alias_prefixes": list(DEFAULT_ALIAS_PREFIXES),
        "source_dir": DEFAULT_SOURCE_DIR,
        "ignore_patterns": ["**/*.test.*", "**/*.spec.*"],
        "allow_type_only_cycles": True,
    }

    _STRING_LISTS = ("barrel_names", "extensions", "alias_prefixes", "ignore_patterns")

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses
                .import_cycles.yml in the current directory.
        """
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        self.config_path = config_path
        self._config: Dict[str, Any] = {}
        self._load_config()

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "Config":
        """Build a configuration from an in-memory mapping.

        Raises:
            ConfigurationError: If values is not a dictionary.
        """
        if not isinstance(values, dict):
            raise ConfigurationError(f"Configuration must be a dictionary, got {type(values)}")

        config = cls.__new__(cls)
        config.config_path = None
        config._config = cls._fresh_defaults()
        config._validate_and_merge(values)
        return config

    @classmethod
    def _fresh_defaults(cls) -> Dict[str, Any]:
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in cls.DEFAULTS.items()
        }

    def _load_config(self) -> None:
        """Load and validate configuration from file."""
        self._config = self._fresh_defaults()

        if not self.config_path.exists():
            logger.info(f"Configuration file not found at {self.config_path}, using defaults")
            return

        try:
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning(
                f"Error parsing configuration file {self.config_path}: {e}, using defaults"
            )
            return
        except OSError as e:
            logger.warning(
                f"Cannot read configuration file {self.config_path}: {e}, using defaults"
            )
            return

        if loaded_config is None:
            logger.warning("Configuration file is empty, using defaults")
            return

        if not isinstance(loaded_config, dict):
            logger.warning(
                f"Configuration file must contain a YAML dictionary, "
                f"got {type(loaded_config)}, using defaults"
            )
            return

        self._validate_and_merge(loaded_config)

    def _validate_and_merge(self, loaded_config: Dict[str, Any]) -> None:
        """Validate loaded configuration and merge with defaults."""
        for key, value in loaded_config.items():
            if key not in self.DEFAULTS:
                logger.warning(f"Unknown configuration parameter '{key}', ignoring")
                continue

            if not self._validate_parameter(key, value):
                logger.warning(
                    f"Invalid value for '{key}': {value}, using default {self.DEFAULTS[key]}"
                )
                continue

            self._config[key] = list(value) if isinstance(value, list) else value

    def _validate_parameter(self, key: str, value: Any) -> bool:
        """Validate a configuration parameter.

        Returns:
            True if valid, False if invalid
        """
        expected_type = type(self.DEFAULTS[key])
        # bool is a subclass of int, reject it explicitly for numeric keys
        if expected_type is int and isinstance(value, bool):
            return False
        if not isinstance(value, expected_type):
            return False

        if key == "max_depth":
            return value > 0
        elif key in self._STRING_LISTS:
            return all(isinstance(item, str) and item for item in value)
        elif key == "source_dir":
            return bool(value.strip())

        return True

    def to_options(self, workspace_root: Optional[str] = None) -> CycleDetectionOptions:
        """Build detection options from this configuration.

        Args:
            workspace_root: Root for alias resolution. None means the current
                working directory.
        """
        return CycleDetectionOptions(
            max_depth=self.max_depth,
            report_all_cycles=self.report_all_cycles,
            workspace_root=workspace_root,
            barrel_names=tuple(self.barrel_names),
            extensions=tuple(self.extensions),
            alias_prefixes=tuple(self.alias_prefixes),
            source_dir=self.source_dir,
        )

    @property
    def max_depth(self) -> int:
        """Traversal depth ceiling."""
        value = self._config["max_depth"]
        assert isinstance(value, int)
        return value

    @property
    def report_all_cycles(self) -> bool:
        """Whether to keep exploring after the first cycle."""
        value = self._config["report_all_cycles"]
        assert isinstance(value, bool)
        return value

    @property
    def barrel_names(self) -> List[str]:
        """Barrel file names, in probe order."""
        value = self._config["barrel_names"]
        assert isinstance(value, list)
        return value

    @property
    def extensions(self) -> List[str]:
        """File extensions, in probe order."""
        value = self._config["extensions"]
        assert isinstance(value, list)
        return value

    @property
    def alias_prefixes(self) -> List[str]:
        """Prefixes resolved against the source directory."""
        value = self._config["alias_prefixes"]
        assert isinstance(value, list)
        return value

    @property
    def source_dir(self) -> str:
        value = self._config["source_dir"]
        assert isinstance(value, str)
        return value

    @property
    def ignore_patterns(self) -> List[str]:
        """Glob patterns of start files that are never analyzed."""
        value = self._config["ignore_patterns"]
        assert isinstance(value, list)
        return value

    @property
    def allow_type_only_cycles(self) -> bool:
        """Whether cycles made only of type imports are left unreported."""
        value = self._config["allow_type_only_cycles"]
        assert isinstance(value, bool)
        return value
