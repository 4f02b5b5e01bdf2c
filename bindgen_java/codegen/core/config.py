"""
Configuration management for code generation.

Handles loading and merging configuration from JSON and TOML files,
providing defaults and validation for generator settings.
"""

import json
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional, Union, List
from dataclasses import dataclass, field, asdict

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    package_name: str = "uniffi"
    cdylib_name: str = "uniffi"

    # Code style settings
    add_comments: bool = True

    # Bindings settings
    generate_immutable_records: bool = False
    android: bool = False
    android_cleaner: Optional[bool] = None
    quarkus: bool = False
    external_packages: Dict[str, str] = field(default_factory=dict)
    custom_types: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    # Table holding the Java settings inside a uniffi.toml file
    TOML_SECTION = ("bindings", "java")

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["java"] = {
            "package_name": "uniffi",
            "cdylib_name": "uniffi",
            "generate_immutable_records": False,
            "android": False,
            "quarkus": False,
            "add_comments": True,
        }

    def get_config(
        self,
        language: str = "java",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to a JSON or TOML configuration file

        Returns:
            Merged configuration for the language
        """
        # Start with defaults
        base_config = dict(self._configs.get(language, {}))

        # Load from file if provided
        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        # Apply custom overrides, ignoring unset values
        if custom_config:
            base_config.update(
                {key: value for key, value in custom_config.items() if value is not None}
            )

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from a JSON or TOML file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()
        if suffix == ".json":
            config = self._load_json(path)
        elif suffix == ".toml":
            config = self._load_toml(path)
        else:
            raise ConfigError(f"Configuration file must be JSON or TOML: {path}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain an object: {path}")

        logger.debug("Loaded configuration from %s (%d keys)", path, len(config))
        return config

    def _load_json(self, path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

    def _load_toml(self, path: Path) -> Any:
        """Load the ``[bindings.java]`` table of a uniffi.toml-style file."""
        try:
            with open(path, "rb") as f:
                document = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        table: Any = document
        for key in self.TOML_SECTION:
            if not isinstance(table, dict) or key not in table:
                logger.warning(
                    "No [%s] table in %s, using defaults", ".".join(self.TOML_SECTION), path
                )
                return {}
            table = table[key]
        return table

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Add unknown keys to the custom dict
        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to a JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> List[str]:
        """Get list of supported languages."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str = "java") -> List[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings
        """
        warnings = []

        if language == "java":
            for part in config.package_name.split("."):
                if not part.isidentifier():
                    warnings.append(f"Invalid Java package name: {config.package_name}")
                    break
            if not config.cdylib_name:
                warnings.append("cdylib_name must not be empty")
            for crate, package in config.external_packages.items():
                if not isinstance(package, str) or not package:
                    warnings.append(f"Invalid external package for crate {crate!r}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "java",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to a JSON or TOML configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)

