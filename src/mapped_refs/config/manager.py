"""
Configuration Manager for mapped references.

Handles YAML-configurable settings for shared cells and logging, with
environment overlays and environment variable overrides.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..exceptions import ConfigurationError


class CellConfig(BaseModel):
    """Shared cell settings."""

    max_retries: Optional[int] = Field(
        default=None,
        ge=0,
        description="Retry budget per atomic update (None means unbounded)",
    )
    name_prefix: str = Field(default="cell", description="Prefix for generated cell names")


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level",
    )
    format: str = Field(
        default="console", pattern="^(json|console)$", description="Log format"
    )
    redact_values: bool = Field(
        default=True, description="Hide cell values from log output"
    )
    file: Optional[str] = Field(default=None, description="Optional log file path")


DEFAULT_CONFIG: Dict[str, Any] = {
    "environment": "development",
    "cell": {
        "max_retries": None,
        "name_prefix": "cell",
    },
    "logging": {
        "level": "INFO",
        "format": "console",
        "redact_values": True,
        "file": None,
    },
}


class ConfigManager:
    """
    Manages YAML-configurable settings for mapped references.

    Precedence: defaults -> config file -> environment overlay -> env vars.
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        environment: Optional[str] = None,
    ):
        """
        Initialize ConfigManager.

        Args:
            config_path: Path to YAML configuration file. If None, uses default locations.
            environment: Optional environment name to apply environment overrides
                (e.g., development, staging, production)
        """
        self.config_path = self._resolve_config_path(config_path)
        self._requested_environment = environment
        self._config_data: Dict[str, Any] = {}
        self._load_config()

    def _resolve_config_path(self, config_path: Optional[Union[str, Path]]) -> Path:
        """Resolve configuration file path."""
        if config_path:
            return Path(config_path)

        env_path = os.getenv("MAPPED_REFS_CONFIG_PATH")
        if env_path:
            return Path(env_path)

        default_paths = [
            Path("mapped_refs.yaml"),
            Path("config/mapped_refs.yaml"),
        ]

        for path in default_paths:
            if path.exists():
                return path

        return Path("mapped_refs.yaml")

    def _load_config(self) -> None:
        """Load configuration from YAML file, falling back to defaults."""
        self._config_data = _copy_defaults()

        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML configuration: {e}",
                    details={"path": str(self.config_path)},
                ) from e
            if not isinstance(file_data, dict):
                raise ConfigurationError(
                    f"Configuration in {self.config_path} must be a mapping",
                    details={"path": str(self.config_path)},
                )
            self._deep_update(self._config_data, file_data)

        self._apply_environment_overrides()
        self._apply_env_overrides()
        self._initialize_config_sections()

    def _initialize_config_sections(self) -> None:
        """Initialize configuration sections from loaded data."""
        try:
            self.cell = CellConfig(**(self._config_data.get("cell") or {}))
            self.logging = LoggingConfig(**(self._config_data.get("logging") or {}))
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration values: {e}",
                details={"path": str(self.config_path)},
            ) from e

    @property
    def environment(self) -> str:
        """Effective environment name."""
        return str(self._config_data.get("environment", "development"))

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            "MAPPED_REFS_MAX_RETRIES": ("cell", "max_retries"),
            "MAPPED_REFS_LOG_LEVEL": ("logging", "level"),
            "MAPPED_REFS_LOG_FORMAT": ("logging", "format"),
            "MAPPED_REFS_REDACT_VALUES": ("logging", "redact_values"),
        }

        for env_var, (section, key) in env_mappings.items():
            value_str = os.getenv(env_var)
            if value_str is None:
                continue

            converted_value: Any = value_str
            if key == "max_retries":
                if value_str.lower() in ("", "none", "unbounded"):
                    converted_value = None
                else:
                    try:
                        converted_value = int(value_str)
                    except ValueError as e:
                        raise ConfigurationError(
                            f"{env_var} must be an integer, got {value_str!r}",
                            config_key=env_var,
                        ) from e
            elif key == "redact_values":
                converted_value = value_str.lower() in ("true", "1", "yes", "on")
            elif key == "level":
                converted_value = value_str.upper()

            self._config_data.setdefault(section, {})[key] = converted_value

    def _apply_environment_overrides(self) -> None:
        """Apply the environment overlay file if present."""
        base_dir = self.config_path.parent if self.config_path.parent else Path(".")

        env_name = (
            self._requested_environment
            or os.getenv("MAPPED_REFS_ENVIRONMENT")
            or self._config_data.get("environment")
            or "development"
        )
        self._config_data["environment"] = env_name

        env_file = base_dir / "environments" / f"{env_name}.yaml"
        if env_file.exists():
            try:
                with open(env_file, "r", encoding="utf-8") as f:
                    env_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Failed to apply environment overrides from {env_file}: {e}",
                    details={"path": str(env_file)},
                ) from e
            if isinstance(env_data, dict):
                self._deep_update(self._config_data, env_data)

    def get_config_dict(self) -> Dict[str, Any]:
        """Get the full configuration as a dictionary."""
        return {
            "environment": self.environment,
            "cell": self.cell.model_dump(),
            "logging": self.logging.model_dump(),
        }

    def save_config(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Save current configuration to YAML file."""
        save_path = Path(path) if path else self.config_path
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.get_config_dict(), f, default_flow_style=False, indent=2)
        return save_path

    def reload_config(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    @staticmethod
    def _deep_update(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-merge override into base and return the merged dict."""
        for k, v in (override or {}).items():
            if k in base and isinstance(base[k], dict) and isinstance(v, dict):
                ConfigManager._deep_update(base[k], v)
            else:
                base[k] = v
        return base

    def __repr__(self) -> str:
        """String representation of ConfigManager."""
        return f"ConfigManager(config_path={self.config_path})"


def _copy_defaults() -> Dict[str, Any]:
    return {
        key: dict(value) if isinstance(value, dict) else value
        for key, value in DEFAULT_CONFIG.items()
    }
