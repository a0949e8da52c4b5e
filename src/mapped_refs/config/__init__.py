"""Configuration management for mapped references."""

from .manager import CellConfig, ConfigManager, LoggingConfig

__all__ = ["CellConfig", "ConfigManager", "LoggingConfig"]
