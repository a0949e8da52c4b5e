"""Exception hierarchy for mapped references and shared cells."""

from typing import Any, Dict, Optional


class MappedRefError(Exception):
    """Base exception for all mapped-reference errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}'"
            f")"
        )


class InvalidTransform(MappedRefError):
    """Raised when a transform is not applicable to the value it receives."""

    def __init__(
        self,
        message: str = "Invalid transform",
        error_code: str = "INVALID_TRANSFORM",
        details: Optional[Dict[str, Any]] = None,
        transform: Optional[str] = None,
        level: Optional[int] = None,
    ):
        super().__init__(message, error_code, details)
        if transform is not None:
            self.details["transform"] = transform
        if level is not None:
            self.details["level"] = level


class TransformFailure(MappedRefError):
    """Raised when the chain fails during an atomic update.

    The root cell keeps its prior value whenever this is raised.
    """

    def __init__(
        self,
        message: str = "Transform failed during update",
        error_code: str = "TRANSFORM_FAILURE",
        details: Optional[Dict[str, Any]] = None,
        stage: Optional[str] = None,
        transform: Optional[str] = None,
        level: Optional[int] = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if stage is not None:
            self.details["stage"] = stage
        if transform is not None:
            self.details["transform"] = transform
        if level is not None:
            self.details["level"] = level
        if error_type is not None:
            self.details["error_type"] = error_type

    @property
    def stage(self) -> Optional[str]:
        """Chain stage that raised: ``view``, ``update`` or ``function``."""
        return self.details.get("stage")


class InvalidSourceError(MappedRefError):
    """Raised when a source does not support read/atomic_update."""

    def __init__(
        self,
        message: str = "Source does not support read/atomic_update",
        error_code: str = "INVALID_SOURCE",
        details: Optional[Dict[str, Any]] = None,
        source_type: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if source_type:
            self.details["source_type"] = source_type


class ContentionError(MappedRefError):
    """Raised when a cell exceeds its configured retry budget."""

    def __init__(
        self,
        message: str = "Too many retries under contention",
        error_code: str = "CONTENTION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        cell_name: Optional[str] = None,
        retries: Optional[int] = None,
    ):
        super().__init__(message, error_code, details)
        if cell_name:
            self.details["cell_name"] = cell_name
        if retries is not None:
            self.details["retries"] = retries


class ConfigurationError(MappedRefError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str = "Configuration error",
        error_code: str = "CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        config_key: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if config_key:
            self.details["config_key"] = config_key
