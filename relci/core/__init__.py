"""Core types: settings, results and exit codes."""

from .config import ConfigError, PathsConfig, Settings, ValidatorConfig, load_settings
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "PathsConfig",
    "Settings",
    "ValidatorConfig",
    "load_settings",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
