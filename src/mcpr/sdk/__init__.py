"""mcpr SDK — config files and server target loading."""

from mcpr.sdk.config import ConfigLoader, LoggingSettings, ServerConfig, TelemetrySettings
from mcpr.sdk.errors import ConfigValidationError, TargetLoadError
from mcpr.sdk.loader import load_server, split_target

__all__ = [
    "ConfigLoader",
    "ConfigValidationError",
    "LoggingSettings",
    "ServerConfig",
    "TargetLoadError",
    "TelemetrySettings",
    "load_server",
    "split_target",
]
