"""Infrastructure layer - cross-cutting concerns."""

from tablestakes.infrastructure.config import Config, IOConfig, ObservabilityConfig, get_config
from tablestakes.infrastructure.logging import get_logger, setup_logging

__all__ = [
    "Config",
    "IOConfig",
    "ObservabilityConfig",
    "get_config",
    "setup_logging",
    "get_logger",
]
