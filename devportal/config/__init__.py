"""Configuration module for the developer portal service layer.

Public API:
----------
settings: Settings instance
    Pydantic settings object with nested configuration groups

get_logger(name: str) -> Logger
    Get a context-aware logger for your module

setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru logger for the application

resilient_operation(operation_name: str)
    Decorator for logging failures of boundary calls

log_startup_info(cache=None) -> None
    Log configuration and cache backend stats at startup

Usage:
------
```python
from devportal.config import settings
page_size = settings.pagination.default_page_size

from devportal.config import get_logger
logger = get_logger(__name__)
logger.info("Starting operation")
```
"""

from .logging import (
    get_logger,
    log_startup_info,
    resilient_operation,
    setup_loguru_logger,
)
from .settings import Settings, settings

# Public API
__all__ = [
    "Settings",
    # Logging
    "get_logger",
    "log_startup_info",
    "resilient_operation",
    # Settings
    "settings",
    "setup_loguru_logger",
]
