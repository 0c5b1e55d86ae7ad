"""
================================================================================
E2E Tools Common Utilities
================================================================================

Shared configuration management and logging setup.

Exports:
    - get_config: Read a configuration value by dotted key
    - set_config: Override a configuration value at runtime
    - reload_config: Re-read YAML files and environment
    - init_logger: Initialize loguru with standard settings

Usage:
    from e2e_tools.common import get_config, init_logger

    init_logger()
    timeout = get_config("timeouts.page_load", 15.0)

================================================================================
"""

from .global_config import (
    coerce_value,
    get_config,
    init_logger,
    reload_config,
    set_config,
)


__all__ = [
    "coerce_value",
    "get_config",
    "set_config",
    "reload_config",
    "init_logger",
]
