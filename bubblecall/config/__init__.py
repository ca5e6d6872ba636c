"""
BubbleCall v0.1.0

Configuration management for BubbleCall.

Author: BubbleCall Development Team
License: MIT
"""

from .schema import (
    DEFAULT_CONFIG,
    load_config,
    apply_overrides,
    save_config_template,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "load_config",
    "apply_overrides",
    "save_config_template",
    "validate_config",
]
