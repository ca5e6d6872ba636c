"""
BubbleCall v0.1.0

Configuration schema for BubbleCall.

Defines all available configuration parameters with defaults and validation.

Author: BubbleCall Development Team
License: MIT
"""

import copy
from typing import Dict, Any, Optional, List
from pathlib import Path
import yaml

from ..errors import LoadError


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Ultrabubble Source
    # ========================================================================
    'ultrabubbles': {
        'source': 'auto',  # 'auto', 'file', 'discover'
        'file': None,  # Precomputed ultrabubble file (entry/exit per line)
        'discovery_command': None,  # e.g. ['saboten', '{gfa}']
        'duplicate_entry_policy': 'reject',  # 'reject', 'keep_first'
    },

    # ========================================================================
    # Variant Extraction
    # ========================================================================
    'variants': {
        'ignore_inverted_paths': False,
        'reference_paths': [],  # Empty = use representative paths
        'reference_paths_file': None,
    },

    # ========================================================================
    # Hardware Settings
    # ========================================================================
    'hardware': {
        'threads': None,  # Auto-detect from system
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'progress_interval': 1000,  # Bubbles between progress messages
        'logging': {
            'level': 'INFO',
            'log_file': None,
        },
    },
}

VALID_SOURCES = ['auto', 'file', 'discover']
VALID_POLICIES = ['reject', 'keep_first']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        LoadError: If the file is missing or is not valid YAML
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        try:
            with open(config_path) as f:
                user_config = yaml.safe_load(f)
        except OSError as e:
            raise LoadError(f"Cannot read configuration: {e}", config_path) from e
        except yaml.YAMLError as e:
            raise LoadError(f"Invalid YAML: {e}", config_path) from e

        if user_config is not None and not isinstance(user_config, dict):
            raise LoadError("Configuration must be a mapping", config_path)

        # Deep merge user config into defaults
        config = _deep_merge(config, user_config or {})

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def apply_overrides(config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply command-line overrides given in dotted notation.

    None values are ignored so unset CLI options keep the configured value.

    Example:
        >>> cfg = apply_overrides(load_config(), {'hardware.threads': 4})
        >>> cfg['hardware']['threads']
        4
    """
    config = copy.deepcopy(config)
    for key, value in overrides.items():
        if value is None:
            continue
        keys = key.split('.')
        target = config
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value
    return config


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'reference', 'discover')
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'reference':
        config['variants']['reference_paths'] = ['CHM13#0#chr1']
        config['variants']['ignore_inverted_paths'] = True

    elif template == 'discover':
        config['ultrabubbles']['source'] = 'discover'
        config['ultrabubbles']['discovery_command'] = ['saboten', '{gfa}']

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def _section(config: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = config.get(key)
    return value if isinstance(value, dict) else {}


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    for section in DEFAULT_CONFIG:
        if not isinstance(config.get(section), dict):
            errors.append(f"{section} must be a mapping, got {config.get(section)!r}")

    bubbles = _section(config, 'ultrabubbles')
    source = bubbles.get('source', 'auto')
    if source not in VALID_SOURCES:
        errors.append(f"Invalid ultrabubble source: {source}")
    if source == 'file' and not bubbles.get('file'):
        errors.append("ultrabubbles.source is 'file' but ultrabubbles.file is not set")
    if source == 'discover' and not bubbles.get('discovery_command'):
        errors.append("ultrabubbles.source is 'discover' but ultrabubbles.discovery_command is not set")

    command = bubbles.get('discovery_command')
    if command is not None and (not isinstance(command, list) or not command):
        errors.append("ultrabubbles.discovery_command must be a non-empty list of arguments")

    policy = bubbles.get('duplicate_entry_policy', 'reject')
    if policy not in VALID_POLICIES:
        errors.append(f"Invalid duplicate entry policy: {policy}")

    bubble_file = bubbles.get('file')
    if bubble_file and not Path(bubble_file).exists():
        errors.append(f"Ultrabubble file not found: {bubble_file}")

    variants = _section(config, 'variants')
    if not isinstance(variants.get('ignore_inverted_paths', False), bool):
        errors.append("variants.ignore_inverted_paths must be true or false")
    if not isinstance(variants.get('reference_paths') or [], list):
        errors.append("variants.reference_paths must be a list of path names")
    ref_file = variants.get('reference_paths_file')
    if ref_file and not Path(ref_file).exists():
        errors.append(f"Reference paths file not found: {ref_file}")

    threads = _section(config, 'hardware').get('threads')
    if threads is not None and (not isinstance(threads, int) or threads < 1):
        errors.append(f"Invalid thread count: {threads}")

    output = _section(config, 'output')
    interval = output.get('progress_interval', 0)
    if not isinstance(interval, int) or interval < 0:
        errors.append(f"Invalid progress interval: {interval}")
    if not isinstance(output.get('logging', {}), dict):
        errors.append("output.logging must be a mapping")
    level = _section(output, 'logging').get('level', 'INFO')
    if level not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    return errors
