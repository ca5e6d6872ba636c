#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Tests for configuration loading, overrides and validation.

Author: BubbleCall Development Team
License: MIT
"""

import pytest
import yaml

from bubblecall.config.schema import (
    DEFAULT_CONFIG,
    apply_overrides,
    load_config,
    save_config_template,
    validate_config,
)
from bubblecall.errors import LoadError


class TestLoadConfig:
    """Test configuration loading."""

    def test_defaults(self):
        config = load_config()

        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG
        assert validate_config(config) == []

    def test_partial_file_merged(self, temp_output_dir):
        """Test that a partial file only overrides the keys it names."""
        path = temp_output_dir / "config.yaml"
        path.write_text("variants:\n  ignore_inverted_paths: true\nhardware:\n  threads: 4\n")

        config = load_config(path)

        assert config['variants']['ignore_inverted_paths'] is True
        assert config['variants']['reference_paths'] == []
        assert config['hardware']['threads'] == 4
        assert config['ultrabubbles']['source'] == 'auto'

    def test_empty_file(self, temp_output_dir):
        path = temp_output_dir / "empty.yaml"
        path.write_text("")

        assert load_config(path) == DEFAULT_CONFIG

    def test_invalid_yaml(self, temp_output_dir):
        path = temp_output_dir / "bad.yaml"
        path.write_text("variants: [unclosed\n")

        with pytest.raises(LoadError):
            load_config(path)

    def test_not_a_mapping(self, temp_output_dir):
        path = temp_output_dir / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(LoadError, match="mapping"):
            load_config(path)

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(LoadError):
            load_config(temp_output_dir / "absent.yaml")


class TestOverrides:
    """Test dotted command-line overrides."""

    def test_override_applied(self):
        config = apply_overrides(load_config(), {'hardware.threads': 8, 'variants.reference_paths': ['x']})

        assert config['hardware']['threads'] == 8
        assert config['variants']['reference_paths'] == ['x']

    def test_none_ignored(self):
        base = apply_overrides(load_config(), {'hardware.threads': 2})

        config = apply_overrides(base, {'hardware.threads': None})

        assert config['hardware']['threads'] == 2

    def test_input_not_mutated(self):
        base = load_config()

        apply_overrides(base, {'output.logging.level': 'DEBUG'})

        assert base['output']['logging']['level'] == 'INFO'


class TestValidateConfig:
    """Test configuration validation."""

    @pytest.mark.parametrize("overrides,message", [
        ({'ultrabubbles.source': 'guess'}, "source"),
        ({'ultrabubbles.source': 'file'}, "ultrabubbles.file"),
        ({'ultrabubbles.source': 'discover'}, "discovery_command"),
        ({'ultrabubbles.discovery_command': 'saboten {gfa}'}, "non-empty list"),
        ({'ultrabubbles.duplicate_entry_policy': 'merge'}, "duplicate entry"),
        ({'ultrabubbles.file': '/nonexistent/graph.bubbles'}, "not found"),
        ({'variants.ignore_inverted_paths': 'yes'}, "true or false"),
        ({'hardware.threads': 0}, "thread"),
        ({'output.progress_interval': -1}, "progress"),
        ({'output.logging.level': 'LOUD'}, "logging level"),
    ])
    def test_invalid_values(self, overrides, message):
        errors = validate_config(apply_overrides(load_config(), overrides))

        assert any(message in error for error in errors)

    @pytest.mark.parametrize("text,section", [
        ("variants:\n", "variants"),
        ("hardware: 4\n", "hardware"),
        ("output:\n  logging:\n", "output.logging"),
    ])
    def test_null_or_scalar_section(self, temp_output_dir, text, section):
        """Test that an empty or scalar section is reported, not raised."""
        path = temp_output_dir / "sections.yaml"
        path.write_text(text)

        errors = validate_config(load_config(path))

        assert any(error.startswith(f"{section} must be a mapping") for error in errors)

    def test_discover_with_command_valid(self):
        config = apply_overrides(load_config(), {
            'ultrabubbles.source': 'discover',
            'ultrabubbles.discovery_command': ['saboten', '{gfa}'],
        })

        assert validate_config(config) == []


class TestTemplates:
    """Test configuration templates."""

    @pytest.mark.parametrize("template", ['default', 'reference', 'discover'])
    def test_template_loads_and_validates(self, temp_output_dir, template):
        path = temp_output_dir / f"{template}.yaml"

        save_config_template(path, template)

        with open(path) as f:
            assert isinstance(yaml.safe_load(f), dict)
        assert validate_config(load_config(path)) == []

    def test_discover_template(self, temp_output_dir):
        path = temp_output_dir / "discover.yaml"

        save_config_template(path, 'discover')

        assert load_config(path)['ultrabubbles']['discovery_command'] == ['saboten', '{gfa}']

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
