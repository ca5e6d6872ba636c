#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Tests for CLI command interface.

Author: BubbleCall Development Team
License: MIT
"""

import logging

import pytest
from click.testing import CliRunner
from bubblecall.cli import main


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to CliRunner's captured streams."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self):
        """Test that --help runs without error."""
        runner = CliRunner()
        result = runner.invoke(main, ['--help'])

        assert result.exit_code == 0
        assert 'BubbleCall' in result.output

    def test_cli_version(self):
        """Test that --version displays version."""
        runner = CliRunner()
        result = runner.invoke(main, ['--version'])

        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_call_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ['call', '--help'])

        assert result.exit_code == 0
        assert '--no-inv' in result.output
        assert '--refs' in result.output

    def test_invalid_command(self):
        """Test that invalid commands are handled gracefully."""
        runner = CliRunner()
        result = runner.invoke(main, ['nonexistent_command'])

        assert result.exit_code != 0


class TestConfigCLI:
    """Test config subcommands."""

    def test_config_init_command(self):
        """Test config init command."""
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(main, ['config', 'init', '--output', 'test_config.yaml'])

            assert result.exit_code == 0

            result = runner.invoke(main, ['config', 'validate', 'test_config.yaml'])

            assert result.exit_code == 0
            assert 'valid' in result.output

    def test_config_validate_rejects(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            with open('bad.yaml', 'w') as f:
                f.write("hardware:\n  threads: 0\n")
            result = runner.invoke(main, ['config', 'validate', 'bad.yaml'])

            assert result.exit_code == 1

    def test_config_validate_null_section(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            with open('null.yaml', 'w') as f:
                f.write("variants:\n")
            result = runner.invoke(main, ['config', 'validate', 'null.yaml'])

            assert result.exit_code == 1
            assert 'variants must be a mapping' in result.output

    def test_config_show(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            runner.invoke(main, ['config', 'init', '-o', 'c.yaml', '-t', 'discover'])
            result = runner.invoke(main, ['config', 'show', 'c.yaml'])

            assert result.exit_code == 0
            assert 'Source: discover' in result.output


class TestCallCLI:
    """Test the call command."""

    def test_call_with_bubble_file(self, two_bubble_gfa, two_bubble_file, temp_output_dir):
        """Test a full run writing to a file."""
        vcf = temp_output_dir / "out.vcf"
        runner = CliRunner()
        result = runner.invoke(main, [
            'call', str(two_bubble_gfa),
            '-u', str(two_bubble_file),
            '-o', str(vcf),
            '-t', '1',
        ])

        assert result.exit_code == 0
        body = [line for line in vcf.read_text().splitlines() if not line.startswith('#')]
        assert [line.split('\t')[2] for line in body] == ['>1>4', '>4>7']
        assert '2 variant records' in result.output

    def test_call_with_refs(self, two_bubble_gfa, two_bubble_file, temp_output_dir):
        vcf = temp_output_dir / "out.vcf"
        runner = CliRunner()
        result = runner.invoke(main, [
            'call', str(two_bubble_gfa),
            '-u', str(two_bubble_file),
            '--refs', 'hap1',
            '-o', str(vcf),
            '-t', '1',
        ])

        assert result.exit_code == 0
        body = [line for line in vcf.read_text().splitlines() if not line.startswith('#')]
        assert all(line.startswith('hap1\t') for line in body)

    def test_call_malformed_bubbles(self, two_bubble_gfa, temp_output_dir):
        """Test that a bad ultrabubble file fails with exit status 1."""
        bad = temp_output_dir / "bad.bubbles"
        bad.write_text("1 four\n")
        vcf = temp_output_dir / "out.vcf"

        runner = CliRunner()
        result = runner.invoke(main, ['call', str(two_bubble_gfa), '-u', str(bad), '-o', str(vcf)])

        assert result.exit_code == 1
        assert 'MalformedUltrabubbleFile' in result.output
        assert not vcf.exists()

    def test_call_without_bubble_source(self, two_bubble_gfa):
        runner = CliRunner()
        result = runner.invoke(main, ['call', str(two_bubble_gfa)])

        assert result.exit_code == 1

    def test_call_missing_gfa(self):
        runner = CliRunner()
        result = runner.invoke(main, ['call', 'nonexistent.gfa'])

        assert result.exit_code != 0


class TestBubblesCLI:
    """Test the bubbles command."""

    def test_bubble_coverage(self, two_bubble_gfa, two_bubble_file, temp_output_dir):
        saved = temp_output_dir / "sorted.bubbles"
        runner = CliRunner()
        result = runner.invoke(main, [
            'bubbles', str(two_bubble_gfa), '-u', str(two_bubble_file), '--save', str(saved),
        ])

        assert result.exit_code == 0
        assert 'ref\t2 bubbles\t0 remaining' in result.output
        assert '1 paths' in result.output
        assert '0 bubbles left' in result.output
        assert saved.read_text() == "1\t4\n4\t7\n"

    def test_undecodable_bubble_file(self, two_bubble_gfa, temp_output_dir):
        """Test that a binary ultrabubble file fails cleanly with exit status 1."""
        bad = temp_output_dir / "binary.bubbles"
        bad.write_bytes(b"1\t4\n\xff\xfe\t7\n")

        runner = CliRunner()
        result = runner.invoke(main, ['bubbles', str(two_bubble_gfa), '-u', str(bad)])

        assert result.exit_code == 1
        assert 'LoadError' in result.output

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
