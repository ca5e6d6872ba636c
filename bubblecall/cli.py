#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for BubbleCall.

This module provides the main CLI entry point and all subcommands for
calling variants from a GFA variation graph using its ultrabubbles.
"""

import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.schema import apply_overrides, load_config, save_config_template, validate_config
from .errors import BubbleCallError
from .io_utils.bubble_io import write_ultrabubbles
from .utils.pipeline import VariantCallingPipeline, setup_logging


def _log_level(ctx, config):
    """Resolve the logging level: CLI flags win over the config file."""
    if ctx.obj.get('VERBOSE'):
        return 'DEBUG'
    if ctx.obj.get('QUIET'):
        return 'ERROR'
    return config['output']['logging']['level']


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    BubbleCall: ultrabubble-based variant calling from variation graphs

    Compares the path traversals of every ultrabubble in a GFA graph and
    writes the differences as a sorted VCF.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='bubblecall_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t',
              type=click.Choice(['default', 'reference', 'discover']),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
        click.echo(f"✓ Configuration file created: {output}")
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except BubbleCallError as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = load_config(Path(config_file))
    except BubbleCallError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    bubbles = config['ultrabubbles']
    variants = config['variants']
    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)
    click.echo("\nUltrabubbles:")
    click.echo(f"  Source: {bubbles['source']}")
    click.echo(f"  File: {bubbles['file'] or '-'}")
    click.echo(f"  Duplicate entries: {bubbles['duplicate_entry_policy']}")
    click.echo("\nVariants:")
    click.echo(f"  Ignore inverted paths: {variants['ignore_inverted_paths']}")
    click.echo(f"  Reference paths: {', '.join(variants['reference_paths'] or []) or '-'}")
    click.echo("\nHardware:")
    click.echo(f"  Threads: {config['hardware']['threads'] or 'auto'}")


# ============================================================================
# Pipeline Commands
# ============================================================================

def _build_config(config_file, overrides):
    config = load_config(Path(config_file) if config_file else None)
    config = apply_overrides(config, overrides)
    errors = validate_config(config)
    if errors:
        raise click.UsageError('; '.join(errors))
    return config


@main.command()
@click.argument('gfa', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Output VCF (default: stdout)')
@click.option('--ultrabubbles', '-u', 'ultrabubbles_file', type=click.Path(exists=True, dir_okay=False),
              help='Load ultrabubbles from a file instead of calculating them')
@click.option('--no-inv', 'ignore_inverted', is_flag=True,
              help="Don't compare two paths if their start and end orientations don't match")
@click.option('--refs', 'ref_paths', multiple=True,
              help='Path to use as reference (can specify multiple times)')
@click.option('--paths-file', type=click.Path(exists=True, dir_okay=False),
              help='File containing paths to use as references, one per line')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              help='Configuration file (YAML)')
@click.option('--threads', '-t', type=click.IntRange(min=1),
              help='Worker processes for variant extraction')
@click.option('--discovery-command', help='Ultrabubble discovery command, e.g. "saboten {gfa}"')
@click.pass_context
def call(ctx, gfa, output, ultrabubbles_file, ignore_inverted, ref_paths, paths_file,
         config_file, threads, discovery_command):
    """Output a VCF for GFA, using the graph's ultrabubbles to find variation."""
    config = _build_config(config_file, {
        'ultrabubbles.file': ultrabubbles_file,
        'ultrabubbles.discovery_command': discovery_command.split() if discovery_command else None,
        'variants.ignore_inverted_paths': True if ignore_inverted else None,
        'variants.reference_paths': list(ref_paths) if ref_paths else None,
        'variants.reference_paths_file': paths_file,
        'hardware.threads': threads,
    })
    setup_logging(_log_level(ctx, config), config['output']['logging']['log_file'])

    try:
        pipeline = VariantCallingPipeline(config)
        summary = pipeline.run(gfa, output)
    except BubbleCallError as e:
        click.echo(f"✗ {type(e).__name__}: {e}", err=True)
        sys.exit(1)

    if not ctx.obj.get('QUIET'):
        click.echo(f"✓ {summary.records} variant records from {summary.ultrabubbles} ultrabubbles", err=True)
        if summary.skipped:
            click.echo(f"  {len(summary.skipped)} ultrabubbles skipped (missing segments):", err=True)
            for (entry, exit_), error in summary.skipped:
                click.echo(f"  • {entry}->{exit_}: {error}", err=True)


@main.command()
@click.argument('gfa', type=click.Path(exists=True, dir_okay=False))
@click.option('--ultrabubbles', '-u', 'ultrabubbles_file', type=click.Path(exists=True, dir_okay=False),
              help='Load ultrabubbles from a file instead of calculating them')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              help='Configuration file (YAML)')
@click.option('--discovery-command', help='Ultrabubble discovery command, e.g. "saboten {gfa}"')
@click.option('--save', type=click.Path(dir_okay=False),
              help='Write the sorted ultrabubble set to this file')
@click.pass_context
def bubbles(ctx, gfa, ultrabubbles_file, config_file, discovery_command, save):
    """Report which paths cover the graph's ultrabubbles."""
    config = _build_config(config_file, {
        'ultrabubbles.file': ultrabubbles_file,
        'ultrabubbles.discovery_command': discovery_command.split() if discovery_command else None,
    })
    setup_logging(_log_level(ctx, config), config['output']['logging']['log_file'])

    try:
        pipeline = VariantCallingPipeline(config)
        pipeline.prepare(gfa)
    except BubbleCallError as e:
        click.echo(f"✗ {type(e).__name__}: {e}", err=True)
        sys.exit(1)

    result = pipeline.assignment
    remaining = len(pipeline.ultrabubbles)
    for assignment in result.assignments:
        remaining -= len(assignment)
        click.echo(f"{assignment.path_name}\t{len(assignment)} bubbles\t{remaining} remaining")
    click.echo(f"{len(result.assignments)} paths")
    click.echo(f"{len(result.remaining)} bubbles left")

    if save:
        write_ultrabubbles(pipeline.ultrabubbles, save)
        click.echo(f"✓ Saved {len(pipeline.ultrabubbles)} ultrabubbles to {save}")


if __name__ == '__main__':
    main()
