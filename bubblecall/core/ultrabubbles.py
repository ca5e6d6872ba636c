#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Ultrabubble sources.

Boundary pairs either come from a precomputed file or from an external
discovery tool. Both are exposed through the BubbleProvider protocol so
the pipeline (and tests) can swap them freely. prepare_ultrabubbles()
puts any provider's output into the sorted, entry-unique form the
assignment and extraction engines expect.

Author: BubbleCall Development Team
License: MIT
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Union

from ..errors import ConfigurationError, MalformedUltrabubbleFile, ProviderError
from ..io_utils.bubble_io import BubblePair, load_ultrabubbles, parse_ultrabubble_lines

logger = logging.getLogger(__name__)

DUPLICATE_POLICIES = ('reject', 'keep_first')


# ============================================================================
#                           PROVIDER PROTOCOL
# ============================================================================

class BubbleProvider(Protocol):
    """Anything that produces ordered boundary pairs for a graph file."""

    def find_ultrabubbles(self, gfa_path: Union[str, Path]) -> List[BubblePair]:
        ...


class StaticBubbleProvider:
    """Provider returning a fixed set of boundary pairs."""

    def __init__(self, bubbles: Iterable[BubblePair]):
        self.bubbles = [tuple(b) for b in bubbles]

    def find_ultrabubbles(self, gfa_path: Union[str, Path]) -> List[BubblePair]:
        return list(self.bubbles)

    def __repr__(self) -> str:
        return f"StaticBubbleProvider({len(self.bubbles)} bubbles)"


class FileBubbleProvider:
    """Provider that loads boundary pairs from an ultrabubble file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def find_ultrabubbles(self, gfa_path: Union[str, Path]) -> List[BubblePair]:
        return load_ultrabubbles(self.path)

    def __repr__(self) -> str:
        return f"FileBubbleProvider({self.path})"


class CommandBubbleProvider:
    """
    Provider that runs an external ultrabubble discovery tool.

    The command is an argument list; every '{gfa}' placeholder is replaced
    with the graph path. The tool must print boundary pairs to stdout in
    ultrabubble-file format.

    Example:
        >>> provider = CommandBubbleProvider(["saboten", "{gfa}"])
    """

    def __init__(self, command: Sequence[str], timeout: Optional[float] = None):
        if not command:
            raise ConfigurationError("Ultrabubble discovery command is empty")
        self.command = list(command)
        self.timeout = timeout

    def build_command(self, gfa_path: Union[str, Path]) -> List[str]:
        return [arg.replace('{gfa}', str(gfa_path)) for arg in self.command]

    def find_ultrabubbles(self, gfa_path: Union[str, Path]) -> List[BubblePair]:
        cmd = self.build_command(gfa_path)
        logger.info(f"Running ultrabubble discovery: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ProviderError(f"Discovery tool not found: {cmd[0]}") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or '').strip()
            raise ProviderError(
                f"Discovery tool exited with status {e.returncode}: {stderr}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ProviderError(f"Discovery tool timed out after {self.timeout}s") from e

        try:
            return parse_ultrabubble_lines(result.stdout.splitlines(), source=cmd[0])
        except MalformedUltrabubbleFile as e:
            raise ProviderError(f"Unparsable discovery output: {e}") from e

    def __repr__(self) -> str:
        return f"CommandBubbleProvider({self.command})"


def select_provider(ultrabubbles_file: Optional[Union[str, Path]] = None,
                    discovery_command: Optional[Sequence[str]] = None,
                    source: str = 'auto') -> BubbleProvider:
    """
    Choose the ultrabubble source from configuration.

    Args:
        ultrabubbles_file: Precomputed ultrabubble file, if any
        discovery_command: External discovery command, if any
        source: 'file', 'discover' or 'auto' (file when one is given)

    Raises:
        ConfigurationError: If the selected source is not configured
    """
    if source == 'auto':
        source = 'file' if ultrabubbles_file else 'discover'

    if source == 'file':
        if not ultrabubbles_file:
            raise ConfigurationError("Ultrabubble source is 'file' but no ultrabubble file was given")
        return FileBubbleProvider(ultrabubbles_file)

    if source == 'discover':
        if not discovery_command:
            raise ConfigurationError(
                "No ultrabubble file given and no discovery command configured "
                "(set ultrabubbles.discovery_command or pass --ultrabubbles)"
            )
        return CommandBubbleProvider(discovery_command)

    raise ConfigurationError(f"Unknown ultrabubble source: {source}")


# ============================================================================
#                           VALIDATION
# ============================================================================

def prepare_ultrabubbles(bubbles: Iterable[BubblePair],
                         duplicate_entry_policy: str = 'reject') -> List[BubblePair]:
    """
    Sort boundary pairs and enforce unique entry ids.

    Exact duplicate pairs are collapsed. Two different exits for the same
    entry are handled by the policy: 'reject' raises, 'keep_first' keeps
    the pair with the smallest exit id and logs the dropped ones.

    Raises:
        ConfigurationError: On conflicting entries under 'reject', or an
            unknown policy
    """
    if duplicate_entry_policy not in DUPLICATE_POLICIES:
        raise ConfigurationError(f"Unknown duplicate entry policy: {duplicate_entry_policy}")

    ordered = sorted(set(tuple(b) for b in bubbles))

    kept: Dict[int, int] = {}
    conflicts: List[BubblePair] = []
    for entry, exit_ in ordered:
        if entry in kept:
            conflicts.append((entry, exit_))
            continue
        kept[entry] = exit_

    if conflicts:
        if duplicate_entry_policy == 'reject':
            sample = ', '.join(f"{e}->{x}" for e, x in conflicts[:5])
            raise ConfigurationError(
                f"{len(conflicts)} ultrabubbles share an entry with another bubble: {sample}"
            )
        for entry, exit_ in conflicts:
            logger.warning(
                f"Dropping ultrabubble {entry}->{exit_}: entry already bound to exit {kept[entry]}"
            )

    return sorted(kept.items())


__all__ = [
    'DUPLICATE_POLICIES',
    'BubbleProvider',
    'StaticBubbleProvider',
    'FileBubbleProvider',
    'CommandBubbleProvider',
    'select_provider',
    'prepare_ultrabubbles',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
