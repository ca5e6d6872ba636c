#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

GFA Reader: loads segments (S-lines), paths (P-lines) and walks (W-lines)
from GFA v1/v1.1 text into a VariationGraph.

Author: BubbleCall Development Team
License: MIT
"""

from __future__ import annotations

import gzip
import logging
import re
from pathlib import Path as FilePath
from typing import Iterable, Optional, Set, TextIO, Tuple, Union

from ..core.graph_model import Orientation, Path, Segment, Step, VariationGraph
from ..errors import LoadError

logger = logging.getLogger(__name__)

_WALK_STEP = re.compile(r'([<>])([^<>]+)')


# ============================================================================
#                           FILE UTILITIES
# ============================================================================

def is_gzipped(filepath: Union[str, FilePath]) -> bool:
    """Check if file is gzip compressed (by suffix)."""
    return FilePath(filepath).suffix in ('.gz', '.gzip')


def open_text(filepath: Union[str, FilePath]) -> TextIO:
    """Open a text file for reading with automatic gzip detection."""
    filepath = FilePath(filepath)
    if is_gzipped(filepath):
        return gzip.open(filepath, 'rt')
    return open(filepath, 'r')


def parse_segment_id(name: str) -> int:
    """
    Parse a GFA segment name into a numeric segment id.

    Raises:
        ValueError: If the name is not a non-negative integer
    """
    if not (name.isascii() and name.isdigit()):
        raise ValueError(f"segment name {name!r} is not a non-negative integer")
    return int(name)


# ============================================================================
#                           LINE PARSERS
# ============================================================================

def _parse_path_steps(field: str) -> Tuple[Step, ...]:
    """Parse a P-line segment list such as '1+,2-,3+'."""
    steps = []
    for item in field.split(','):
        if len(item) < 2:
            raise ValueError(f"invalid path step {item!r}")
        steps.append(Step(parse_segment_id(item[:-1]), Orientation.parse(item[-1])))
    return tuple(steps)


def _parse_walk_steps(field: str) -> Tuple[Step, ...]:
    """Parse a W-line walk such as '>1<2>3'."""
    steps = []
    consumed = 0
    for match in _WALK_STEP.finditer(field):
        steps.append(Step(parse_segment_id(match.group(2)), Orientation.parse(match.group(1))))
        consumed += len(match.group(0))
    if consumed != len(field) or not steps:
        raise ValueError(f"invalid walk {field!r}")
    return tuple(steps)


# ============================================================================
#                           GFA READER
# ============================================================================

def parse_gfa_lines(lines: Iterable[str], source: str = '<memory>') -> VariationGraph:
    """
    Build a graph from GFA lines.

    Only S, P and W lines are interpreted; H, L, C and other record types
    are skipped. Walks are named in PanSN style (sample#haplotype#sequence).

    Args:
        lines: GFA text lines (with or without line terminators)
        source: Name of the input, used in error messages

    Returns:
        VariationGraph with segments in file order and paths in declaration order

    Raises:
        LoadError: On a malformed S/P/W line, a duplicate segment id or a
            duplicate path name.
    """
    graph = VariationGraph(source=str(source))
    seen_segments: Set[int] = set()
    seen_paths: Set[str] = set()
    version: Optional[str] = None

    for line_no, raw_line in enumerate(lines, 1):
        line = raw_line.rstrip('\r\n')
        if not line or line.startswith('#'):
            continue

        parts = line.split('\t')
        record_type = parts[0]

        try:
            if record_type == 'H':
                for tag in parts[1:]:
                    if tag.startswith('VN:Z:'):
                        version = tag[5:]

            elif record_type == 'S':
                # Segment: S <name> <sequence> [tags...]
                if len(parts) < 3:
                    raise ValueError("malformed S-line")
                seg_id = parse_segment_id(parts[1])
                if parts[2] == '*':
                    raise ValueError(f"segment {seg_id} has no sequence")
                if seg_id in seen_segments:
                    raise ValueError(f"duplicate segment {seg_id}")
                seen_segments.add(seg_id)
                graph.segments.append(Segment(seg_id, parts[2]))

            elif record_type == 'P':
                # Path: P <name> <steps> <overlaps>
                if len(parts) < 3:
                    raise ValueError("malformed P-line")
                _add_path(graph, seen_paths, parts[1], _parse_path_steps(parts[2]))

            elif record_type == 'W':
                # Walk: W <sample> <hap> <seq id> <start> <end> <walk>
                if len(parts) < 7:
                    raise ValueError("malformed W-line")
                name = f"{parts[1]}#{parts[2]}#{parts[3]}"
                _add_path(graph, seen_paths, name, _parse_walk_steps(parts[6]))

        except ValueError as e:
            raise LoadError(str(e), source, line_no) from e

    if version:
        logger.debug(f"GFA version {version}")
    return graph


def _add_path(graph: VariationGraph, seen: Set[str], name: str, steps: Tuple[Step, ...]):
    if name in seen:
        raise ValueError(f"duplicate path name {name!r}")
    seen.add(name)
    graph.paths.append(Path(name, steps))


def load_gfa(gfa_path: Union[str, FilePath]) -> VariationGraph:
    """
    Load a variation graph from a GFA file (optionally gzipped).

    Raises:
        LoadError: If the file is missing, unreadable or malformed
    """
    gfa_path = FilePath(gfa_path)
    if not gfa_path.exists():
        raise LoadError("GFA file not found", gfa_path)

    logger.info(f"Loading graph from GFA: {gfa_path}")

    try:
        with open_text(gfa_path) as f:
            graph = parse_gfa_lines(f, source=str(gfa_path))
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Cannot read GFA: {e}", gfa_path) from e

    logger.info(f"Loaded graph: {len(graph.segments)} segments, {len(graph.paths)} paths")
    return graph


__all__ = [
    'is_gzipped',
    'open_text',
    'parse_segment_id',
    'load_gfa',
    'parse_gfa_lines',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
