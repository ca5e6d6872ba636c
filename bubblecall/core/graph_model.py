#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Variation graph data model: segments, oriented steps, paths, the segment
index and the per-path offset view used by bubble assignment and variant
extraction.

Author: BubbleCall Development Team
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

import numpy as np

from ..errors import MissingSegment

logger = logging.getLogger(__name__)


# ============================================================================
#                           GRAPH ENTITIES
# ============================================================================

class Orientation(Enum):
    """Direction in which a path step reads its segment."""
    FORWARD = '+'
    REVERSE = '-'

    @classmethod
    def parse(cls, symbol: str) -> "Orientation":
        """
        Parse a GFA orientation symbol.

        Accepts P-line symbols ('+', '-') and W-line walk symbols ('>', '<').
        """
        if symbol in ('+', '>'):
            return cls.FORWARD
        if symbol in ('-', '<'):
            return cls.REVERSE
        raise ValueError(f"Invalid orientation: {symbol!r}")

    @property
    def is_reverse(self) -> bool:
        return self is Orientation.REVERSE

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Segment:
    """A graph node holding a DNA sequence."""
    id: int
    sequence: str

    @property
    def length(self) -> int:
        return len(self.sequence)


@dataclass(frozen=True)
class Step:
    """One oriented segment visit within a path."""
    segment_id: int
    orientation: Orientation = Orientation.FORWARD


@dataclass(frozen=True)
class Path:
    """A named haplotype traversal through the graph."""
    name: str
    steps: Tuple[Step, ...]

    def __len__(self) -> int:
        return len(self.steps)


@dataclass
class VariationGraph:
    """
    In-memory variation graph.

    Segments are kept in file order; paths are kept in declaration order,
    which later stages rely on for stable path indexing.
    """
    segments: List[Segment] = field(default_factory=list)
    paths: List[Path] = field(default_factory=list)
    source: str = ''

    @property
    def path_names(self) -> List[str]:
        return [p.name for p in self.paths]

    def __repr__(self) -> str:
        return (f"VariationGraph(source={self.source!r}, "
                f"segments={len(self.segments)}, paths={len(self.paths)})")


# ============================================================================
#                           SEGMENT INDEX
# ============================================================================

def build_segment_index(segments: Iterable[Segment]) -> Dict[int, str]:
    """
    Build the segment id -> sequence mapping.

    The returned dict is treated as read-only for the rest of the run and
    is shared by every extraction worker.
    """
    return {seg.id: seg.sequence for seg in segments}


# ============================================================================
#                           PATH OFFSETS
# ============================================================================

@dataclass(frozen=True)
class OffsetStep:
    """A path step together with its 0-based offset along the path."""
    segment_id: int
    orientation: Orientation
    offset: int


@dataclass(frozen=True)
class PathWithOffsets:
    """Derived view of a path: oriented steps with cumulative base offsets."""
    name: str
    steps: Tuple[OffsetStep, ...]
    length: int

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def segment_ids(self) -> List[int]:
        return [s.segment_id for s in self.steps]


def path_with_offsets(path: Path, segment_index: Mapping[int, str]) -> PathWithOffsets:
    """
    Compute cumulative offsets for each step of a path.

    Args:
        path: Path to convert
        segment_index: Segment id -> sequence mapping

    Returns:
        PathWithOffsets where step k has offset sum(len(seg) for steps < k)

    Raises:
        MissingSegment: If any step references an unknown segment
    """
    lengths = np.zeros(len(path.steps), dtype=np.int64)
    for i, step in enumerate(path.steps):
        try:
            lengths[i] = len(segment_index[step.segment_id])
        except KeyError:
            raise MissingSegment(step.segment_id, f"path {path.name}, step {i}") from None

    ends = np.cumsum(lengths)
    starts = ends - lengths
    total = int(ends[-1]) if len(ends) else 0

    steps = tuple(
        OffsetStep(step.segment_id, step.orientation, offset)
        for step, offset in zip(path.steps, starts.tolist())
    )
    return PathWithOffsets(name=path.name, steps=steps, length=total)


def gfa_paths_with_offsets(graph: VariationGraph,
                           segment_index: Mapping[int, str]) -> List[PathWithOffsets]:
    """
    Convert every path of the graph, preserving declaration order.

    Raises:
        MissingSegment: On the first path referencing an unknown segment
    """
    all_paths = []
    for path in graph.paths:
        all_paths.append(path_with_offsets(path, segment_index))
        logger.debug(f"Path {path.name}: {len(path)} steps")
    return all_paths


__all__ = [
    'Orientation',
    'Segment',
    'Step',
    'Path',
    'VariationGraph',
    'OffsetStep',
    'PathWithOffsets',
    'build_segment_index',
    'path_with_offsets',
    'gfa_paths_with_offsets',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
