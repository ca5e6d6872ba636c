#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Bubble assignment: greedy, single-pass selection of one representative
path per ultrabubble.

Paths are scanned in declaration order against a shrinking pool of
unowned bubbles (entry -> exit). A bubble is owned by the first path on
which both its entry and its exit occur. Scanning stops as soon as the pool
is empty. The result drives coverage reporting and the choice of reference
traversal when no reference paths are configured.

Author: BubbleCall Development Team
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from .graph_model import PathWithOffsets

logger = logging.getLogger(__name__)

BubblePair = Tuple[int, int]


@dataclass(frozen=True)
class BubbleAssignment:
    """Bubbles first found contained in one path."""
    path_name: str
    bubbles: Tuple[BubblePair, ...]

    def __len__(self) -> int:
        return len(self.bubbles)


@dataclass
class AssignmentResult:
    """Outcome of bubble assignment over all paths."""
    assignments: List[BubbleAssignment] = field(default_factory=list)
    remaining: Dict[int, int] = field(default_factory=dict)
    paths_scanned: int = 0

    @property
    def assigned_count(self) -> int:
        return sum(len(a) for a in self.assignments)

    @property
    def unassigned(self) -> List[BubblePair]:
        return sorted(self.remaining.items())

    def representatives(self) -> Dict[int, str]:
        """Map each assigned bubble's entry id to its owning path name."""
        return {
            entry: a.path_name
            for a in self.assignments
            for entry, _ in a.bubbles
        }


def assign_bubbles(all_paths: Sequence[PathWithOffsets],
                   ultrabubbles: Iterable[BubblePair]) -> AssignmentResult:
    """
    Assign every ultrabubble to the first path containing it.

    Args:
        all_paths: Paths with offsets, in declaration order
        ultrabubbles: Boundary pairs with unique entry ids, sorted

    Returns:
        AssignmentResult with per-path assignments and the bubbles no path
        contains
    """
    result = AssignmentResult()
    remaining: Dict[int, int] = {entry: exit_ for entry, exit_ in ultrabubbles}

    for count, path in enumerate(all_paths):
        if not remaining:
            break
        result.paths_scanned += 1

        # Entries on this path, paired with the exit they would need
        maybe_contained: List[Tuple[int, int]] = [
            (remaining[step.segment_id], step.segment_id)
            for step in path.steps
            if step.segment_id in remaining
        ]

        if not maybe_contained:
            continue

        # Re-scan: keep only candidates whose exit also occurs on this path
        contained: List[BubblePair] = []
        seen = set()
        for step in path.steps:
            for exit_, entry in maybe_contained:
                if exit_ == step.segment_id and (entry, exit_) not in seen:
                    seen.add((entry, exit_))
                    contained.append((entry, exit_))

        for entry, _ in contained:
            remaining.pop(entry, None)

        if contained:
            logger.info(
                f"{count:5} {path.name:<40}\t{len(contained)} bubbles\t"
                f"{len(remaining)} remaining"
            )
            result.assignments.append(BubbleAssignment(path.name, tuple(contained)))

    result.remaining = remaining

    logger.info(f"{len(result.assignments)} paths")
    logger.info(f"{len(remaining)} bubbles left")
    return result


__all__ = [
    'BubbleAssignment',
    'AssignmentResult',
    'assign_bubbles',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
