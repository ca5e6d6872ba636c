#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Variant extraction: compares every path traversal crossing an ultrabubble
and turns the distinct interior sequences into one variant record.

Extraction is a fan-out over bubbles: each task reads only the shared,
read-only ExtractionContext and returns its own record. A bubble whose
boundary is missing from the graph is reported back as a skipped bubble
instead of failing the whole run. Records come back in arbitrary order;
callers sort them with sort_records() before writing.

Author: BubbleCall Development Team
License: MIT
"""

from __future__ import annotations

import logging
import os
from bisect import bisect_left, bisect_right
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import (
    AbstractSet, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple,
)

from ..errors import MissingSegment
from ..utils.sequence_utils import oriented_sequence, reverse_complement
from .graph_model import Orientation, PathWithOffsets

logger = logging.getLogger(__name__)

BubblePair = Tuple[int, int]

# node id -> path index -> step indices (ascending)
BubblePathIndex = Dict[int, Dict[int, List[int]]]


# ============================================================================
#                           DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class VariantConfig:
    """Options controlling traversal comparison."""
    ignore_inverted_paths: bool = False


@dataclass(frozen=True)
class Traversal:
    """
    One path's crossing of a bubble.

    sequence is the interior between the boundary steps, always expressed
    in bubble-forward orientation (entry towards exit).
    """
    path_index: int
    path_name: str
    sequence: str
    reverse: bool
    entry_orientation: Orientation
    exit_orientation: Orientation
    anchor_offset: int

    @property
    def boundary_orientations(self) -> Tuple[Orientation, Orientation]:
        return (self.entry_orientation, self.exit_orientation)


@dataclass(frozen=True)
class VariantRecord:
    """
    A variant site anchored on a reference path.

    supports[0] lists the paths carrying the reference allele, supports[k]
    those carrying alternates[k - 1].
    """
    chromosome: str
    position: int
    bubble: BubblePair
    reference: str
    alternates: Tuple[str, ...]
    supports: Tuple[Tuple[str, ...], ...]

    @property
    def alleles(self) -> Tuple[str, ...]:
        return (self.reference,) + self.alternates

    @property
    def sample_count(self) -> int:
        return sum(len(s) for s in self.supports)

    def allele_of(self) -> Dict[str, int]:
        """Map each supporting path name to its allele index."""
        return {
            name: index
            for index, names in enumerate(self.supports)
            for name in names
        }

    def sort_key(self) -> Tuple:
        """Total ordering key; every field that can differ takes part."""
        return (self.chromosome, self.position, self.reference, self.alternates, self.bubble)


@dataclass(frozen=True)
class ExtractionContext:
    """Read-only state shared by every extraction task."""
    config: VariantConfig
    segment_index: Mapping[int, str]
    all_paths: Sequence[PathWithOffsets]
    path_indices: BubblePathIndex
    ref_path_names: Optional[FrozenSet[str]] = None
    representatives: Mapping[int, str] = field(default_factory=dict)


@dataclass
class ExtractionResult:
    """Records produced plus bubbles skipped because of missing segments."""
    records: List[VariantRecord] = field(default_factory=list)
    skipped: List[Tuple[BubblePair, MissingSegment]] = field(default_factory=list)
    bubbles_processed: int = 0


# ============================================================================
#                           PATH INDEXING
# ============================================================================

def bubble_path_indices(all_paths: Sequence[PathWithOffsets],
                        bubble_nodes: AbstractSet[int]) -> BubblePathIndex:
    """
    Index where each bubble boundary node occurs in each path.

    Args:
        all_paths: Paths with offsets, in declaration order
        bubble_nodes: Entry and exit ids of all bubbles

    Returns:
        node id -> path index -> ascending step indices
    """
    index: BubblePathIndex = defaultdict(lambda: defaultdict(list))

    for path_ix, path in enumerate(all_paths):
        for step_ix, step in enumerate(path.steps):
            if step.segment_id in bubble_nodes:
                index[step.segment_id][path_ix].append(step_ix)

    # Plain dicts pickle cleanly for worker processes
    return {node: dict(paths) for node, paths in index.items()}


def sub_path_traversal(path: PathWithOffsets,
                       path_ix: int,
                       entry_steps: Sequence[int],
                       exit_steps: Sequence[int],
                       segment_index: Mapping[int, str]) -> Optional[Traversal]:
    """
    Extract one path's traversal of a bubble.

    The first entry occurrence is used. The first exit after it gives a
    forward traversal unless both boundary steps are reversed. Failing
    that, the last exit before it gives a reverse traversal only when both
    boundary steps are reversed. Returns None when step order and boundary
    orientations disagree.
    """
    i = entry_steps[0]
    entry_reversed = path.steps[i].orientation.is_reverse

    after = bisect_right(exit_steps, i)
    before = bisect_left(exit_steps, i)

    if after < len(exit_steps) and not (
            entry_reversed and path.steps[exit_steps[after]].orientation.is_reverse):
        j = exit_steps[after]
        reverse = False
        interior = path.steps[i + 1:j]
    elif before > 0 and entry_reversed and path.steps[exit_steps[before - 1]].orientation.is_reverse:
        j = exit_steps[before - 1]
        reverse = True
        interior = path.steps[j + 1:i]
    else:
        return None

    raw = ''.join(
        oriented_sequence(segment_index[s.segment_id], s.orientation.is_reverse)
        for s in interior
    )

    return Traversal(
        path_index=path_ix,
        path_name=path.name,
        sequence=reverse_complement(raw) if reverse else raw,
        reverse=reverse,
        entry_orientation=path.steps[i].orientation,
        exit_orientation=path.steps[j].orientation,
        anchor_offset=path.steps[i].offset,
    )


def bubble_traversals(entry: int, exit_: int,
                      all_paths: Sequence[PathWithOffsets],
                      path_indices: BubblePathIndex,
                      segment_index: Mapping[int, str]) -> List[Traversal]:
    """
    Collect the traversals of every path containing both boundaries.

    Raises:
        MissingSegment: If entry or exit is not a graph segment
    """
    for node in (entry, exit_):
        if node not in segment_index:
            raise MissingSegment(node, f"bubble {entry}->{exit_}")

    entry_hits = path_indices.get(entry, {})
    exit_hits = path_indices.get(exit_, {})

    traversals = []
    for path_ix in sorted(entry_hits.keys() & exit_hits.keys()):
        traversal = sub_path_traversal(
            all_paths[path_ix], path_ix, entry_hits[path_ix], exit_hits[path_ix], segment_index
        )
        if traversal is not None:
            traversals.append(traversal)
    return traversals


# ============================================================================
#                           VARIANT DETECTION
# ============================================================================

def select_reference(traversals: Sequence[Traversal],
                     ref_path_names: Optional[AbstractSet[str]],
                     representative: Optional[str]) -> Optional[Traversal]:
    """
    Choose the traversal supplying the reference allele.

    With reference names configured, the first traversal of a named path
    (None if there is none). Otherwise the representative path's
    traversal, falling back to the first traversal.
    """
    if not traversals:
        return None
    if ref_path_names:
        return next((t for t in traversals if t.path_name in ref_path_names), None)
    if representative is not None:
        for t in traversals:
            if t.path_name == representative:
                return t
    return traversals[0]


def detect_variants_in_sub_paths(context: ExtractionContext,
                                 entry: int, exit_: int) -> Optional[VariantRecord]:
    """
    Compare all traversals of one bubble.

    Returns:
        A VariantRecord, or None when fewer than two traversals qualify or
        all of them carry the same sequence

    Raises:
        MissingSegment: If entry or exit is not a graph segment
    """
    traversals = bubble_traversals(
        entry, exit_, context.all_paths, context.path_indices, context.segment_index
    )

    reference = select_reference(
        traversals, context.ref_path_names, context.representatives.get(entry)
    )
    if reference is None:
        return None

    if context.config.ignore_inverted_paths:
        traversals = [
            t for t in traversals
            if t is reference or t.boundary_orientations == reference.boundary_orientations
        ]

    if len(traversals) < 2:
        return None

    # Alleles are reported on the reference path's strand
    orient = reverse_complement if reference.reverse else (lambda s: s)

    groups: Dict[str, List[str]] = {}
    for t in traversals:
        groups.setdefault(orient(t.sequence), []).append(t.path_name)

    if len(groups) < 2:
        return None

    ref_allele = orient(reference.sequence)
    alternates = tuple(sorted(seq for seq in groups if seq != ref_allele))
    supports = (tuple(groups[ref_allele]),) + tuple(tuple(groups[alt]) for alt in alternates)

    return VariantRecord(
        chromosome=reference.path_name,
        position=reference.anchor_offset,
        bubble=(entry, exit_),
        reference=ref_allele,
        alternates=alternates,
        supports=supports,
    )


# ============================================================================
#                           PARALLEL EXTRACTION
# ============================================================================

_WORKER_CONTEXT: Optional[ExtractionContext] = None

BubbleOutcome = Tuple[BubblePair, Optional[VariantRecord], Optional[MissingSegment]]


def _init_worker(context: ExtractionContext):
    global _WORKER_CONTEXT
    _WORKER_CONTEXT = context


def _extract_bubble(bubble: BubblePair) -> BubbleOutcome:
    return extract_bubble(_WORKER_CONTEXT, bubble)


def extract_bubble(context: ExtractionContext, bubble: BubblePair) -> BubbleOutcome:
    """Run detection for one bubble, returning a missing segment as a value."""
    entry, exit_ = bubble
    try:
        return bubble, detect_variants_in_sub_paths(context, entry, exit_), None
    except MissingSegment as e:
        return bubble, None, e


def extract_variants(context: ExtractionContext,
                     ultrabubbles: Sequence[BubblePair],
                     threads: Optional[int] = None,
                     progress_interval: int = 1000) -> ExtractionResult:
    """
    Extract variant records for all bubbles.

    Args:
        context: Shared read-only extraction state
        ultrabubbles: Bubbles to process
        threads: Worker processes (None = CPU count, 1 = run in-process)
        progress_interval: Log progress every N bubbles (0 disables)

    Returns:
        ExtractionResult with unsorted records and skipped bubbles
    """
    threads = threads or os.cpu_count() or 1
    result = ExtractionResult()
    total = len(ultrabubbles)

    logger.info(f"Identifying variants in {total} ultrabubbles ({threads} workers)")

    if threads == 1 or total < 2:
        outcomes: Iterable[BubbleOutcome] = (extract_bubble(context, b) for b in ultrabubbles)
        _collect(outcomes, result, total, progress_interval)
    else:
        chunksize = max(1, total // (threads * 16))
        with ProcessPoolExecutor(
            max_workers=threads,
            initializer=_init_worker,
            initargs=(context,),
        ) as executor:
            outcomes = executor.map(_extract_bubble, ultrabubbles, chunksize=chunksize)
            _collect(outcomes, result, total, progress_interval)

    if result.skipped:
        logger.warning(
            f"Skipped {len(result.skipped)} ultrabubbles with missing segments"
        )
    logger.info(f"Found {len(result.records)} variant sites")
    return result


def _collect(outcomes: Iterable[BubbleOutcome], result: ExtractionResult,
             total: int, progress_interval: int):
    for bubble, record, error in outcomes:
        result.bubbles_processed += 1
        if error is not None:
            logger.debug(f"Bubble {bubble[0]}->{bubble[1]} skipped: {error}")
            result.skipped.append((bubble, error))
        elif record is not None:
            result.records.append(record)

        if progress_interval and result.bubbles_processed % progress_interval == 0:
            logger.info(f"Processed {result.bubbles_processed}/{total} ultrabubbles")


def sort_records(records: Iterable[VariantRecord]) -> List[VariantRecord]:
    """Sort records into their deterministic output order."""
    return sorted(records, key=VariantRecord.sort_key)


__all__ = [
    'VariantConfig',
    'Traversal',
    'VariantRecord',
    'ExtractionContext',
    'ExtractionResult',
    'bubble_path_indices',
    'sub_path_traversal',
    'bubble_traversals',
    'select_reference',
    'detect_variants_in_sub_paths',
    'extract_bubble',
    'extract_variants',
    'sort_records',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
