#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Pipeline orchestrator: runs graph loading, ultrabubble loading, bubble
assignment, variant extraction and VCF output as one batch.

Every fatal condition (unreadable inputs, fewer than two paths, reference
names absent from the graph, conflicting ultrabubbles) is raised before
extraction starts. Extraction itself never aborts on a single bubble; the
skipped bubbles are returned in the run summary.

Author: BubbleCall Development Team
License: MIT
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, TextIO, Tuple, Union

from ..core.assignment import AssignmentResult, assign_bubbles
from ..core.graph_model import (
    PathWithOffsets, VariationGraph, build_segment_index, gfa_paths_with_offsets,
)
from ..core.ultrabubbles import BubbleProvider, prepare_ultrabubbles, select_provider
from ..core.variants import (
    ExtractionContext, ExtractionResult, VariantConfig, bubble_path_indices, extract_variants,
)
from ..errors import ConfigurationError, MissingSegment
from ..io_utils.bubble_io import load_path_names
from ..io_utils.gfa_reader import load_gfa
from ..io_utils.vcf_writer import VCFHeader, contig_lengths, write_vcf

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

BubblePair = Tuple[int, int]


def setup_logging(level: Union[str, int] = 'INFO', log_file: Optional[Union[str, Path]] = None):
    """
    Configure root logging for a BubbleCall run.

    Messages go to stderr so VCF output on stdout stays clean; a log file
    handler is added when requested.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


@dataclass
class RunSummary:
    """Outcome of a pipeline run."""
    paths: int = 0
    ultrabubbles: int = 0
    assigned: int = 0
    unassigned: int = 0
    records: int = 0
    skipped: List[Tuple[BubblePair, MissingSegment]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'paths': self.paths,
            'ultrabubbles': self.ultrabubbles,
            'assigned': self.assigned,
            'unassigned': self.unassigned,
            'records': self.records,
            'skipped': len(self.skipped),
        }


class VariantCallingPipeline:
    """
    Orchestrates one GFA -> VCF run.

    Stages:
    1. Resolve reference path names (config list + optional file)
    2. Load the graph and build the segment index and path offsets
    3. Load or discover ultrabubbles, sort them and check entry uniqueness
    4. Assign bubbles to representative paths
    5. Extract variants in parallel
    6. Sort and write VCF
    """

    def __init__(self, config: Dict[str, Any], provider: Optional[BubbleProvider] = None):
        """
        Initialize pipeline.

        Args:
            config: Configuration dictionary (see config.schema)
            provider: Ultrabubble provider; chosen from config when omitted
        """
        self.config = config
        self.logger = logging.getLogger(__name__)

        bubble_cfg = config['ultrabubbles']
        self.provider = provider or select_provider(
            ultrabubbles_file=bubble_cfg.get('file'),
            discovery_command=bubble_cfg.get('discovery_command'),
            source=bubble_cfg.get('source', 'auto'),
        )

        self.gfa_path: Optional[Path] = None
        self.graph: Optional[VariationGraph] = None
        self.segment_index: Dict[int, str] = {}
        self.all_paths: List[PathWithOffsets] = []
        self.ultrabubbles: List[BubblePair] = []
        self.ref_path_names: Optional[FrozenSet[str]] = None
        self.assignment: Optional[AssignmentResult] = None
        self.extraction: Optional[ExtractionResult] = None

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def resolve_reference_paths(self) -> Optional[FrozenSet[str]]:
        """Combine configured reference names with those from the paths file."""
        variants_cfg = self.config['variants']
        names = list(variants_cfg.get('reference_paths') or [])

        ref_file = variants_cfg.get('reference_paths_file')
        if ref_file:
            names.extend(load_path_names(ref_file))

        if not names:
            self.ref_path_names = None
            return None

        self.ref_path_names = frozenset(names)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("Using reference paths:")
            for name in sorted(self.ref_path_names):
                self.logger.debug(f"\t{name}")
        return self.ref_path_names

    def load_graph(self, gfa_path: Union[str, Path]) -> VariationGraph:
        """
        Load the graph and derive the segment index and path offsets.

        Raises:
            LoadError: If the GFA cannot be read
            ConfigurationError: If the graph has fewer than two paths, or
                none of the reference names matches a graph path
            MissingSegment: If a path steps on an undefined segment
        """
        self.gfa_path = Path(gfa_path)
        self.graph = load_gfa(self.gfa_path)

        if len(self.graph.paths) < 2:
            raise ConfigurationError(
                f"GFA must contain at least two paths (found {len(self.graph.paths)})"
            )
        self.logger.info(f"GFA has {len(self.graph.paths)} paths")

        if self.ref_path_names:
            graph_names = set(self.graph.path_names)
            missing = sorted(self.ref_path_names - graph_names)
            if len(missing) == len(self.ref_path_names):
                raise ConfigurationError(
                    f"None of the {len(missing)} reference paths exist in the graph"
                )
            for name in missing:
                self.logger.warning(f"Reference path not in graph: {name}")

        self.logger.info("Building map from segment IDs to sequences")
        self.segment_index = build_segment_index(self.graph.segments)

        self.logger.info("Extracting paths and offsets from GFA")
        self.all_paths = gfa_paths_with_offsets(self.graph, self.segment_index)
        return self.graph

    def load_ultrabubbles(self) -> List[BubblePair]:
        """Fetch, sort and validate ultrabubbles from the provider."""
        self.logger.info("Finding graph ultrabubbles")
        bubbles = self.provider.find_ultrabubbles(self.gfa_path)
        self.ultrabubbles = prepare_ultrabubbles(
            bubbles, self.config['ultrabubbles'].get('duplicate_entry_policy', 'reject')
        )
        self.logger.info(f"Using {len(self.ultrabubbles)} ultrabubbles")
        return self.ultrabubbles

    def assign(self) -> AssignmentResult:
        """Pick a representative path for each ultrabubble."""
        self.assignment = assign_bubbles(self.all_paths, self.ultrabubbles)
        return self.assignment

    def extract(self) -> ExtractionResult:
        """Extract variant records for all ultrabubbles."""
        self.logger.info("Finding ultrabubble path indices")
        bubble_nodes = {node for pair in self.ultrabubbles for node in pair}

        context = ExtractionContext(
            config=VariantConfig(
                ignore_inverted_paths=bool(self.config['variants'].get('ignore_inverted_paths')),
            ),
            segment_index=self.segment_index,
            all_paths=self.all_paths,
            path_indices=bubble_path_indices(self.all_paths, bubble_nodes),
            ref_path_names=self.ref_path_names,
            representatives=self.assignment.representatives() if self.assignment else {},
        )

        self.extraction = extract_variants(
            context,
            self.ultrabubbles,
            threads=self.config['hardware'].get('threads'),
            progress_interval=self.config['output'].get('progress_interval', 1000),
        )
        return self.extraction

    def write(self, out: TextIO) -> int:
        """Write the sorted VCF to an open text stream."""
        records = self.extraction.records
        path_lengths = {p.name: p.length for p in self.all_paths}
        header = VCFHeader(
            gfa_path=str(self.gfa_path),
            sample_names=self.graph.path_names,
            contigs=contig_lengths(records, path_lengths),
        )
        return write_vcf(records, out, header)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def prepare(self, gfa_path: Union[str, Path]):
        """Run every stage that can fail fatally, before any parallel work."""
        self.resolve_reference_paths()
        self.load_graph(gfa_path)
        self.load_ultrabubbles()
        self.assign()

    def run(self, gfa_path: Union[str, Path],
            output: Optional[Union[str, Path, TextIO]] = None) -> RunSummary:
        """
        Run the complete pipeline.

        Args:
            gfa_path: Input GFA
            output: VCF destination: a path, an open stream, or None for stdout

        Returns:
            RunSummary including the bubbles skipped for missing segments
        """
        self.logger.info("=" * 60)
        self.logger.info("Starting BubbleCall")
        self.logger.info("=" * 60)

        self.prepare(gfa_path)
        self.extract()

        if output is None:
            written = self.write(sys.stdout)
        elif hasattr(output, 'write'):
            written = self.write(output)
        else:
            self.logger.info(f"Writing VCF: {output}")
            with open(output, 'w') as f:
                written = self.write(f)

        summary = RunSummary(
            paths=len(self.all_paths),
            ultrabubbles=len(self.ultrabubbles),
            assigned=self.assignment.assigned_count,
            unassigned=len(self.assignment.remaining),
            records=written,
            skipped=list(self.extraction.skipped),
        )

        for (entry, exit_), error in summary.skipped:
            self.logger.warning(f"Skipped ultrabubble {entry}->{exit_}: {error}")

        self.logger.info(f"Wrote {written} variant records")
        return summary


__all__ = [
    'LOG_FORMAT',
    'setup_logging',
    'RunSummary',
    'VariantCallingPipeline',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
