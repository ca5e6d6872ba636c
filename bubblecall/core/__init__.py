"""
BubbleCall v0.1.0

Core pipeline stages: graph model, ultrabubble sources, bubble assignment
and variant extraction.
"""

from .graph_model import (
    Orientation,
    Segment,
    Step,
    Path,
    VariationGraph,
    OffsetStep,
    PathWithOffsets,
    build_segment_index,
    path_with_offsets,
    gfa_paths_with_offsets,
)
from .ultrabubbles import (
    BubbleProvider,
    StaticBubbleProvider,
    FileBubbleProvider,
    CommandBubbleProvider,
    select_provider,
    prepare_ultrabubbles,
)
from .assignment import BubbleAssignment, AssignmentResult, assign_bubbles
from .variants import (
    VariantConfig,
    VariantRecord,
    ExtractionContext,
    ExtractionResult,
    bubble_path_indices,
    detect_variants_in_sub_paths,
    extract_variants,
    sort_records,
)

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
    'BubbleProvider',
    'StaticBubbleProvider',
    'FileBubbleProvider',
    'CommandBubbleProvider',
    'select_provider',
    'prepare_ultrabubbles',
    'BubbleAssignment',
    'AssignmentResult',
    'assign_bubbles',
    'VariantConfig',
    'VariantRecord',
    'ExtractionContext',
    'ExtractionResult',
    'bubble_path_indices',
    'detect_variants_in_sub_paths',
    'extract_variants',
    'sort_records',
]
