"""
BubbleCall v0.1.0

I/O Module for BubbleCall.

1. gfa_reader.py - GFA S/P/W line parsing into a VariationGraph
2. bubble_io.py - Ultrabubble files and reference path lists
3. vcf_writer.py - Sorted VCF output
"""

from .gfa_reader import (
    load_gfa,
    parse_gfa_lines,
    open_text,
)

from .bubble_io import (
    load_ultrabubbles,
    parse_ultrabubble_lines,
    write_ultrabubbles,
    load_path_names,
)

__all__ = [
    'load_gfa',
    'parse_gfa_lines',
    'open_text',
    'load_ultrabubbles',
    'parse_ultrabubble_lines',
    'write_ultrabubbles',
    'load_path_names',
]
