"""
BubbleCall v0.1.0

Utility modules: sequence helpers and the pipeline orchestrator.
"""

from .sequence_utils import reverse_complement, classify_allele

__all__ = ['reverse_complement', 'classify_allele']
