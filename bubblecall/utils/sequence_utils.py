"""
BubbleCall v0.1.0

Sequence utility functions for BubbleCall.

Provides reverse complementing of oriented segment sequences and
classification of alternate alleles against a reference allele.
"""

from typing import Dict, Iterable, List


# IUPAC complements; S, W and N complement to themselves
COMPLEMENT_MAP: Dict[str, str] = {
    'A': 'T', 'T': 'A',
    'G': 'C', 'C': 'G',
    'R': 'Y', 'Y': 'R',
    'K': 'M', 'M': 'K',
    'B': 'V', 'V': 'B',
    'D': 'H', 'H': 'D',
    'S': 'S', 'W': 'W',
    'N': 'N',
}
COMPLEMENT_MAP.update({k.lower(): v.lower() for k, v in list(COMPLEMENT_MAP.items())})

_COMPLEMENT_TABLE = str.maketrans(COMPLEMENT_MAP)


def reverse_complement(sequence: str) -> str:
    """
    Generate reverse complement of DNA sequence.

    Case is preserved and characters outside the IUPAC alphabet are
    passed through unchanged.

    Args:
        sequence: DNA sequence string

    Returns:
        Reverse complement sequence

    Example:
        >>> reverse_complement("ATCG")
        'CGAT'
        >>> reverse_complement("acRn")
        'nYgt'
    """
    return sequence.translate(_COMPLEMENT_TABLE)[::-1]


def oriented_sequence(sequence: str, reverse: bool) -> str:
    """Return the sequence as read in the given orientation."""
    return reverse_complement(sequence) if reverse else sequence


def classify_allele(reference: str, alternate: str) -> str:
    """
    Classify an alternate allele relative to the reference allele.

    Args:
        reference: Reference allele sequence (may be empty)
        alternate: Alternate allele sequence (may be empty)

    Returns:
        One of 'snv', 'mnp', 'ins', 'del' or 'complex'

    Example:
        >>> classify_allele("A", "T")
        'snv'
        >>> classify_allele("AC", "ACGT")
        'ins'
    """
    if len(reference) == len(alternate):
        return 'snv' if len(reference) == 1 else 'mnp'

    if len(alternate) > len(reference):
        if alternate.startswith(reference) or alternate.endswith(reference):
            return 'ins'
    else:
        if reference.startswith(alternate) or reference.endswith(alternate):
            return 'del'

    return 'complex'


def classify_alleles(reference: str, alternates: Iterable[str]) -> List[str]:
    """Classify each alternate allele against the same reference."""
    return [classify_allele(reference, alt) for alt in alternates]


__all__ = [
    'COMPLEMENT_MAP',
    'reverse_complement',
    'oriented_sequence',
    'classify_allele',
    'classify_alleles',
]
