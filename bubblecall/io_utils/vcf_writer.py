#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

VCF Writer: renders variant records as VCF v4.2 text.

Records are always sorted before rendering, so the output depends only on
the set of records and never on the order in which extraction workers
produced them. Every graph path becomes one haploid sample column.

Author: BubbleCall Development Team
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, TextIO

from ..core.variants import VariantRecord, sort_records
from ..utils.sequence_utils import classify_alleles
from ..version import __version__

logger = logging.getLogger(__name__)

EMPTY_ALLELE = '-'
MISSING = '.'

INFO_LINES = [
    '##INFO=<ID=NS,Number=1,Type=Integer,Description="Number of paths crossing the ultrabubble">',
    '##INFO=<ID=AN,Number=1,Type=Integer,Description="Total number of alleles in called genotypes">',
    '##INFO=<ID=AC,Number=A,Type=Integer,Description="Number of paths carrying each alternate allele">',
    '##INFO=<ID=TYPE,Number=A,Type=String,Description="Allele type: snv, mnp, ins, del or complex">',
]
FORMAT_LINES = [
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Haploid genotype of the path">',
]
COLUMNS = ['#CHROM', 'POS', 'ID', 'REF', 'ALT', 'QUAL', 'FILTER', 'INFO', 'FORMAT']


@dataclass
class VCFHeader:
    """
    VCF header block.

    Identifies the source graph, declares one contig per anchor path and
    one sample per graph path.
    """
    gfa_path: str
    sample_names: List[str] = field(default_factory=list)
    contigs: Dict[str, int] = field(default_factory=dict)

    def lines(self) -> List[str]:
        lines = [
            '##fileformat=VCFv4.2',
            f'##source=bubblecall-{__version__}',
            f'##reference=file:{self.gfa_path}',
        ]
        for name in sorted(self.contigs):
            lines.append(f'##contig=<ID={name},length={self.contigs[name]}>')
        lines.append('##FILTER=<ID=PASS,Description="All filters passed">')
        lines.extend(INFO_LINES)
        lines.extend(FORMAT_LINES)
        lines.append('\t'.join(COLUMNS + list(self.sample_names)))
        return lines

    def __str__(self) -> str:
        return '\n'.join(self.lines())


def format_allele(sequence: str) -> str:
    """Render an allele, using '-' for an empty sequence."""
    return sequence if sequence else EMPTY_ALLELE


def format_record(record: VariantRecord, sample_names: Sequence[str]) -> str:
    """
    Render one record as a VCF data line.

    POS is 1-based and points at the first base of the entry boundary
    segment on the reference path.
    """
    alt_counts = [len(paths) for paths in record.supports[1:]]
    info = ';'.join([
        f"NS={record.sample_count}",
        f"AN={record.sample_count}",
        f"AC={','.join(str(c) for c in alt_counts)}",
        f"TYPE={','.join(classify_alleles(record.reference, record.alternates))}",
    ])

    allele_of = record.allele_of()
    genotypes = [
        str(allele_of[name]) if name in allele_of else MISSING
        for name in sample_names
    ]

    entry, exit_ = record.bubble
    fields = [
        record.chromosome,
        str(record.position + 1),
        f">{entry}>{exit_}",
        format_allele(record.reference),
        ','.join(format_allele(a) for a in record.alternates),
        MISSING,
        'PASS',
        info,
        'GT',
    ] + genotypes
    return '\t'.join(fields)


def write_vcf(records: Iterable[VariantRecord], out: TextIO, header: VCFHeader) -> int:
    """
    Sort and write records after the header.

    Returns:
        Number of records written
    """
    out.write(str(header) + '\n')
    count = 0
    for record in sort_records(records):
        out.write(format_record(record, header.sample_names) + '\n')
        count += 1
    logger.debug(f"Wrote {count} VCF records")
    return count


def contig_lengths(records: Iterable[VariantRecord], path_lengths: Mapping[str, int]) -> Dict[str, int]:
    """Lengths of the paths that anchor at least one record."""
    return {
        r.chromosome: path_lengths[r.chromosome]
        for r in records
        if r.chromosome in path_lengths
    }


__all__ = [
    'EMPTY_ALLELE',
    'VCFHeader',
    'format_allele',
    'format_record',
    'write_vcf',
    'contig_lengths',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
