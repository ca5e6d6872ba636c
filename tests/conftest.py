#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Pytest configuration and shared fixtures.

Author: BubbleCall Development Team
License: MIT
"""

import pytest
from pathlib import Path
import tempfile
import shutil


# Two paths through one bubble (1 -> 4) differing in the middle segment:
#   P1 = A + AA + A = "AAAA"
#   P2 = A + AT + A = "AATA"
SNV_GFA = """H\tVN:Z:1.0
S\t1\tA
S\t2\tAA
S\t3\tAT
S\t4\tA
L\t1\t+\t2\t+\t0M
L\t1\t+\t3\t+\t0M
L\t2\t+\t4\t+\t0M
L\t3\t+\t4\t+\t0M
P\tP1\t1+,2+,4+\t*
P\tP2\t1+,3+,4+\t*
"""

# Two linked bubbles (1 -> 4, 4 -> 7) and three haplotypes
TWO_BUBBLE_GFA = """H\tVN:Z:1.0
S\t1\tACGT
S\t2\tC
S\t3\tG
S\t4\tTTTT
S\t5\tAA
S\t6\tAAG
S\t7\tCCCC
P\tref\t1+,2+,4+,5+,7+\t*
P\thap1\t1+,3+,4+,5+,7+\t*
P\thap2\t1+,2+,4+,6+,7+\t*
"""


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="bubblecall_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def snv_gfa_text():
    """GFA text of a two-path graph with one SNV bubble."""
    return SNV_GFA


@pytest.fixture
def two_bubble_gfa_text():
    """GFA text of a three-path graph with two bubbles."""
    return TWO_BUBBLE_GFA


@pytest.fixture
def snv_gfa(temp_output_dir):
    """SNV graph written to disk."""
    path = temp_output_dir / "snv.gfa"
    path.write_text(SNV_GFA)
    return path


@pytest.fixture
def two_bubble_gfa(temp_output_dir):
    """Two-bubble graph written to disk."""
    path = temp_output_dir / "two_bubbles.gfa"
    path.write_text(TWO_BUBBLE_GFA)
    return path


@pytest.fixture
def two_bubble_file(temp_output_dir):
    """Ultrabubble file matching the two-bubble graph."""
    path = temp_output_dir / "two_bubbles.bubbles"
    path.write_text("4\t7\n1\t4\n")
    return path

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
