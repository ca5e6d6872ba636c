#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Ultrabubble and path-list file I/O.

Ultrabubble files hold one boundary pair per line: two non-negative integer
segment ids (entry, exit) separated by whitespace. Path-list files hold one
path name per line, matched byte-for-byte against graph path names.

Author: BubbleCall Development Team
License: MIT
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from ..errors import LoadError, MalformedUltrabubbleFile

logger = logging.getLogger(__name__)

BubblePair = Tuple[int, int]


def parse_ultrabubble_lines(lines: Iterable[str], source: Union[str, Path] = '<memory>') -> List[BubblePair]:
    """
    Parse ultrabubble boundary pairs.

    Blank lines are ignored; every other line must hold exactly two
    non-negative integers.

    Raises:
        MalformedUltrabubbleFile: On the first unparsable line
    """
    bubbles: List[BubblePair] = []

    for line_no, raw_line in enumerate(lines, 1):
        line = raw_line.strip()
        if not line:
            continue

        fields = line.split()
        if len(fields) != 2 or not all(f.isascii() and f.isdigit() for f in fields):
            raise MalformedUltrabubbleFile(
                f"expected two segment ids, got {raw_line.rstrip()!r}", source, line_no
            )
        bubbles.append((int(fields[0]), int(fields[1])))

    return bubbles


def load_ultrabubbles(path: Union[str, Path]) -> List[BubblePair]:
    """
    Load ultrabubble boundary pairs from a file.

    Args:
        path: Ultrabubble file

    Returns:
        Pairs in file order

    Raises:
        LoadError: If the file cannot be read
        MalformedUltrabubbleFile: On an unparsable line
    """
    path = Path(path)
    logger.info(f"Loading ultrabubbles from {path}")

    try:
        with open(path, 'r') as f:
            bubbles = parse_ultrabubble_lines(f, source=path)
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Cannot read ultrabubble file: {e}", path) from e

    logger.info(f"Loaded {len(bubbles)} ultrabubbles")
    return bubbles


def write_ultrabubbles(bubbles: Iterable[BubblePair], path: Union[str, Path]) -> int:
    """Write boundary pairs in the format read by load_ultrabubbles."""
    count = 0
    with open(path, 'w') as f:
        for entry, exit_ in bubbles:
            f.write(f"{entry}\t{exit_}\n")
            count += 1
    logger.info(f"Wrote {count} ultrabubbles to {path}")
    return count


def load_path_names(path: Union[str, Path]) -> List[str]:
    """
    Load path names, one per line.

    Only the line terminator is stripped so names match graph paths exactly.
    Empty lines are skipped.

    Raises:
        LoadError: If the file cannot be read
    """
    path = Path(path)
    names = []
    try:
        with open(path, 'r', newline='') as f:
            for line in f:
                name = line.rstrip('\r\n')
                if name:
                    names.append(name)
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Cannot read path list: {e}", path) from e

    logger.debug(f"Loaded {len(names)} path names from {path}")
    return names


__all__ = [
    'BubblePair',
    'parse_ultrabubble_lines',
    'load_ultrabubbles',
    'write_ultrabubbles',
    'load_path_names',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
