#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Exception hierarchy shared by all BubbleCall modules.

Configuration and load errors are raised before any parallel work starts
and abort the run. MissingSegment is raised per path or per bubble; during
variant extraction it is collected instead of propagated so that other
bubbles still produce records.

Author: BubbleCall Development Team
License: MIT
"""

from pathlib import Path
from typing import Optional, Union


class BubbleCallError(Exception):
    """Base class for all BubbleCall errors."""
    pass


class ConfigurationError(BubbleCallError):
    """Raised when the run configuration or the input graph cannot be used."""
    pass


class LoadError(BubbleCallError):
    """
    Raised when an input file cannot be read or parsed.

    Args:
        message: Description of the failure
        source: File the failure originated from
        line_no: 1-based line number, if the failure is tied to one line
    """

    def __init__(self, message: str, source: Optional[Union[str, Path]] = None,
                 line_no: Optional[int] = None):
        self.source = Path(source) if source is not None else None
        self.line_no = line_no

        location = ""
        if self.source is not None:
            location = f"{self.source}"
            if line_no is not None:
                location += f":{line_no}"
            location += ": "

        super().__init__(f"{location}{message}")


class MalformedUltrabubbleFile(LoadError):
    """Raised for an unparsable line in an ultrabubble file."""
    pass


class MissingSegment(BubbleCallError):
    """Raised when a step or a bubble boundary references an unknown segment."""

    def __init__(self, segment_id: int, context: str = ""):
        self.segment_id = segment_id
        self.context = context
        message = f"Segment {segment_id} not found in graph"
        if context:
            message += f" ({context})"
        super().__init__(message)

    def __reduce__(self):
        # Keeps the exception picklable across worker processes
        return (self.__class__, (self.segment_id, self.context))


class ProviderError(BubbleCallError):
    """Raised when the external ultrabubble discovery provider fails."""
    pass


__all__ = [
    'BubbleCallError',
    'ConfigurationError',
    'LoadError',
    'MalformedUltrabubbleFile',
    'MissingSegment',
    'ProviderError',
]

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
