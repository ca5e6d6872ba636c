#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

Version information.

Author: BubbleCall Development Team
License: MIT
"""

__version__ = "0.1.0"

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
