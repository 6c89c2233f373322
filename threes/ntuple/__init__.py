# -*- coding: utf-8 -*-
"""
This module provides the n-tuple value function: the fixed pattern set, feature indexing,
the weight tables and their binary storage.
"""

from .network import NTupleNetwork, context_index, hint_category
from .patterns import PATTERNS
from .persistence import WeightFileError, load_weights, save_weights

__all__ = [
    "NTupleNetwork",
    "PATTERNS",
    "WeightFileError",
    "context_index",
    "hint_category",
    "load_weights",
    "save_weights",
]
