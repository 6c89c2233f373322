# -*- coding: utf-8 -*-
"""
This module provides the Threes board: sliding and merging tiles, placing new tiles,
rotating and reflecting the grid, and listing the legal moves of a position.
"""

from .board import (
    BAG_COPIES,
    BASE_RANKS,
    BONUS_THRESHOLD,
    DIRECTIONS,
    DOWN,
    ILLEGAL,
    LEFT,
    NO_MOVE,
    RIGHT,
    UP,
    Board,
    NodeKind,
    after_state,
    is_terminal,
    legal_moves,
    merge_reward,
    merge_row,
    slide_and_merge,
    tile_value,
)

__all__ = [
    "BAG_COPIES",
    "BASE_RANKS",
    "BONUS_THRESHOLD",
    "DIRECTIONS",
    "DOWN",
    "ILLEGAL",
    "LEFT",
    "NO_MOVE",
    "RIGHT",
    "UP",
    "Board",
    "NodeKind",
    "after_state",
    "is_terminal",
    "legal_moves",
    "merge_reward",
    "merge_row",
    "slide_and_merge",
    "tile_value",
]
