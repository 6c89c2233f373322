# -*- coding: utf-8 -*-
"""
Threes environment model.

This module provides the `StochasticEnvironment` class, which places new tiles, together with
the bag and bonus-pool tile sources and the helpers the search uses to enumerate outcomes.
"""

from .environment import Placement, StochasticEnvironment, eligible_cells, outcome_distribution
from .tiles import BONUS_PROBABILITY, BonusPool, TileBag, bonus_ranks, fresh_counts, remove_from_counts

__all__ = [
    "BONUS_PROBABILITY",
    "BonusPool",
    "Placement",
    "StochasticEnvironment",
    "TileBag",
    "bonus_ranks",
    "eligible_cells",
    "fresh_counts",
    "outcome_distribution",
    "remove_from_counts",
]
