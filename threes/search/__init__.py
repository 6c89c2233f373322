# -*- coding: utf-8 -*-
"""
Module containing the expectimax search for Threes.
"""
from .expectimax import SearchResult, chance_outcomes, chance_value, decision_value, select_move

__all__ = ["SearchResult", "chance_outcomes", "chance_value", "decision_value", "select_move"]
