# -*- coding: utf-8 -*-
"""
Agents playing Threes, built from ``key=value`` property strings.
"""
from .config import AgentConfiguration, parse_properties
from .players import LearningPlayer, Player, RandomPlayer, SearchPlayer

__all__ = ["AgentConfiguration", "LearningPlayer", "Player", "RandomPlayer", "SearchPlayer", "parse_properties"]
