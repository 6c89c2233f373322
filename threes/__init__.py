# -*- coding: utf-8 -*-
"""
Threes agent learning from self-play with an n-tuple network and expectimax search.
"""
