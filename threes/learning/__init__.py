# -*- coding: utf-8 -*-
"""
This module provides the episode trajectory and the backward TD(0) learner.
"""

from .td import td_backward
from .trajectory import Step, Trajectory

__all__ = ["Step", "Trajectory", "td_backward"]
