"""
Record of one episode: the features of every board the player moved to, with the reward of the move.
"""

from __future__ import annotations

from collections import namedtuple
from typing import Iterator

from numpy import ndarray

Step = namedtuple(typename="Step", field_names=["features", "reward"])


class Trajectory:
    """Ordered list of steps, filled during an episode and emptied by the learner."""

    def __init__(self):
        self._steps: list[Step] = []

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __reversed__(self) -> Iterator[Step]:
        return reversed(self._steps)

    def record(self, features: ndarray, reward: float) -> None:
        self._steps.append(Step(features=features, reward=reward))

    def clear(self) -> None:
        self._steps.clear()
