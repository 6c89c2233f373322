"""
Tile sources of the Threes environment: the base-tile bag and the bonus-tile pool.
"""

from __future__ import annotations

from numpy import array
from numpy.random import Generator

from threes.core.board import BAG_COPIES, BASE_RANKS, BONUS_THRESHOLD

# ##>: Target share of bonus tiles among all draws.
BONUS_PROBABILITY = 1 / 21

# ##>: Smallest bonus rank (a 6).
MIN_BONUS_RANK = 4


def bonus_ranks(max_rank: int) -> tuple[int, ...]:
    """
    Bonus ranks allowed by the highest rank on the board.

    Parameters
    ----------
    max_rank : int
        Highest rank ever present on the board.

    Returns
    -------
    tuple[int, ...]
        Ranks from ``MIN_BONUS_RANK`` up to ``max_rank - 3``, empty while bonus tiles are inactive.
    """
    if max_rank <= BONUS_THRESHOLD:
        return ()
    return tuple(range(MIN_BONUS_RANK, max_rank - 2))


def fresh_counts(counts: tuple[int, int, int]) -> tuple[int, int, int]:
    """Counts of the bag the next draw comes from: an empty bag is refilled first."""
    if sum(counts) == 0:
        return (BAG_COPIES,) * len(BASE_RANKS)
    return counts


def remove_from_counts(counts: tuple[int, int, int], rank: int) -> tuple[int, int, int]:
    """Bag counts after drawing one tile of a base rank."""
    counts = list(fresh_counts(counts))
    counts[BASE_RANKS.index(rank)] -= 1
    return tuple(counts)


class TileBag:
    """
    Bag of base tiles drawn without replacement.

    The bag holds ``BAG_COPIES`` copies of every base rank. It is refilled and reshuffled when
    a draw finds it empty, so it never runs dry.
    """

    def __init__(self, generator: Generator):
        self._generator = generator
        self._tiles: list[int] = []

    def __len__(self) -> int:
        return len(self._tiles)

    @property
    def counts(self) -> tuple[int, int, int]:
        """Remaining copies of each base rank."""
        return tuple(self._tiles.count(rank) for rank in BASE_RANKS)

    def reset(self) -> None:
        """Empty the bag; the next draw starts a fresh one."""
        self._tiles = []

    def draw(self) -> int:
        """Remove and return one tile from the bag."""
        if not self._tiles:
            self._refill()
        return self._tiles.pop()

    def _refill(self) -> None:
        tiles = array(BASE_RANKS * BAG_COPIES)
        self._generator.shuffle(tiles)
        self._tiles = [int(tile) for tile in tiles]


class BonusPool:
    """
    Pool of bonus ranks with a capped draw frequency.

    Attributes
    ----------
    ranks : list[int]
        Bonus ranks currently available; one rank is added every time the ceiling rises.
    total_draws : int
        Number of draws requested since the last reset.
    bonus_draws : int
        Number of those draws served from the pool.
    """

    def __init__(self, generator: Generator, probability: float = BONUS_PROBABILITY):
        self._generator = generator
        self.probability = probability
        self.ranks: list[int] = []
        self.total_draws = 0
        self.bonus_draws = 0

    def reset(self) -> None:
        self.ranks = []
        self.total_draws = 0
        self.bonus_draws = 0

    def sync(self, max_rank: int) -> None:
        """Extend the pool up to the ceiling allowed by ``max_rank``."""
        for rank in bonus_ranks(max_rank)[len(self.ranks) :]:
            self.ranks.append(rank)

    def draw(self) -> int | None:
        """
        Try to serve a draw from the pool.

        Returns
        -------
        int | None
            A bonus rank, or None when the draw must come from the bag.

        Notes
        -----
        The realised bonus share, counted in floating point, never exceeds ``probability``.
        """
        self.total_draws += 1
        if not self.ranks or self._generator.random() >= self.probability:
            return None
        if (self.bonus_draws + 1) / self.total_draws > self.probability:
            return None

        self.bonus_draws += 1
        return int(self._generator.choice(self.ranks))
