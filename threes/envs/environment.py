"""Stochastic Threes environment: picks where the next tile lands and which tile comes after it."""

from __future__ import annotations

import logging
from collections import namedtuple

from numpy.random import PCG64DXSM, default_rng

from threes.core.board import BASE_RANKS, DOWN, LEFT, NO_MOVE, RIGHT, UP, Board
from threes.envs.tiles import BONUS_PROBABILITY, BonusPool, TileBag, bonus_ranks, fresh_counts

logger = logging.getLogger(__name__)

Placement = namedtuple(typename="Placement", field_names=["position", "rank"])

# ##>: New tiles enter from the edge opposite to the last slide.
ENTRY_CELLS = {
    UP: (12, 13, 14, 15),
    RIGHT: (0, 4, 8, 12),
    DOWN: (0, 1, 2, 3),
    LEFT: (3, 7, 11, 15),
}


def eligible_cells(board: Board) -> list[int]:
    """
    Empty cells where the environment may place the next tile.

    Parameters
    ----------
    board : Board
        The board after the player's slide.

    Returns
    -------
    list[int]
        Empty cells of the entry edge, or every empty cell before the first slide.
    """
    if board.last_move == NO_MOVE:
        return board.empty_cells
    return [position for position in ENTRY_CELLS[board.last_move] if board[position] == 0]


def outcome_distribution(board: Board) -> list[tuple[int, float]]:
    """
    Distribution of the next draw.

    Parameters
    ----------
    board : Board
        Board carrying the bag counts and the highest rank.

    Returns
    -------
    list[tuple[int, float]]
        Pairs of (rank, probability) summing to one.

    Notes
    -----
    - Base ranks are weighted by their remaining copies in the bag.
    - Once bonus tiles are active, every bonus rank shares ``BONUS_PROBABILITY`` evenly.
    """
    counts = fresh_counts(board.bag_counts)
    total = sum(counts)
    bonus = bonus_ranks(board.max_rank)
    bonus_share = BONUS_PROBABILITY if bonus else 0.0

    outcomes = [(rank, (1.0 - bonus_share) * count / total) for rank, count in zip(BASE_RANKS, counts) if count]
    outcomes.extend((rank, bonus_share / len(bonus)) for rank in bonus)
    return outcomes


class StochasticEnvironment:
    """
    The environment side of a Threes game.

    It commits to the next tile one step ahead (the hint), draws base tiles from a bag and,
    once the board is advanced enough, occasionally draws a bonus tile.
    """

    def __init__(self, seed: int | None = None, entropy: str = 'seeded'):
        """
        Initialize the environment.

        Parameters
        ----------
        seed : int, optional
            Seed of the generator used for cells, bag shuffles and, by default, bonus draws.
        entropy : str, optional
            ``'seeded'`` to draw bonus tiles from the seeded generator, ``'system'`` to use
            an unseeded one (default is ``'seeded'``).
        """
        if entropy not in ('seeded', 'system'):
            raise ValueError(f"entropy must be 'seeded' or 'system', got {entropy!r}")

        self._generator = default_rng(seed) if seed is not None else default_rng(PCG64DXSM())
        bonus_generator = self._generator if entropy == 'seeded' else default_rng(PCG64DXSM())
        self.bag = TileBag(self._generator)
        self.pool = BonusPool(bonus_generator)

    def open_episode(self) -> None:
        self.bag.reset()
        self.pool.reset()

    def close_episode(self) -> None:
        logger.debug('Episode closed after %d draws, %d bonus.', self.pool.total_draws, self.pool.bonus_draws)

    def generate_hint(self, board: Board) -> int:
        """
        Draw the next tile and announce it on the board.

        Parameters
        ----------
        board : Board
            The board receiving the hint; its ``hint`` and ``bag_counts`` are updated.

        Returns
        -------
        int
            The drawn rank.

        Notes
        -----
        Call it exactly once per placed tile so that the bonus share stays fair.
        """
        self.pool.sync(board.max_rank)
        rank = self.pool.draw()
        if rank is None:
            rank = self.bag.draw()

        board.hint = rank
        board.bag_counts = self.bag.counts
        return rank

    def choose_action(self, board: Board) -> Placement | None:
        """
        Choose where the announced tile goes.

        Parameters
        ----------
        board : Board
            The board after the player's slide.

        Returns
        -------
        Placement | None
            The cell and rank of the new tile, or None if no cell is eligible.
        """
        cells = eligible_cells(board)
        if not cells:
            return None

        rank = board.hint if board.hint else self.generate_hint(board)
        position = int(self._generator.choice(cells))
        return Placement(position=position, rank=rank)
