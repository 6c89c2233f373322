"""
N-tuple network: a linear value function over lookups keyed by six-cell patterns.
"""

from __future__ import annotations

from pathlib import Path

from numpy import add, arange, array, float32, float64, full, int64, ndarray, zeros

from threes.core.board import NO_MOVE, Board
from threes.envs.tiles import MIN_BONUS_RANK
from threes.ntuple.patterns import PATTERNS
from threes.ntuple.persistence import load_weights, save_weights

# ##>: Ranks are encoded in base 15, so they must stay within [0, 14].
ENCODING_BASE = 15
TUPLE_LENGTH = 6
PATTERN_SIZE = ENCODING_BASE**TUPLE_LENGTH

# ##>: Context: 4 directions plus "no move yet", times 4 hint categories (1, 2, 3, bonus).
MOVE_CONTEXTS = 5
HINT_CONTEXTS = 4

NUM_TABLES = 2

_CELLS = array(PATTERNS, dtype=int64)
_POWERS = ENCODING_BASE ** arange(TUPLE_LENGTH, dtype=int64)


def hint_category(hint: int) -> int:
    """
    Context slot of a hint: 0 for an undrawn hint or a 1, 1 for a 2, 2 for a 3, 3 for any bonus rank.

    An undrawn hint shares the slot of a 1 on purpose: the environment draws a hint before the
    first slide, so only hand-built boards and chance nodes without a hint reach it.
    """
    if hint >= MIN_BONUS_RANK:
        return 3
    return max(hint - 1, 0)


def context_index(board: Board) -> int:
    """Index of the (last move, hint) context of a board."""
    move = MOVE_CONTEXTS - 1 if board.last_move == NO_MOVE else board.last_move
    return move * HINT_CONTEXTS + hint_category(board.hint)


class NTupleNetwork:
    """
    Linear value function over 32 six-cell patterns.

    Even patterns live in the first weight table and odd patterns in the second. With contexts
    enabled, every table holds one block of ``PATTERN_SIZE`` weights per (last move, hint) pair.

    Attributes
    ----------
    contextual : bool
        Whether feature indices are offset by the board context.
    tables : list[ndarray]
        The flat float32 weight tables.
    """

    def __init__(self, contextual: bool = True, init: float = 0.0):
        """
        Allocate the weight tables.

        Parameters
        ----------
        contextual : bool, optional
            Offset features by the last move and hint (default is True).
        init : float, optional
            Initial value of every weight (default is 0).
        """
        self.contextual = contextual
        size = PATTERN_SIZE * (MOVE_CONTEXTS * HINT_CONTEXTS if contextual else 1)
        if init:
            self.tables = [full(size, init, dtype=float32) for _ in range(NUM_TABLES)]
        else:
            self.tables = [zeros(size, dtype=float32) for _ in range(NUM_TABLES)]

    def features(self, board: Board) -> ndarray:
        """
        Compute the feature index of every pattern.

        Parameters
        ----------
        board : Board
            The board to encode.

        Returns
        -------
        ndarray
            32 indices; index ``i`` addresses table ``i % 2``.

        Raises
        ------
        ValueError
            If a rank does not fit the base-15 encoding.
        """
        cells = board.tiles.ravel()[_CELLS]
        if cells.max() >= ENCODING_BASE:
            raise ValueError(f'rank {int(cells.max())} cannot be encoded in base {ENCODING_BASE}')

        codes = cells @ _POWERS
        if self.contextual:
            codes += context_index(board) * PATTERN_SIZE
        return codes

    def value(self, features: ndarray) -> float:
        """Sum of the weights addressed by the features."""
        return float(
            self.tables[0][features[0::2]].sum(dtype=float64) + self.tables[1][features[1::2]].sum(dtype=float64)
        )

    def evaluate(self, board: Board) -> float:
        """Estimated value of a board."""
        return self.value(self.features(board))

    def update(self, features: ndarray, delta: float) -> None:
        """
        Add ``delta`` to every weight addressed by the features.

        A weight addressed by several patterns receives ``delta`` once per pattern.
        """
        delta = float(delta)
        add.at(self.tables[0], features[0::2], delta)
        add.at(self.tables[1], features[1::2], delta)

    def save(self, path: str | Path) -> None:
        save_weights(path, self.tables)

    def load(self, path: str | Path) -> None:
        load_weights(path, self.tables)
