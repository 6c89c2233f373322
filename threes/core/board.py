"""
Core functionality for simulating the Threes game, including board manipulation and tile merging.

The grid is indexed in row-major order::

     (0)  (1)  (2)  (3)
     (4)  (5)  (6)  (7)
     (8)  (9) (10) (11)
    (12) (13) (14) (15)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from numpy import array, array_equal, int64, ndarray, rot90, zeros

# ##>: Slide directions.
UP, RIGHT, DOWN, LEFT = 0, 1, 2, 3
NO_MOVE = -1
DIRECTIONS = (UP, RIGHT, DOWN, LEFT)

# ##>: Sentinel reward returned by illegal slides and placements.
ILLEGAL = -1

# ##>: Base tile ranks and the bag refill size.
BASE_RANKS = (1, 2, 3)
BAG_COPIES = 4

# ##>: Bonus tiles may appear once the highest rank exceeds this value.
BONUS_THRESHOLD = 6

SIZE = 4


class NodeKind(str, Enum):
    """Whose turn it is on a board explored by the search."""

    DECISION = 'decision'
    CHANCE = 'chance'


def tile_value(rank: int) -> int:
    """
    Displayed value of a tile rank.

    Parameters
    ----------
    rank : int
        Internal rank (0 for an empty cell).

    Returns
    -------
    int
        0, 1, 2, 3, 6, 12, 24, ... for ranks 0, 1, 2, 3, 4, 5, 6, ...
    """
    if rank <= 3:
        return rank
    return 3 * 2 ** (rank - 3)


def merge_reward(rank: int) -> int:
    """Reward for producing a tile of the given rank by a merge."""
    if rank == 3:
        return 9
    return 3 ** (rank - 3) * (rank + 3)


def merge_row(row: ndarray) -> tuple[int, ndarray, int]:
    """
    Slide one row toward its first cell.

    Parameters
    ----------
    row : ndarray
        A 1D array of four ranks.

    Returns
    -------
    score : int
        Reward of the merge performed, if any.
    new_row : ndarray
        The row after sliding.
    merged : int
        Rank created by the merge, 0 when no merge happened.

    Notes
    -----
    - Tiles move at most one step: the first gap or the first merge met from the edge
      shifts every tile behind it by one cell, and the rest of the row is left alone.
    - Equal ranks of 3 or more merge into the next rank; a 1 and a 2 merge into a 3.
    """
    result = row.copy()
    hold = 0
    for col in range(SIZE):
        tile = int(result[col])
        score, merged = 0, 0
        if tile == 0:
            pass
        elif hold == tile and hold >= 3:
            merged = tile + 1
        elif hold + tile == 3 and hold * tile == 2:
            merged = 3
        else:
            hold = tile
            continue

        # ##: Close the gap or the freed cell.
        if merged:
            result[col - 1] = merged
            score = merge_reward(merged)
        result[col:-1] = result[col + 1 :].copy()
        result[-1] = 0
        return score, result, merged
    return 0, result, 0


def slide_and_merge(tiles: ndarray) -> tuple[int, ndarray, int]:
    """
    Slide the whole grid to the left.

    Returns
    -------
    tuple[int, ndarray, int]
        Total reward, the new grid and the highest rank created by a merge.
    """
    result = tiles.copy()
    score, highest = 0, 0
    for i, row in enumerate(tiles):
        row_score, result[i], merged = merge_row(row)
        score += row_score
        highest = max(highest, merged)
    return score, result, highest


@dataclass
class Board:
    """
    A Threes board with the attributes carried between moves.

    Attributes
    ----------
    tiles : ndarray
        The 4x4 grid of ranks.
    last_move : int
        Direction of the last legal slide, ``NO_MOVE`` before the first one.
    max_rank : int
        Highest rank ever present on the grid.
    hint : int
        Rank of the next tile to be placed, 0 while undrawn.
    bag_counts : tuple[int, int, int]
        Remaining copies of ranks 1, 2 and 3 in the current bag.
    node_kind : NodeKind
        Turn tag used by the search.
    """

    tiles: ndarray = field(default_factory=lambda: zeros((SIZE, SIZE), dtype=int64))
    last_move: int = NO_MOVE
    max_rank: int = 0
    hint: int = 0
    bag_counts: tuple[int, int, int] = (BAG_COPIES,) * 3
    node_kind: NodeKind = NodeKind.DECISION

    def __post_init__(self):
        self.tiles = array(self.tiles, dtype=int64).reshape(SIZE, SIZE)
        self.max_rank = max(self.max_rank, int(self.tiles.max()))

    def __getitem__(self, position: int) -> int:
        return int(self.tiles[divmod(position, SIZE)])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return array_equal(self.tiles, other.tiles)

    def copy(self) -> Board:
        """Return an independent copy of the board."""
        return Board(
            tiles=self.tiles.copy(),
            last_move=self.last_move,
            max_rank=self.max_rank,
            hint=self.hint,
            bag_counts=self.bag_counts,
            node_kind=self.node_kind,
        )

    @property
    def bonus_active(self) -> bool:
        """Whether bonus tiles may be placed on this board."""
        return self.max_rank > BONUS_THRESHOLD

    @property
    def empty_cells(self) -> list[int]:
        """Positions of the empty cells."""
        return [int(position) for position in (self.tiles.ravel() == 0).nonzero()[0]]

    @property
    def score(self) -> int:
        """Face score of the grid: every tile of rank 3 or more is worth ``3 ** (rank - 2)``."""
        ranks = self.tiles[self.tiles >= 3]
        return int(sum(3 ** (int(rank) - 2) for rank in ranks))

    def place(self, position: int, rank: int) -> int:
        """
        Place a tile on an empty cell.

        Parameters
        ----------
        position : int
            Cell index in 0..15.
        rank : int
            Rank of the tile.

        Returns
        -------
        int
            0 if the placement is valid, ``ILLEGAL`` otherwise.
        """
        if not 0 <= position < SIZE * SIZE or self[position] != 0:
            return ILLEGAL
        if self.bonus_active:
            if not 1 <= rank <= self.max_rank - 3:
                return ILLEGAL
        elif rank not in BASE_RANKS:
            return ILLEGAL

        self.tiles[divmod(position, SIZE)] = rank
        self.max_rank = max(self.max_rank, rank)
        return 0

    def slide(self, direction: int) -> int:
        """
        Apply a slide to the board.

        Parameters
        ----------
        direction : int
            The direction to slide (0: up, 1: right, 2: down, 3: left).

        Returns
        -------
        int
            The reward of the slide, or ``ILLEGAL`` if nothing moved.

        Notes
        -----
        Only the left slide is implemented; the grid is rotated so that the requested
        direction points left, slid, and rotated back.
        """
        if direction not in DIRECTIONS:
            return ILLEGAL

        # ##: Up becomes left after one counterclockwise turn, right after two, down after three.
        turns = (direction + 1) % SIZE
        reward, updated, merged = slide_and_merge(rot90(self.tiles, k=turns))
        updated = rot90(updated, k=-turns)
        if array_equal(updated, self.tiles):
            return ILLEGAL

        self.tiles = updated.copy()
        self.max_rank = max(self.max_rank, merged)
        self.last_move = direction
        return reward

    def transpose(self) -> None:
        self.tiles = self.tiles.T.copy()

    def reflect_horizontal(self) -> None:
        self.tiles = self.tiles[:, ::-1].copy()

    def reflect_vertical(self) -> None:
        self.tiles = self.tiles[::-1, :].copy()

    def rotate_right(self) -> None:
        """Rotate the grid clockwise."""
        self.transpose()
        self.reflect_horizontal()

    def rotate_left(self) -> None:
        """Rotate the grid counterclockwise."""
        self.transpose()
        self.reflect_vertical()

    def reverse(self) -> None:
        self.reflect_horizontal()
        self.reflect_vertical()

    def rotate(self, times: int = 1) -> None:
        """Rotate the grid clockwise by the given number of quarter turns."""
        self.tiles = rot90(self.tiles, k=-(times % SIZE)).copy()


def after_state(board: Board, direction: int) -> tuple[Board, int]:
    """
    Compute the board after a slide, without placing a new tile.

    Parameters
    ----------
    board : Board
        The current board, left untouched.
    direction : int
        The direction to slide.

    Returns
    -------
    tuple[Board, int]
        The slid copy, tagged as a chance node, and the reward (``ILLEGAL`` if the slide is illegal).
    """
    child = board.copy()
    reward = child.slide(direction)
    child.node_kind = NodeKind.CHANCE
    return child, reward


def legal_moves(board: Board) -> list[int]:
    """Directions whose slide changes the grid."""
    return [direction for direction in DIRECTIONS if after_state(board, direction)[1] != ILLEGAL]


def is_terminal(board: Board) -> bool:
    """Check whether no slide is possible."""
    return not legal_moves(board)
