# -*- coding: utf-8 -*-
"""
Expectimax search for Threes.

Decision nodes take the best slide; chance nodes average over where the announced tile lands
and which tile is announced next. Leaves are scored by the n-tuple network, which values the
board right after a slide.

The depth drops by one at every ply, decision or chance. A node of depth 0 or less is a leaf
scored by the network. The top level scores its slides with chance nodes of depth ``depth - 1``,
so depths 0 and 1 are both a greedy one-step lookahead.
"""

from __future__ import annotations

from collections import namedtuple

from threes.core.board import BASE_RANKS, DIRECTIONS, ILLEGAL, Board, NodeKind, after_state
from threes.envs.environment import eligible_cells, outcome_distribution
from threes.envs.tiles import remove_from_counts
from threes.learning.trajectory import Trajectory
from threes.ntuple.network import NTupleNetwork

SearchResult = namedtuple(typename="SearchResult", field_names=["move", "after", "reward", "value"])


def _draw(board: Board, rank: int) -> tuple[int, int, int]:
    """Bag counts once ``rank`` has been drawn; bonus ranks leave the bag untouched."""
    if rank in BASE_RANKS:
        return remove_from_counts(board.bag_counts, rank)
    return board.bag_counts


def chance_outcomes(board: Board) -> list[tuple[Board, float]]:
    """
    Generate the decision boards that may follow a chance node.

    Parameters
    ----------
    board : Board
        The board after a slide.

    Returns
    -------
    list[tuple[Board, float]]
        Each possible next board with its probability. Empty if no cell can receive a tile.

    Notes
    -----
    - The announced tile goes to any eligible cell with equal probability.
    - With a hint, the next hint is drawn from the bag and the bonus pool.
    - Without a hint, the placed tile itself is drawn and the next hint stays undrawn.
    """
    cells = eligible_cells(board)
    if not cells:
        return []

    if board.hint:
        tiles = [(board.hint, 1.0)]
    else:
        tiles = outcome_distribution(board)

    outcomes = []
    for position in cells:
        for tile, tile_probability in tiles:
            placed = board.copy()
            if placed.place(position, tile) == ILLEGAL:
                continue
            placed.node_kind = NodeKind.DECISION
            share = tile_probability / len(cells)

            # ##: Undrawn hint: the tile itself was the draw.
            if not board.hint:
                placed.bag_counts = _draw(board, tile)
                outcomes.append((placed, share))
                continue

            for hint, hint_probability in outcome_distribution(placed):
                child = placed.copy()
                child.hint = hint
                child.bag_counts = _draw(placed, hint)
                outcomes.append((child, share * hint_probability))
    return outcomes


def chance_value(board: Board, network: NTupleNetwork, depth: int) -> float:
    """
    Expected value of a chance node.

    Parameters
    ----------
    board : Board
        The board after a slide.
    network : NTupleNetwork
        Value function used at the leaves.
    depth : int
        Remaining plies; 0 or less makes the node a leaf.

    Returns
    -------
    float
        Probability-weighted value of the following decision nodes; terminal ones count as 0.
    """
    if depth <= 0:
        return network.evaluate(board)

    outcomes = chance_outcomes(board)
    if not outcomes:
        return network.evaluate(board)

    total, weight = 0.0, 0.0
    for child, probability in outcomes:
        value = decision_value(child, network, depth - 1)
        total += probability * (0.0 if value is None else value)
        weight += probability
    return total / weight


def decision_value(board: Board, network: NTupleNetwork, depth: int) -> float | None:
    """
    Best value reachable from a decision node.

    Returns
    -------
    float | None
        The network value at depth 0 or less. Otherwise the best ``reward + chance value`` over
        legal slides, or None if no slide is legal.
    """
    if depth <= 0:
        return network.evaluate(board)

    best = None
    for direction in DIRECTIONS:
        after, reward = after_state(board, direction)
        if reward == ILLEGAL:
            continue
        value = reward + chance_value(after, network, depth - 1)
        if best is None or value > best:
            best = value
    return best


def select_move(
    board: Board, network: NTupleNetwork, depth: int = 0, trajectory: Trajectory | None = None
) -> SearchResult:
    """
    Choose the slide to play on the real board.

    Parameters
    ----------
    board : Board
        The current board.
    network : NTupleNetwork
        Value function.
    depth : int, optional
        Plies to look ahead, the chance nodes below the root getting ``depth - 1``
        (default is 0, greedy).
    trajectory : Trajectory, optional
        If given, the features of the chosen board after the slide and the slide reward are
        recorded; on a terminal board, its own features and a zero reward are recorded.

    Returns
    -------
    SearchResult
        The chosen move (None when no slide is legal), the board after it, its reward and its value.
        Ties go to the lowest direction.
    """
    best = SearchResult(move=None, after=None, reward=0, value=None)
    for direction in DIRECTIONS:
        after, reward = after_state(board, direction)
        if reward == ILLEGAL:
            continue
        value = reward + chance_value(after, network, depth - 1)
        if best.value is None or value > best.value:
            best = SearchResult(move=direction, after=after, reward=reward, value=value)

    if trajectory is not None:
        if best.move is None:
            trajectory.record(network.features(board), 0)
        else:
            trajectory.record(network.features(best.after), best.reward)
    return best
