# -*- coding: utf-8 -*-
"""
Players of Threes: a random mover, an expectimax player and a learning expectimax player.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from numpy.random import PCG64DXSM, default_rng

from threes.agents.config import AgentConfiguration
from threes.core.board import DIRECTIONS, ILLEGAL, Board, after_state
from threes.learning.td import td_backward
from threes.learning.trajectory import Trajectory
from threes.ntuple.network import NTupleNetwork
from threes.search.expectimax import select_move

logger = logging.getLogger(__name__)


class Player(ABC):
    """
    A role that chooses slides.

    Methods
    -------
    open_episode()
        Called before the first move of a game.
    close_episode()
        Called once the game is over.
    choose_action(board)
        Return the slide to play, or None to give up.
    close()
        Release the player at shutdown.
    """

    def open_episode(self) -> None:
        """Prepare for a new game."""

    def close_episode(self) -> None:
        """Finish the current game."""

    @abstractmethod
    def choose_action(self, board: Board) -> int | None:
        """Choose a slide for the board."""

    def close(self) -> None:
        """Release the player."""


class RandomPlayer(Player):
    """Plays a random legal slide."""

    def __init__(self, seed: int | None = None):
        self._generator = default_rng(seed) if seed is not None else default_rng(PCG64DXSM())

    @classmethod
    def from_properties(cls, text: str = '') -> RandomPlayer:
        config = AgentConfiguration.from_properties(text, defaults='name=random role=player')
        return cls(seed=config.seed)

    def choose_action(self, board: Board) -> int | None:
        for direction in self._generator.permutation(len(DIRECTIONS)):
            if after_state(board, int(direction))[1] != ILLEGAL:
                return int(direction)
        return None


class SearchPlayer(Player):
    """
    Plays the slide chosen by expectimax search over an n-tuple network.

    Attributes
    ----------
    network : NTupleNetwork
        Value function used at the leaves of the search.
    depth : int
        Plies searched; 0 and 1 are greedy.
    """

    def __init__(self, network: NTupleNetwork, depth: int = 0):
        if depth < 0:
            raise ValueError(f'depth must be >= 0, got {depth}')
        self.network = network
        self.depth = depth

    @staticmethod
    def _network(config: AgentConfiguration) -> NTupleNetwork:
        network = NTupleNetwork(contextual=config.context, init=config.init)
        if config.load:
            network.load(config.load)
        return network

    @classmethod
    def from_properties(cls, text: str = '') -> SearchPlayer:
        config = AgentConfiguration.from_properties(text, defaults='name=search role=player')
        return cls(network=cls._network(config), depth=config.depth)

    def choose_action(self, board: Board) -> int | None:
        return select_move(board, self.network, self.depth).move


class LearningPlayer(SearchPlayer):
    """
    Expectimax player that learns its network by TD(0) at the end of every game.

    Attributes
    ----------
    trajectory : Trajectory
        Boards reached during the current game.
    learning_rate : float
        TD step size.
    normalize : bool
        Whether the step size is divided by the number of patterns.
    save_path : str | None
        Where the weights are written on ``close``.
    """

    def __init__(
        self,
        network: NTupleNetwork,
        depth: int = 0,
        learning_rate: float = 0.1,
        normalize: bool = False,
        save_path: str | None = None,
    ):
        super().__init__(network=network, depth=depth)
        self.learning_rate = learning_rate
        self.normalize = normalize
        self.save_path = save_path
        self.trajectory = Trajectory()

    @classmethod
    def from_properties(cls, text: str = '') -> LearningPlayer:
        config = AgentConfiguration.from_properties(text, defaults='name=learning role=player')
        return cls(
            network=cls._network(config),
            depth=config.depth,
            learning_rate=config.alpha,
            normalize=config.normalize,
            save_path=config.save or None,
        )

    def open_episode(self) -> None:
        self.trajectory.clear()

    def choose_action(self, board: Board) -> int | None:
        return select_move(board, self.network, self.depth, trajectory=self.trajectory).move

    def close_episode(self) -> None:
        steps = len(self.trajectory)
        error = td_backward(self.network, self.trajectory, self.learning_rate, normalize=self.normalize)
        logger.debug('Learned from %d steps, mean TD error %.3f.', steps, error)

    def close(self) -> None:
        if self.save_path:
            self.network.save(self.save_path)
