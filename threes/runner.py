# -*- coding: utf-8 -*-
"""
Play Threes games between a player and the stochastic environment.
"""
from __future__ import annotations

import logging
from collections import Counter, namedtuple

from tqdm import trange

from threes.agents import AgentConfiguration, LearningPlayer, Player, RandomPlayer, SearchPlayer
from threes.core.board import ILLEGAL, Board, tile_value
from threes.envs import StochasticEnvironment

logger = logging.getLogger(__name__)

EpisodeResult = namedtuple(typename="EpisodeResult", field_names=["score", "face_score", "moves", "max_rank"])

PLAYERS = {
    "random": RandomPlayer,
    "search": SearchPlayer,
    "learning": LearningPlayer,
}

# ##>: Tiles on the board when a game starts.
INITIAL_TILES = 9


def make_environment(text: str = '') -> StochasticEnvironment:
    """Build the environment from a property string (``seed``, ``entropy``)."""
    config = AgentConfiguration.from_properties(text, defaults='name=random role=environment')
    return StochasticEnvironment(seed=config.seed, entropy=config.entropy)


def _place_tile(board: Board, environment: StochasticEnvironment) -> bool:
    """Let the environment place the announced tile and announce the next one."""
    placement = environment.choose_action(board)
    if placement is None or board.place(placement.position, placement.rank) == ILLEGAL:
        return False
    environment.generate_hint(board)
    return True


def play_episode(
    player: Player, environment: StochasticEnvironment, initial_tiles: int = INITIAL_TILES
) -> EpisodeResult:
    """
    Play one game.

    Parameters
    ----------
    player : Player
        The player choosing slides.
    environment : StochasticEnvironment
        The environment placing tiles.
    initial_tiles : int, optional
        Tiles placed before the first slide (default is 9).

    Returns
    -------
    EpisodeResult
        Total reward, face score of the final grid, number of slides and highest rank reached.
    """
    board = Board()
    environment.open_episode()
    player.open_episode()

    # ##: Opening position.
    environment.generate_hint(board)
    for _ in range(initial_tiles):
        _place_tile(board, environment)

    score, moves = 0, 0
    while True:
        move = player.choose_action(board)
        if move is None:
            break

        reward = board.slide(move)
        if reward == ILLEGAL:
            logger.warning('Player chose an illegal slide %d, ending the game.', move)
            break
        score += reward
        moves += 1

        if not _place_tile(board, environment):
            break

    player.close_episode()
    environment.close_episode()
    return EpisodeResult(score=score, face_score=board.score, moves=moves, max_rank=board.max_rank)


def run(games: int, player: Player, environment: StochasticEnvironment) -> list[EpisodeResult]:
    """
    Play several games and close the player at the end.

    Parameters
    ----------
    games : int
        The number of games to play.
    player : Player
        The player; a learning player learns after every game.
    environment : StochasticEnvironment
        The environment.

    Returns
    -------
    list[EpisodeResult]
        One result per game. The player is closed even if a game fails.
    """
    results = []
    try:
        with trange(games) as period:
            for num in period:
                result = play_episode(player, environment)
                results.append(result)

                # ##: Log.
                period.set_description(f"Game: {num + 1}")
                period.set_postfix(score=result.score, face=result.face_score, max=tile_value(result.max_rank))
    finally:
        player.close()

    # ##: Final log.
    if results:
        frequency = Counter(tile_value(result.max_rank) for result in results)
        mean = sum(result.score for result in results) / len(results)
        logger.info('Played %d games, mean score %.1f, max tiles %s.', len(results), mean, dict(frequency))
    return results


if __name__ == "__main__":
    from argparse import ArgumentParser

    parser = ArgumentParser()
    parser.add_argument("--games", type=int, default=100)
    parser.add_argument("--player", type=str, choices=sorted(PLAYERS), default="learning")
    parser.add_argument("--player-args", type=str, default="")
    parser.add_argument("--environment-args", type=str, default="")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
    run(
        games=args.games,
        player=PLAYERS[args.player].from_properties(args.player_args),
        environment=make_environment(args.environment_args),
    )
