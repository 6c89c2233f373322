"""
Tests for the stochastic environment: entry cells, bag sampling, bonus tiles and hints.
"""
from collections import Counter
from unittest import TestCase, main

import numpy as np
from numpy.random import default_rng

from threes.core import DOWN, LEFT, UP, Board
from threes.envs import (
    BONUS_PROBABILITY,
    BonusPool,
    StochasticEnvironment,
    TileBag,
    bonus_ranks,
    eligible_cells,
    outcome_distribution,
    remove_from_counts,
)


class TestEligibleCells(TestCase):
    """New tiles enter from the edge opposite to the last slide."""

    def test_no_move_yet(self):
        """Before the first slide every empty cell is eligible."""
        board = Board()
        board.place(5, 1)
        self.assertEqual(len(eligible_cells(board)), 15)
        self.assertNotIn(5, eligible_cells(board))

    def test_after_up(self):
        """After sliding up, tiles enter on the bottom row."""
        board = Board(last_move=UP)
        board.place(12, 2)
        self.assertEqual(eligible_cells(board), [13, 14, 15])

    def test_after_left(self):
        """After sliding left, tiles enter on the right column."""
        self.assertEqual(eligible_cells(Board(last_move=LEFT)), [3, 7, 11, 15])


class TestTileBag(TestCase):
    """Base tiles are drawn without replacement."""

    def test_every_bag_is_balanced(self):
        """Each run of twelve draws holds four tiles of every base rank."""
        bag = TileBag(default_rng(3))
        for _ in range(20):
            drawn = Counter(bag.draw() for _ in range(12))
            self.assertEqual(drawn, Counter({1: 4, 2: 4, 3: 4}))
            self.assertEqual(len(bag), 0)

    def test_bags_are_reshuffled(self):
        """Consecutive bags come in different orders."""
        bag = TileBag(default_rng(5))
        orders = {tuple(bag.draw() for _ in range(12)) for _ in range(30)}
        self.assertGreater(len(orders), 1)

    def test_counts(self):
        """Counts track the remaining tiles and the bag refills itself."""
        bag = TileBag(default_rng(0))
        self.assertEqual(bag.counts, (0, 0, 0))
        rank = bag.draw()
        self.assertEqual(sum(bag.counts), 11)
        self.assertEqual(bag.counts[rank - 1], 3)

    def test_remove_from_counts(self):
        """Drawing from an exhausted bag draws from a fresh one."""
        self.assertEqual(remove_from_counts((4, 4, 4), 2), (4, 3, 4))
        self.assertEqual(remove_from_counts((0, 0, 0), 3), (4, 4, 3))


class TestBonusPool(TestCase):
    """Bonus tiles appear once the board reaches a 48."""

    def test_bonus_ranks(self):
        """The bonus ceiling is three ranks below the highest rank."""
        self.assertEqual(bonus_ranks(6), ())
        self.assertEqual(bonus_ranks(7), (4,))
        self.assertEqual(bonus_ranks(9), (4, 5, 6))

    def test_pool_grows(self):
        """One rank joins the pool each time the ceiling rises."""
        pool = BonusPool(default_rng(0))
        pool.sync(6)
        self.assertEqual(pool.ranks, [])
        pool.sync(7)
        self.assertEqual(pool.ranks, [4])
        pool.sync(9)
        self.assertEqual(pool.ranks, [4, 5, 6])

    def test_empty_pool(self):
        """An empty pool never serves a draw."""
        pool = BonusPool(default_rng(0), probability=1.0)
        self.assertIsNone(pool.draw())
        self.assertEqual(pool.total_draws, 1)

    def test_certain_draw(self):
        """With probability one the first draw is a bonus."""
        pool = BonusPool(default_rng(0), probability=1.0)
        pool.sync(7)
        self.assertEqual(pool.draw(), 4)
        self.assertEqual(pool.bonus_draws, 1)

    def test_share_is_capped(self):
        """The realised bonus share never exceeds the target rate."""
        pool = BonusPool(default_rng(11))
        pool.sync(10)
        for _ in range(2000):
            pool.draw()
            self.assertLessEqual(pool.bonus_draws / pool.total_draws, BONUS_PROBABILITY)
        self.assertGreater(pool.bonus_draws, 0)


class TestOutcomeDistribution(TestCase):
    """Distribution of the next draw."""

    def test_full_bag(self):
        """A full bag gives every base rank a third."""
        outcomes = dict(outcome_distribution(Board()))
        for rank in (1, 2, 3):
            self.assertAlmostEqual(outcomes[rank], 1 / 3)

    def test_partial_bag(self):
        """Ranks with no copy left are skipped."""
        outcomes = dict(outcome_distribution(Board(bag_counts=(0, 2, 1))))
        self.assertEqual(set(outcomes), {2, 3})
        self.assertAlmostEqual(outcomes[2], 2 / 3)

    def test_exhausted_bag(self):
        """An exhausted bag is refilled before the draw."""
        outcomes = dict(outcome_distribution(Board(bag_counts=(0, 0, 0))))
        self.assertAlmostEqual(outcomes[1], 1 / 3)

    def test_bonus_branches(self):
        """Every bonus rank shares the bonus probability."""
        outcomes = dict(outcome_distribution(Board(max_rank=8)))
        self.assertAlmostEqual(outcomes[4], BONUS_PROBABILITY / 2)
        self.assertAlmostEqual(outcomes[5], BONUS_PROBABILITY / 2)
        self.assertAlmostEqual(sum(outcomes.values()), 1.0)


class TestStochasticEnvironment(TestCase):
    """Hints and placements."""

    def setUp(self):
        self.environment = StochasticEnvironment(seed=1)
        self.environment.open_episode()

    def test_generate_hint(self):
        """A hint is a base rank, announced on the board with the bag counts."""
        board = Board()
        rank = self.environment.generate_hint(board)
        self.assertIn(rank, (1, 2, 3))
        self.assertEqual(board.hint, rank)
        self.assertEqual(sum(board.bag_counts), 11)

    def test_hints_follow_the_bag(self):
        """Twelve hints empty one bag."""
        board = Board()
        hints = Counter(self.environment.generate_hint(board) for _ in range(12))
        self.assertEqual(hints, Counter({1: 4, 2: 4, 3: 4}))
        self.assertEqual(board.bag_counts, (0, 0, 0))

    def test_choose_action(self):
        """The announced tile goes to the entry edge."""
        board = Board(last_move=DOWN, hint=2)
        placement = self.environment.choose_action(board)
        self.assertIn(placement.position, (0, 1, 2, 3))
        self.assertEqual(placement.rank, 2)

    def test_no_eligible_cell(self):
        """A full entry edge leaves nothing to place."""
        board = Board(tiles=np.array([[1, 2, 3, 1], [0] * 4, [0] * 4, [0] * 4]), last_move=DOWN, hint=1)
        self.assertIsNone(self.environment.choose_action(board))

    def test_undrawn_hint(self):
        """Without a hint, the tile is drawn on the spot."""
        placement = self.environment.choose_action(Board())
        self.assertIn(placement.rank, (1, 2, 3))

    def test_seeded_runs_repeat(self):
        """The same seed gives the same hints and cells."""
        runs = []
        for _ in range(2):
            environment = StochasticEnvironment(seed=7)
            board = Board()
            runs.append([(environment.generate_hint(board), environment.choose_action(board)) for _ in range(20)])
        self.assertEqual(runs[0], runs[1])

    def test_invalid_entropy(self):
        """Only seeded and system entropy are known."""
        with self.assertRaises(ValueError):
            StochasticEnvironment(entropy='quantum')


if __name__ == "__main__":
    main()
