"""
Tests for the expectimax search: leaf scoring, chance expansion, terminal handling and recording.
"""
from unittest import TestCase, main

import numpy as np

from threes.core import DIRECTIONS, ILLEGAL, LEFT, Board, NodeKind, after_state
from threes.learning import Trajectory
from threes.ntuple import NTupleNetwork
from threes.search import chance_outcomes, chance_value, decision_value, select_move

LOCKED = np.array([[1, 3, 1, 3], [3, 1, 3, 1], [1, 3, 1, 3], [3, 1, 3, 1]])


class TestSelectMove(TestCase):
    """Top-level move choice."""

    @classmethod
    def setUpClass(cls):
        """One network with random weights shared by the tests."""
        cls.network = NTupleNetwork(contextual=False)
        generator = np.random.default_rng(0)
        for table in cls.network.tables:
            table[:] = generator.random(table.size, dtype=np.float32)

    def test_greedy_choice(self):
        """At depth 0 the move maximizes reward plus the value after the slide."""
        generator = np.random.default_rng(1)
        for _ in range(20):
            board = Board(tiles=generator.integers(0, 6, size=(4, 4)), hint=1)
            best_move, best_value = None, None
            for direction in DIRECTIONS:
                after, reward = after_state(board, direction)
                if reward == ILLEGAL:
                    continue
                value = reward + self.network.evaluate(after)
                if best_value is None or value > best_value:
                    best_move, best_value = direction, value

            result = select_move(board, self.network, depth=0)
            self.assertEqual(result.move, best_move)
            if best_move is not None:
                self.assertAlmostEqual(result.value, best_value, places=4)

    def test_depth_one_is_greedy(self):
        """Below the root, chance nodes of depth 0 are leaves."""
        generator = np.random.default_rng(2)
        for _ in range(10):
            board = Board(tiles=generator.integers(0, 6, size=(4, 4)), hint=2)
            greedy = select_move(board, self.network, depth=0)
            shallow = select_move(board, self.network, depth=1)
            self.assertEqual(shallow.move, greedy.move)
            self.assertEqual(shallow.value, greedy.value)

    def test_terminal_board(self):
        """No legal slide gives no move and no value."""
        board = Board(tiles=LOCKED)
        self.assertIsNone(decision_value(board, self.network, depth=1))
        result = select_move(board, self.network, depth=1)
        self.assertIsNone(result.move)
        self.assertIsNone(result.value)


class TestZeroNetwork(TestCase):
    """Search with an untrained network only sees rewards."""

    def setUp(self):
        self.network = NTupleNetwork(contextual=False)
        self.board = Board(tiles=np.array([[1, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4]), hint=2)

    def test_decision_value(self):
        """The 1 and the 2 merge when sliding left."""
        self.assertEqual(decision_value(self.board, self.network, depth=1), 9)
        self.assertEqual(select_move(self.board, self.network).move, LEFT)

    def test_decision_leaf(self):
        """A decision node at depth 0 is the network value of the board itself."""
        self.network.tables[1][:] = 0.25
        self.assertAlmostEqual(decision_value(self.board, self.network, depth=0), self.network.evaluate(self.board))
        self.assertAlmostEqual(decision_value(self.board, self.network, depth=0), 4.0)

    def test_deeper_search(self):
        """A full chance ply adds the best follow-up reward on average."""
        result = select_move(self.board, self.network, depth=3)
        self.assertIsNotNone(result.move)
        self.assertGreaterEqual(result.value, result.reward)

    def test_recording(self):
        """The chosen after-state and its reward are recorded."""
        trajectory = Trajectory()
        result = select_move(self.board, self.network, trajectory=trajectory)
        self.assertEqual(len(trajectory), 1)
        step = next(iter(trajectory))
        self.assertEqual(step.reward, 9)
        np.testing.assert_array_equal(step.features, self.network.features(result.after))

    def test_recording_terminal(self):
        """A terminal board is recorded with a zero reward."""
        trajectory = Trajectory()
        board = Board(tiles=LOCKED)
        select_move(board, self.network, trajectory=trajectory)
        step = next(iter(trajectory))
        self.assertEqual(step.reward, 0)
        np.testing.assert_array_equal(step.features, self.network.features(board))

    def test_leaf_value(self):
        """A chance node at depth 0 is the network value."""
        after, _ = after_state(self.board, LEFT)
        self.network.tables[0][:] = 0.5
        self.assertAlmostEqual(chance_value(after, self.network, depth=0), self.network.evaluate(after))


class TestChanceOutcomes(TestCase):
    """Expansion of chance nodes."""

    def setUp(self):
        board = Board(tiles=np.array([[1, 2, 0, 0], [3, 0, 0, 0], [0] * 4, [0] * 4]), hint=2, bag_counts=(4, 3, 4))
        self.after, _ = after_state(board, LEFT)

    def test_with_hint(self):
        """The hint lands on the right column and the next hint follows the bag."""
        outcomes = chance_outcomes(self.after)
        self.assertAlmostEqual(sum(probability for _, probability in outcomes), 1.0)
        self.assertEqual(len(outcomes), 4 * 3)
        for child, _ in outcomes:
            self.assertEqual(child.node_kind, NodeKind.DECISION)
            self.assertEqual(int((child.tiles[:, 3] == 2).sum()), 1)
            self.assertIn(child.hint, (1, 2, 3))
            self.assertEqual(sum(child.bag_counts), 10)

    def test_next_hint_probabilities(self):
        """Hints are weighted by the remaining copies."""
        outcomes = chance_outcomes(self.after)
        twos = sum(probability for child, probability in outcomes if child.hint == 2)
        self.assertAlmostEqual(twos, 3 / 11)

    def test_without_hint(self):
        """An undrawn hint is drawn as the placed tile."""
        self.after.hint = 0
        outcomes = chance_outcomes(self.after)
        self.assertEqual(len(outcomes), 4 * 3)
        self.assertAlmostEqual(sum(probability for _, probability in outcomes), 1.0)
        self.assertTrue(all(child.hint == 0 for child, _ in outcomes))


if __name__ == "__main__":
    main()
