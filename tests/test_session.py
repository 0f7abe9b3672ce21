"""
Tests for the game session.

Tests cover the score accumulator, both spawn policies, the playable/over state machine and seeding.
"""

import threading
from unittest import TestCase, main

import numpy as np
from numpy.random import default_rng

from grid2048.config import GameConfig, SpawnPolicy
from grid2048.core.gamemove import Direction
from grid2048.envs.grid import Grid
from grid2048.envs.session import GameSession, Status, StepResult


def load(session: GameSession, cells) -> None:
    """Replace the session grid content."""
    session.grid._board[...] = Grid.from_cells(cells).cells


class TestSessionLifecycle(TestCase):
    """Test creation and reset."""

    def test_starts_with_two_tiles(self):
        session = GameSession(GameConfig(seed=1))

        self.assertEqual(np.count_nonzero(session.board), 2)
        self.assertTrue(np.all(np.isin(session.board[session.board != 0], [2, 4])))
        self.assertEqual(session.score, 0)
        self.assertIs(session.status, Status.PLAYABLE)

    def test_initial_tiles_configurable(self):
        session = GameSession(GameConfig(initial_tiles=5, seed=1))
        self.assertEqual(np.count_nonzero(session.board), 5)

    def test_reset_seed_reproducibility(self):
        session = GameSession()
        first = session.reset(seed=42).copy()
        second = session.reset(seed=42).copy()

        np.testing.assert_array_equal(first, second)

    def test_config_seed_reproducibility(self):
        first = GameSession(GameConfig(seed=9))
        second = GameSession(GameConfig(seed=9))

        np.testing.assert_array_equal(first.board, second.board)
        first.step(Direction.LEFT)
        second.step(Direction.LEFT)
        np.testing.assert_array_equal(first.board, second.board)

    def test_reset_clears_score(self):
        session = GameSession(GameConfig(seed=0))
        load(session, [[2, 2, 0, 0]] + [[0] * 4] * 3)
        session.step(Direction.LEFT)
        self.assertEqual(session.score, 4)

        session.reset()
        self.assertEqual(session.score, 0)
        self.assertEqual(session.moves, 0)
        self.assertEqual(np.count_nonzero(session.board), 2)

    def test_board_is_read_only(self):
        session = GameSession()
        with self.assertRaises(ValueError):
            session.board[0, 0] = 2


class TestSessionStep(TestCase):
    """Test moves, scoring and spawning."""

    def test_score_accumulates(self):
        session = GameSession(GameConfig(seed=0))
        load(session, [[2, 2, 4, 4], [0] * 4, [0] * 4, [0] * 4])

        result = session.step(Direction.LEFT)

        self.assertEqual(result.score_delta, 12)
        self.assertEqual(session.score, 12)
        self.assertTrue(result.changed)
        self.assertTrue(result.spawned)
        self.assertFalse(result.done)
        self.assertEqual(session.moves, 1)

    def test_step_accepts_names_and_integers(self):
        session = GameSession(GameConfig(seed=0))
        load(session, [[0, 0, 0, 2]] + [[0] * 4] * 3)

        self.assertTrue(session.step('left').changed)
        with self.assertRaises(ValueError):
            session.step('sideways')
        with self.assertRaises(ValueError):
            session.step(9)

    def test_on_change_skips_spawn_after_noop(self):
        session = GameSession(GameConfig(spawn_policy=SpawnPolicy.ON_CHANGE, seed=0))
        load(session, [[2, 0, 0, 0]] + [[0] * 4] * 3)

        result = session.step(Direction.LEFT)

        self.assertFalse(result.changed)
        self.assertFalse(result.spawned)
        self.assertEqual(result.score_delta, 0)
        self.assertEqual(np.count_nonzero(session.board), 1)

    def test_always_spawns_after_noop(self):
        session = GameSession(GameConfig(spawn_policy=SpawnPolicy.ALWAYS, seed=0))
        load(session, [[2, 0, 0, 0]] + [[0] * 4] * 3)

        result = session.step(Direction.LEFT)

        self.assertFalse(result.changed)
        self.assertTrue(result.spawned)
        self.assertEqual(np.count_nonzero(session.board), 2)
        self.assertEqual(session.moves, 0)

    def test_results_compare_by_value(self):
        """Identical seeded sessions produce equal, equally hashed step results."""
        first = GameSession(GameConfig(seed=3)).step(Direction.LEFT)
        second = GameSession(GameConfig(seed=3)).step(Direction.LEFT)

        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))

        # ##>: Any differing field breaks equality.
        other = StepResult(first.board.copy(), first.score_delta + 4, first.changed, first.spawned, first.done)
        self.assertNotEqual(first, other)
        other_board = first.board.copy()
        other_board[0, 0] = 2048
        self.assertNotEqual(first, StepResult(other_board, first.score_delta, first.changed, first.spawned, first.done))

    def test_step_logs_at_debug(self):
        session = GameSession(GameConfig(seed=0))
        load(session, [[2, 2, 0, 0]] + [[0] * 4] * 3)

        with self.assertLogs('grid2048.envs.session', level='DEBUG') as logs:
            session.step(Direction.LEFT)

        self.assertTrue(any('Step LEFT: delta 4, changed True, spawned True' in line for line in logs.output))

    def test_direct_grid_moves_skip_the_score(self):
        """Only step accounts for score; moving the grid directly does not."""
        session = GameSession(GameConfig(seed=0))
        load(session, [[2, 2, 0, 0]] + [[0] * 4] * 3)

        self.assertEqual(session.grid.move(Direction.LEFT), 4)
        self.assertEqual(session.score, 0)
        self.assertEqual(session.moves, 0)

    def test_result_board_is_a_copy(self):
        session = GameSession(GameConfig(seed=0))
        result = session.step(Direction.UP)
        result.board[...] = 0

        self.assertGreater(np.count_nonzero(session.board), 0)


class TestSessionGameOver(TestCase):
    """Test the playable/over state machine."""

    FULL_WITH_PAIR = [[2, 2, 4, 8], [4, 8, 16, 32], [8, 16, 32, 64], [16, 32, 64, 128]]

    def test_always_policy_ends_on_failed_spawn(self):
        """A no-op move on a full grid fails to spawn and ends the game."""
        session = GameSession(GameConfig(spawn_policy=SpawnPolicy.ALWAYS, seed=0))
        load(session, self.FULL_WITH_PAIR)

        # ##>: Up changes nothing: no vertical pairs, no empty cells.
        result = session.step(Direction.UP)

        self.assertFalse(result.spawned)
        self.assertTrue(result.done)
        self.assertIs(session.status, Status.OVER)

    def test_on_change_policy_keeps_playing_after_noop(self):
        session = GameSession(GameConfig(spawn_policy=SpawnPolicy.ON_CHANGE, seed=0))
        load(session, self.FULL_WITH_PAIR)

        result = session.step(Direction.UP)

        self.assertFalse(result.done)
        self.assertIs(session.status, Status.PLAYABLE)

        result = session.step(Direction.LEFT)
        self.assertEqual(result.score_delta, 4)
        self.assertTrue(result.spawned)

    def test_stuck_grid_ends_the_game(self):
        """A spawn that leaves no legal move ends the game."""
        session = GameSession(GameConfig(two_probability=1.0, seed=0))
        # ##>: Moving left leaves one hole at the end of the first row; the spawned 2 fits the pattern.
        load(session, [[0, 4, 8, 16], [2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4]])

        result = session.step(Direction.LEFT)

        self.assertTrue(result.spawned)
        self.assertEqual(session.board.tolist()[0], [4, 8, 16, 2])
        self.assertTrue(result.done)
        self.assertTrue(session.is_finished)

    def test_over_is_terminal(self):
        session = GameSession(GameConfig(spawn_policy=SpawnPolicy.ALWAYS, seed=0))
        load(session, self.FULL_WITH_PAIR)
        session.step(Direction.UP)
        score = session.score

        result = session.step(Direction.LEFT)

        self.assertTrue(result.done)
        self.assertEqual(result.score_delta, 0)
        self.assertEqual(session.score, score)
        self.assertEqual(session.board.tolist(), self.FULL_WITH_PAIR)

    def test_random_game_terminates(self):
        """A game played with random legal moves ends, and the score is consistent."""
        rng = default_rng(4)
        session = GameSession(GameConfig(seed=4))
        total = 0
        for _ in range(5000):
            legal = session.grid.legal_moves()
            if session.is_finished or not legal:
                break
            total += session.step(legal[int(rng.integers(len(legal)))]).score_delta

        self.assertTrue(session.is_finished)
        self.assertEqual(session.score, total)


class TestSessionThreads(TestCase):
    """Test concurrent steps on one session."""

    def test_concurrent_steps_keep_score_consistent(self):
        """Steps from several threads are serialised: the score is the sum of every delta."""
        session = GameSession(GameConfig(spawn_policy=SpawnPolicy.ALWAYS, seed=8))
        workers = 4
        steps = 400
        barrier = threading.Barrier(workers)
        results = [[] for _ in range(workers)]

        def play(index: int) -> None:
            barrier.wait()
            for num in range(steps):
                results[index].append(session.step(Direction((num + index) % 4)))

        threads = [threading.Thread(target=play, args=(index,)) for index in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        flat = [result for chunk in results for result in chunk]
        self.assertEqual(len(flat), workers * steps)
        self.assertEqual(session.score, sum(result.score_delta for result in flat))
        self.assertEqual(session.moves, sum(result.changed for result in flat))

        # ##>: Shape and tile invariants hold after the concurrent play.
        board = session.board
        tiles = board[board != 0]
        self.assertEqual(board.shape, (4, 4))
        self.assertTrue(np.all(tiles >= 2))
        self.assertTrue(np.all((tiles & (tiles - 1)) == 0))


if __name__ == '__main__':
    main()
