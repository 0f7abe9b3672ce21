# -*- coding: utf-8 -*-
"""
Play 2048 games with random legal moves and report the results.
"""
import logging
from argparse import ArgumentParser
from collections import Counter
from dataclasses import dataclass

from numpy.random import Generator, default_rng
from tqdm import trange

from grid2048.config import GameConfig, SpawnPolicy
from grid2048.envs import GameSession
from grid2048.utils import format_board

logger = logging.getLogger(__name__)


@dataclass
class GameSummary:
    """Result of one finished game."""

    score: int
    max_tile: int
    moves: int


def play_random_game(session: GameSession, rng: Generator, max_steps: int | None = None) -> GameSummary:
    """
    Play a game to the end, choosing uniformly among the moves that change the grid.

    Parameters
    ----------
    session : GameSession
        The session to play. It is not reset first.
    rng : Generator
        Random source for move selection.
    max_steps : int, optional
        Stop after this many steps even if the game is not over.

    Returns
    -------
    GameSummary
        Score, largest tile and number of grid-changing moves.
    """
    steps = 0
    while not session.is_finished and (max_steps is None or steps < max_steps):
        legal = session.grid.legal_moves()
        if not legal:
            break
        direction = legal[int(rng.integers(len(legal)))]
        session.step(direction)
        steps += 1

    return GameSummary(score=session.score, max_tile=session.grid.max_tile, moves=session.moves)


def evaluate(games: int, config: GameConfig, show_progress: bool = True) -> list[GameSummary]:
    """
    Play several random games with one session.

    Parameters
    ----------
    games : int
        Number of games to play.
    config : GameConfig
        Rules of the session; its seed also drives move selection.
    show_progress : bool, optional
        Whether to display a progress bar (default is True).

    Returns
    -------
    list[GameSummary]
        One summary per game, in play order.
    """
    rng = default_rng(config.seed)
    session = GameSession(config=config, rng=rng)
    summaries = []

    with trange(games, disable=not show_progress) as period:
        for num in period:
            if num > 0:
                session.reset()
            summary = play_random_game(session, rng)
            summaries.append(summary)

            # ##: Log.
            period.set_description(f'Game: {num + 1}')
            period.set_postfix(score=summary.score, max=summary.max_tile)
            logger.info(
                'Game %d: score=%d max_tile=%d moves=%d', num + 1, summary.score, summary.max_tile, summary.moves
            )
            logger.debug('Final board:\n%s', format_board(session.board))

    return summaries


def main(argv: list[str] | None = None) -> dict[int, int]:
    """Command line entry point. Returns the frequency of each max tile."""
    parser = ArgumentParser(description='Play 2048 games with random legal moves.')
    parser.add_argument('--games', type=int, default=10)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--two-probability', type=float, default=GameConfig.two_probability)
    parser.add_argument(
        '--policy', choices=[policy.value for policy in SpawnPolicy], default=SpawnPolicy.ON_CHANGE.value
    )
    parser.add_argument('--no-progress', action='store_true')
    parser.add_argument('--log-level', default='WARNING')
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='%(asctime)s %(name)s %(levelname)s %(message)s')

    config = GameConfig(two_probability=args.two_probability, spawn_policy=args.policy, seed=args.seed)
    summaries = evaluate(args.games, config, show_progress=not args.no_progress)

    # ##: Final log.
    frequency = dict(Counter(summary.max_tile for summary in summaries))
    best = max(summary.score for summary in summaries) if summaries else 0
    print(f'Played {len(summaries)} games, best score: {best}, max tiles: {frequency}')
    return frequency


if __name__ == '__main__':
    main()
