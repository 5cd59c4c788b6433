#!/usr/bin/env python3
"""
Hex Minesweeper - Main entry point.

Usage:
    python main.py summary [--data PATH] [--threshold T]
    python main.py evaluate [--agent {random,logic}] [--games N]
    python main.py compare [--games N]
    python main.py play [--delay S]
"""
import argparse
import logging
import sys
import time

import structlog

from hexsweeper import GameConfig, GridConfig, HexMinesweeperEnv, Session
from hexsweeper.agents import Evaluator, LogicAgent, RandomAgent


def configure_logging(level: str, json_output: bool = False) -> None:
    """Route structlog through the stdlib logging module."""
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper())
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_session(args: argparse.Namespace) -> Session:
    """Load the dataset or exit with the session's status line."""
    config = GameConfig(
        data_path=args.data,
        count_field=args.count_field,
        threshold=args.threshold,
        grid=GridConfig(
            h=args.grid_h,
            v=args.grid_v,
            tolerance=args.tolerance,
            bucket_size=args.bucket_size,
        ),
    )
    session = Session(config)
    if not session.load():
        print(session.status)
        sys.exit(1)
    print(session.status)
    return session


def summary(args: argparse.Namespace) -> None:
    """Print grid statistics and the count histogram."""
    session = load_session(args)
    stats = session.registry.summary()

    print(f"Cells: {stats['cells']} ({stats['inert']} without data)")
    print(f"Neighbor pairs: {stats['edges']}")
    print(f"View box: {session.registry.view_box}")
    print(f"Threshold: {session.board.threshold:g}")
    print("\nCount distribution:")
    for row in session.histogram.rows():
        print(f"  {row}")


def make_agent(name: str, session: Session):
    """Create an agent by name."""
    neighbors = session.registry.neighbor_lists()
    if name == "random":
        return RandomAgent(neighbors)
    return LogicAgent(neighbors)


def evaluate(args: argparse.Namespace) -> None:
    """Evaluate a specific agent."""
    session = load_session(args)
    agent = make_agent(args.agent, session)
    evaluator = Evaluator(
        session.registry, threshold=args.threshold, num_episodes=args.games
    )

    print(f"\nEvaluating {args.agent} over {args.games} games...")
    results = evaluator.evaluate(agent)

    print(f"Results for {args.agent}:")
    print(f"  Win rate: {results['win_rate']:.1%}")
    print(f"  Avg reward: {results['avg_reward']:.2f}")
    print(f"  Avg steps: {results['avg_steps']:.1f}")
    print(f"  Avg revealed: {results['avg_revealed']:.1f} cells")


def compare(args: argparse.Namespace) -> None:
    """Compare all agents."""
    session = load_session(args)
    agents = {
        "Random": make_agent("random", session),
        "Logic": make_agent("logic", session),
    }

    evaluator = Evaluator(
        session.registry, threshold=args.threshold, num_episodes=args.games
    )
    results = evaluator.compare(agents)

    print("\n" + "=" * 50)
    print("Agent Comparison Results")
    print("=" * 50)
    print(f"{'Agent':<20} {'Win Rate':<12} {'Avg Reward':<12} {'Avg Steps':<10}")
    print("-" * 50)

    for name, metrics in results.items():
        print(
            f"{name:<20} {metrics['win_rate']:>10.1%} "
            f"{metrics['avg_reward']:>10.2f} "
            f"{metrics['avg_steps']:>10.1f}"
        )


def play(args: argparse.Namespace) -> None:
    """Watch the logic agent play one game."""
    session = load_session(args)
    env = HexMinesweeperEnv(
        session.registry, threshold=args.threshold, render_mode="ansi"
    )
    agent = make_agent("logic", session)

    obs, _ = env.reset()
    done = False
    step = 0

    while not done and env.get_action_mask().any():
        action = agent.select_action(obs, env.get_action_mask())
        obs, reward, terminated, truncated, info = env.step(action)
        done = terminated or truncated
        step += 1

        print(f"\n=== Step {step} | cell {action} | reward {reward:+.1f} ===")
        print(env.render())
        time.sleep(args.delay)

    outcome = env.board.outcome_message()
    if outcome:
        title, message = outcome
        print(f"\n*** {title} {message} ***")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    defaults = GameConfig()
    grid_defaults = defaults.grid

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--data", default=defaults.data_path, help="GeoJSON file")
    common.add_argument(
        "--count-field", default=defaults.count_field, help="Count property name"
    )
    common.add_argument(
        "--threshold", type=float, default=defaults.threshold,
        help="Minimum count for a mine",
    )
    common.add_argument("--grid-h", type=float, default=grid_defaults.h, help="Hex width (m)")
    common.add_argument("--grid-v", type=float, default=grid_defaults.v, help="Hex pitch (m)")
    common.add_argument(
        "--tolerance", type=float, default=grid_defaults.tolerance,
        help="Relative neighbor distance tolerance",
    )
    common.add_argument(
        "--bucket-size", type=float, default=grid_defaults.bucket_size,
        help="Spatial hash bucket size (degrees)",
    )
    common.add_argument("--log-level", default="WARNING", help="Logging level")
    common.add_argument("--log-json", action="store_true", help="Log as JSON lines")

    parser = argparse.ArgumentParser(
        description="Hex Minesweeper - play minesweeper on geographic hex grids"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("summary", parents=[common], help="Show grid summary")

    eval_parser = subparsers.add_parser(
        "evaluate", parents=[common], help="Evaluate an agent"
    )
    eval_parser.add_argument(
        "--agent", choices=["random", "logic"], default="logic",
        help="Agent to evaluate",
    )
    eval_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    compare_parser = subparsers.add_parser(
        "compare", parents=[common], help="Compare all agents"
    )
    compare_parser.add_argument(
        "--games", type=int, default=100, help="Number of games per agent"
    )

    play_parser = subparsers.add_parser(
        "play", parents=[common], help="Watch the logic agent play"
    )
    play_parser.add_argument(
        "--delay", type=float, default=0.3, help="Delay between moves"
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        return

    configure_logging(args.log_level, args.log_json)

    if args.command == "summary":
        summary(args)
    elif args.command == "evaluate":
        evaluate(args)
    elif args.command == "compare":
        compare(args)
    elif args.command == "play":
        play(args)


if __name__ == "__main__":
    main()
