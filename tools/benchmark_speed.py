"""
Performance Benchmark
=====================

Measures game tick and environment step throughput with a random dropper.

Usage:
    python -m tools.benchmark_speed [--steps S] [--drop-prob P] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from cheese_stack.logging_config import setup_logging
from cheese_stack.stack_core.config_loader import load_config
from cheese_stack.stack_core.env_gym import StackEnv
from cheese_stack.stack_core.game import StackGame


def benchmark_core_game(
    num_steps: int = 10000,
    drop_prob: float = 0.05,
    seed: int = 42
) -> dict:
    """
    Benchmark raw StackGame without Gym overhead.

    Args:
        num_steps: Number of ticks.
        drop_prob: Chance of calling act() before each tick.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = StackGame(config=config)
    rng = np.random.default_rng(seed)
    drops = rng.random(num_steps) < drop_prob

    game.start()
    rounds = 0
    start = time.perf_counter()

    for drop in drops:
        if drop:
            game.act()
        game.tick(1.0)
        if game.is_over:
            rounds += 1
            game.start()

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_steps": num_steps,
        "rounds": rounds,
        "high_score": game.high_score,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_single_env(
    num_steps: int = 10000,
    drop_prob: float = 0.05,
    seed: int = 42
) -> dict:
    """
    Benchmark StackEnv, including snapshot and observation packing.

    Args:
        num_steps: Number of steps to run.
        drop_prob: Chance of choosing the drop action.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = StackEnv()
    rng = np.random.default_rng(seed)
    actions = (rng.random(num_steps) < drop_prob).astype(np.int64)

    env.reset(seed=seed)
    episodes = 0
    start = time.perf_counter()

    for action in actions:
        _, _, terminated, truncated, _ = env.step(int(action))
        if terminated or truncated:
            episodes += 1
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "single_env",
        "num_steps": num_steps,
        "rounds": episodes,
        "high_score": env.game.high_score,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(steps: int = 10000, drop_prob: float = 0.05) -> list:
    """Run both benchmarks and print a summary."""
    results = []

    print("=" * 60)
    print("CHEESE STACK PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    for label, fn in (("StackGame (raw)", benchmark_core_game), ("StackEnv", benchmark_single_env)):
        print(f"Benchmarking {label}...")
        result = fn(num_steps=steps, drop_prob=drop_prob)
        results.append(result)
        print(f"  Steps/sec: {result['steps_per_second']:.1f}")
        print(f"  ms/step:   {result['ms_per_step']:.4f}")
        print(f"  Rounds:    {result['rounds']} (high score {result['high_score']})")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 44)
    for r in results:
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.4f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Cheese Stack performance")
    parser.add_argument("--steps", type=int, default=10000, help="Steps per benchmark")
    parser.add_argument("--drop-prob", type=float, default=0.05,
                        help="Probability of dropping on each step")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")
    parser.add_argument("--log-level", default="WARNING",
                        help="Game log level; INFO logs every round (default: WARNING)")

    args = parser.parse_args()
    setup_logging(args.log_level)

    steps = 1000 if args.quick else args.steps

    run_all_benchmarks(steps=steps, drop_prob=args.drop_prob)

    return 0


if __name__ == "__main__":
    sys.exit(main())
