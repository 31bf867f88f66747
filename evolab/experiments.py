"""Batch runs of the engine for parameter comparisons.

``DEFAULT_KNAPSACK_SUITE`` reproduces the classic batch of knapsack runs:
small vs. large populations, more items, higher mutation and lower
crossover probability.
"""
import dataclasses
import logging
import random
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from evolab.config import GAConfig
from evolab.engine import EvolutionEngine
from evolab.problems import KnapsackProblem

logger = logging.getLogger(__name__)

# name, population size, items, crossover probability, mutation probability, generations
DEFAULT_KNAPSACK_SUITE: List[Tuple[str, int, int, float, float, int]] = [
    ("Test A (Small Population)", 100, 20, 0.8, 0.1, 100),
    ("Test B (Small Population, More Items)", 100, 100, 0.8, 0.1, 100),
    ("Test C (Moderate Population)", 500, 40, 0.8, 0.1, 200),
    ("Test D (Large Population)", 1000, 40, 0.8, 0.1, 200),
    ("Test E (Higher Mutation)", 500, 40, 0.8, 0.2, 200),
    ("Test F (Higher Mutation and Lower Crossover Probability)", 500, 40, 0.4, 0.4, 300),
]


def knapsack_case(name: str, population_size: int, num_items: int, crossover_probability: float,
                  mutation_probability: float, generations: int, **overrides):
    """Turn one suite row into a (name, problem factory, config) case"""
    config = GAConfig.for_knapsack(
        population_size=population_size, genotype_length=num_items,
        crossover_probability=crossover_probability, mutation_probability=mutation_probability,
        generations=generations, **overrides)
    return name, (lambda rng: KnapsackProblem.generate(num_items, rng)), config


def run_experiment(name: str, problem_factory: Callable[[random.Random], object], config: GAConfig) -> Dict:
    """Run one configuration once and summarise the outcome"""
    rng = random.Random(config.seed)
    problem = problem_factory(rng)

    start_time = time.time()
    result = EvolutionEngine(problem, config, rng=rng).run()
    elapsed = time.time() - start_time

    summary = {
        "name": name,
        "seed": config.seed,
        "best_fitness": result.best_fitness,
        "generations_run": result.generations_run,
        "time": elapsed,
        "fitness_history": [stats.best_fitness for stats in result.history],
    }
    summary.update(problem.describe(result.best.genotype))
    return summary


def run_suite(cases: Sequence[Tuple[str, Callable, GAConfig]], runs: int = 3,
              base_seed: Optional[int] = 0) -> pd.DataFrame:
    """Run every case ``runs`` times and aggregate the final best fitness.

    Run ``i`` of a case uses seed ``base_seed + i`` so repeated suites give
    the same table. The frame has one row per case, sorted by mean best
    fitness, highest first.
    """
    rows = []
    for name, problem_factory, config in cases:
        print(f"Running {name}...")
        best_values = []
        times = []
        for run in range(runs):
            seed = None if base_seed is None else base_seed + run
            run_config = dataclasses.replace(config, seed=seed)
            summary = run_experiment(name, problem_factory, run_config)
            best_values.append(summary["best_fitness"])
            times.append(summary["time"])
            print(f"  Run {run + 1}: Best Fitness = {summary['best_fitness']:.4f}, Time = {summary['time']:.2f}s")

        rows.append({
            "name": name,
            "runs": runs,
            "avg_best_fitness": float(np.mean(best_values)),
            "best_fitness": float(np.max(best_values)),
            "std_best_fitness": float(np.std(best_values)),
            "avg_time": float(np.mean(times)),
        })

    frame = pd.DataFrame(rows)
    if not frame.empty:
        frame = frame.sort_values("avg_best_fitness", ascending=False).reset_index(drop=True)
    return frame


def print_comparison_table(frame: pd.DataFrame):
    """Print a ranked comparison of suite results"""
    print("\n" + "=" * 100)
    print(f"{'Case':<58} {'Avg Best':<10} {'Best':<10} {'Std Dev':<10} {'Avg Time':<10} {'Rank':<5}")
    print("=" * 100)
    for rank, row in enumerate(frame.itertuples(index=False), 1):
        print(f"{row.name:<58} {row.avg_best_fitness:<10.2f} {row.best_fitness:<10.2f} "
              f"{row.std_best_fitness:<10.2f} {row.avg_time:<10.2f} {rank:<5}")
    print("=" * 100)
    if not frame.empty:
        print(f"Best case by average fitness: {frame.iloc[0]['name']} (avg: {frame.iloc[0]['avg_best_fitness']:.2f})")
