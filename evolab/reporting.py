from typing import Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from evolab.engine import GenerationStats
from evolab.individual import Individual
from evolab.problems import KnapsackProblem, TSPProblem


def format_best_individual(problem, individual: Individual, generation: int) -> str:
    """Human-readable report of the best individual of a generation"""
    lines = []
    if isinstance(problem, TSPProblem):
        distance = problem.tour_length(individual.genotype)
        lines.append(f"Generation {generation} Best Distance = {distance:.4f} (Fitness = {individual.fitness:.6f})")
        lines.append(f"Tour: {individual.genotype}")
    else:
        info = problem.describe(individual.genotype)
        lines.append(f"Generation {generation} Best Fitness = {individual.fitness:.4f}")
        lines.append(f"Best genotype: {info['genotype']}")
        if isinstance(problem, KnapsackProblem):
            feasibility = "Feasible" if info["feasible"] else "Infeasible"
            lines.append(f"Total Value: {info['total_value']:.1f}")
            lines.append(f"Total Weight: {info['total_weight']:.1f} ({feasibility}, capacity {problem.capacity})")
    lines.append("-" * 30)
    return "\n".join(lines)


def print_best_individual(problem, individual: Individual, generation: int):
    print(format_best_individual(problem, individual, generation))


def plot_fitness_history(history: Sequence[GenerationStats], path: str, title: str = "Fitness Evolution",
                         ylabel: str = "Fitness (higher is better)"):
    """Save the best and mean fitness per generation as an image"""
    generations = [stats.generation for stats in history]
    plt.figure(figsize=(10, 6))
    plt.plot(generations, [stats.best_fitness for stats in history], label="Best Fitness")
    plt.plot(generations, [stats.mean_fitness for stats in history], label="Average Fitness")
    plt.xlabel("Generation")
    plt.ylabel(ylabel)
    plt.title(title)
    plt.legend()
    plt.grid(True)
    plt.savefig(path)
    plt.close()
    return path
