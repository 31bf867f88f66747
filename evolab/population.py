import random
from typing import Callable, Iterable, List, Optional

import numpy as np

from evolab.errors import EmptyPopulationError
from evolab.genotype import Genotype
from evolab.individual import Individual


class Population:
    """Ordered collection of individuals for one generation"""

    def __init__(self, individuals: Optional[Iterable[Individual]] = None):
        self.individuals: List[Individual] = list(individuals) if individuals is not None else []

    @classmethod
    def random(cls, size: int, genotype_factory: Callable[[random.Random], Genotype],
               rng: random.Random) -> "Population":
        """Create ``size`` individuals with independently drawn genotypes"""
        return cls(Individual(genotype_factory(rng)) for _ in range(size))

    def append(self, individual: Individual):
        self.individuals.append(individual)

    def evaluate(self, fitness_fn: Callable[[Genotype], float], pool=None) -> int:
        """Score every individual lacking a cached fitness.

        With a ``multiprocessing`` pool the pending genotypes are mapped in
        parallel; the call returns only after all scores are assigned.
        Returns the number of individuals evaluated.
        """
        pending = [ind for ind in self.individuals if not ind.is_evaluated]
        if not pending:
            return 0
        if pool is not None:
            scores = pool.map(fitness_fn, [ind.genotype for ind in pending])
            for individual, score in zip(pending, scores):
                individual.set_fitness(score)
        else:
            for individual in pending:
                individual.evaluate(fitness_fn)
        return len(pending)

    def sort_by_fitness(self):
        """Order by fitness, highest first"""
        if not self.individuals:
            raise EmptyPopulationError("cannot sort an empty population")
        self.individuals.sort(key=lambda ind: ind.fitness, reverse=True)

    def best(self) -> Individual:
        if not self.individuals:
            raise EmptyPopulationError("an empty population has no best individual")
        return max(self.individuals, key=lambda ind: ind.fitness)

    def fitness_values(self) -> np.ndarray:
        return np.array([ind.fitness for ind in self.individuals], dtype=float)

    def __len__(self):
        return len(self.individuals)

    def __iter__(self):
        return iter(self.individuals)

    def __getitem__(self, index):
        return self.individuals[index]

    def __repr__(self):
        return f"Population(size={len(self.individuals)})"
