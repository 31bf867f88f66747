"""Generational evolutionary algorithm engine.

Each generation the engine evaluates the individuals that have no cached
fitness, sorts the population best first, fills a breeding pool by repeated
selection, and builds a fresh population of the same size from consecutive
pairs of the pool through crossover and mutation. After ``generations``
rounds (or an early stop/cancellation between rounds) a final evaluate and
sort pass produces the reported best individual.

All randomness is drawn from one ``random.Random`` stream owned by the
engine, so a fixed seed and config reproduce a run exactly, with or without
parallel fitness evaluation.
"""
import logging
import multiprocessing as mp
import random
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import numpy as np
import pandas as pd

from evolab.config import GAConfig
from evolab.errors import ConfigurationError, EngineTerminatedError
from evolab.individual import Individual
from evolab.population import Population
from evolab.selection import SelectionOperator, make_selector
from evolab.stopping import stopping_from_config

logger = logging.getLogger(__name__)


class EngineState(Enum):
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    SORTING = "sorting"
    BREEDING = "breeding"
    REPLACING = "replacing"
    TERMINATED = "terminated"


@dataclass
class GenerationStats:
    """Fitness summary of one sorted generation"""
    generation: int
    best_fitness: float
    mean_fitness: float
    std_fitness: float
    worst_fitness: float
    best_genotype: list
    elapsed_time: float = 0.0

    def to_dict(self):
        return {
            "generation": self.generation,
            "best_fitness": self.best_fitness,
            "mean_fitness": self.mean_fitness,
            "std_fitness": self.std_fitness,
            "worst_fitness": self.worst_fitness,
            "best_genotype": self.best_genotype,
            "elapsed_time": self.elapsed_time,
        }


@dataclass
class RunResult:
    best: Individual
    population: Population
    history: List[GenerationStats] = field(default_factory=list)
    generations_run: int = 0
    stopped_early: bool = False
    cancelled: bool = False
    best_feasible: Optional[Individual] = None

    @property
    def best_fitness(self):
        return self.best.fitness

    def history_frame(self) -> pd.DataFrame:
        """Per-generation statistics as a DataFrame indexed by generation"""
        frame = pd.DataFrame([stats.to_dict() for stats in self.history])
        if not frame.empty:
            frame = frame.set_index("generation")
        return frame


class EvolutionEngine:
    """Runs the evolutionary loop for one problem and configuration.

    ``problem`` supplies ``genotype_length``, ``random_genotype(rng)``,
    ``fitness`` and ``is_feasible(genotype)`` (see ``evolab.problems``).
    ``on_generation`` is called with each ``GenerationStats`` after the
    population has been sorted; it may call ``cancel()``.
    """

    def __init__(self, problem, config: GAConfig, rng: Optional[random.Random] = None,
                 selector: Optional[SelectionOperator] = None,
                 stopping: Optional[Callable[[List[GenerationStats]], bool]] = None,
                 on_generation: Optional[Callable[[GenerationStats], None]] = None):
        if config.genotype_length != problem.genotype_length:
            raise ConfigurationError(
                f"config genotype_length {config.genotype_length} does not match "
                f"the problem's {problem.genotype_length}")

        self.problem = problem
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)
        self.selector = selector if selector is not None else make_selector(config)
        self.stopping = stopping if stopping is not None else stopping_from_config(config)
        self.on_generation = on_generation
        self.history: List[GenerationStats] = []
        self.best_feasible: Optional[Individual] = None
        self._cancel_requested = threading.Event()
        self._start_time = None

        self.state = EngineState.INITIALIZING
        self.population = Population.random(config.population_size, problem.random_genotype, self.rng)

    def cancel(self):
        """Ask the loop to stop before the next breeding step"""
        self._cancel_requested.set()

    @property
    def cancel_requested(self):
        return self._cancel_requested.is_set()

    def run(self) -> RunResult:
        """Run the full loop and return the final best individual.

        An engine runs once; build a new engine for another run.
        """
        if self.state == EngineState.TERMINATED:
            raise EngineTerminatedError("this engine has already run; create a new engine for another run")
        self._start_time = time.time()
        generations_run = 0
        stopped_early = False
        cancelled = False

        pool = mp.Pool(processes=self.config.workers) if self.config.workers > 1 else None
        try:
            for generation in range(self.config.generations):
                self._evaluate(pool)
                self._sort()
                self._record(generation)

                if self.cancel_requested:
                    logger.info("Run cancelled at generation %d", generation)
                    cancelled = True
                    break
                if self.stopping is not None and self.stopping(self.history):
                    logger.info("Early stop at generation %d (%r)", generation, self.stopping)
                    stopped_early = True
                    break

                breeding_pool = self._build_breeding_pool()
                self.population = self._replace(breeding_pool)
                generations_run += 1

            self._evaluate(pool)
            self._sort()
            if not self.history or self.history[-1].generation != generations_run:
                self._record(generations_run)
        finally:
            if pool is not None:
                pool.close()
                pool.join()

        self.state = EngineState.TERMINATED
        best = self.population[0]
        logger.info("Final generation %d: best fitness = %s", generations_run, best.fitness)
        return RunResult(
            best=best,
            population=self.population,
            history=list(self.history),
            generations_run=generations_run,
            stopped_early=stopped_early,
            cancelled=cancelled,
            best_feasible=self.best_feasible,
        )

    def _evaluate(self, pool=None):
        self.state = EngineState.EVALUATING
        self.population.evaluate(self.problem.fitness, pool)

    def _sort(self):
        self.state = EngineState.SORTING
        self.population.sort_by_fitness()

    def _record(self, generation: int) -> GenerationStats:
        fitnesses = self.population.fitness_values()
        best = self.population[0]
        stats = GenerationStats(
            generation=generation,
            best_fitness=best.fitness,
            mean_fitness=float(np.mean(fitnesses)),
            std_fitness=float(np.std(fitnesses)),
            worst_fitness=float(np.min(fitnesses)),
            best_genotype=best.genotype.to_list(),
            elapsed_time=time.time() - self._start_time,
        )
        self.history.append(stats)
        self._update_best_feasible()

        logger.debug("Generation %d: best fitness = %s, mean = %.4f", generation,
                     stats.best_fitness, stats.mean_fitness)
        if generation % self.config.report_every == 0 or generation == self.config.generations - 1:
            logger.info("Generation %d: best fitness = %s, mean = %.4f", generation,
                        stats.best_fitness, stats.mean_fitness)

        if self.on_generation is not None:
            self.on_generation(stats)
        return stats

    def _build_breeding_pool(self) -> List[Individual]:
        self.state = EngineState.BREEDING
        return [self.selector.select(self.population, self.rng)
                for _ in range(self.config.population_size)]

    def _replace(self, breeding_pool: List[Individual]) -> Population:
        """Breed the next population from consecutive pairs of the pool.

        Children are always new individuals with their own genotypes. With an
        odd pool the last parent is paired with the first one of the pool and
        the surplus child is dropped.
        """
        self.state = EngineState.REPLACING
        size = self.config.population_size
        remaining = deque(breeding_pool)
        next_population = Population()

        while len(next_population) < size:
            parent1 = remaining.popleft()
            parent2 = remaining.popleft() if remaining else breeding_pool[0]

            if self.rng.random() < self.config.crossover_probability:
                genotype1, genotype2 = parent1.genotype.crossover(parent2.genotype, self.rng)
                offspring = [Individual(genotype1), Individual(genotype2)]
            else:
                offspring = [parent1.copy(), parent2.copy()]

            for child in offspring:
                child.mutate(self.config.mutation_probability, self.rng)
                next_population.append(child)
                if len(next_population) >= size:
                    break

        return next_population

    def _update_best_feasible(self):
        """Keep a copy of the fittest feasible individual seen in any sorted generation"""
        for individual in self.population:
            if self.problem.is_feasible(individual.genotype):
                if self.best_feasible is None or individual.fitness > self.best_feasible.fitness:
                    self.best_feasible = individual.copy()
                return
