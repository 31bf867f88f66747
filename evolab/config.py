from dataclasses import dataclass, asdict
from typing import Optional

from evolab.errors import ConfigurationError

# Defaults of the knapsack driver
KNAPSACK_POPULATION_SIZE = 1000
KNAPSACK_NUM_ITEMS = 10
KNAPSACK_GENERATIONS = 300
KNAPSACK_TOURNAMENT_SIZE = 40

# Defaults of the salesman driver
TSP_POPULATION_SIZE = 100
TSP_NUM_CITIES = 10
TSP_GENERATIONS = 100
TSP_TOURNAMENT_SIZE = 5

CROSSOVER_PROBABILITY = 0.8
MUTATION_PROBABILITY = 0.1
REPORT_EVERY = 20


class SelectionMethod:
    TOURNAMENT = "tournament"
    ROULETTE = "roulette"

    ALL = (TOURNAMENT, ROULETTE)


class CityLayout:
    CIRCLE = "circle"
    RANDOM = "random"
    FILE = "file"

    ALL = (CIRCLE, RANDOM, FILE)


def _check_probability(name, value):
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be in [0, 1], got {value}")


def _check_integer(name, value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass
class GAConfig:
    """Configuration for one evolutionary run.

    ``genotype_length`` is the number of knapsack items or the number of
    cities, depending on the problem the config is used with. Every field is
    validated on construction; invalid values raise ``ConfigurationError``
    and are never clamped.
    """

    population_size: int = KNAPSACK_POPULATION_SIZE
    genotype_length: int = KNAPSACK_NUM_ITEMS
    crossover_probability: float = CROSSOVER_PROBABILITY
    mutation_probability: float = MUTATION_PROBABILITY
    generations: int = KNAPSACK_GENERATIONS
    selection: str = SelectionMethod.TOURNAMENT
    tournament_size: int = KNAPSACK_TOURNAMENT_SIZE
    seed: Optional[int] = None
    workers: int = 1
    report_every: int = REPORT_EVERY
    stagnation_window: Optional[int] = None
    target_fitness: Optional[float] = None

    def __post_init__(self):
        self.validate()

    def validate(self):
        for name in ("population_size", "genotype_length", "generations", "tournament_size", "workers",
                     "report_every"):
            _check_integer(name, getattr(self, name))
        if self.stagnation_window is not None:
            _check_integer("stagnation_window", self.stagnation_window)
        if self.population_size <= 0:
            raise ConfigurationError(f"population_size must be positive, got {self.population_size}")
        if self.genotype_length <= 0:
            raise ConfigurationError(f"genotype_length must be positive, got {self.genotype_length}")
        _check_probability("crossover_probability", self.crossover_probability)
        _check_probability("mutation_probability", self.mutation_probability)
        if self.generations < 0:
            raise ConfigurationError(f"generations must be non-negative, got {self.generations}")
        if self.selection not in SelectionMethod.ALL:
            raise ConfigurationError(
                f"unknown selection method {self.selection!r}, expected one of {SelectionMethod.ALL}")
        if self.tournament_size <= 0:
            raise ConfigurationError(f"tournament_size must be positive, got {self.tournament_size}")
        if self.workers <= 0:
            raise ConfigurationError(f"workers must be positive, got {self.workers}")
        if self.report_every <= 0:
            raise ConfigurationError(f"report_every must be positive, got {self.report_every}")
        if self.stagnation_window is not None and self.stagnation_window <= 0:
            raise ConfigurationError(f"stagnation_window must be positive, got {self.stagnation_window}")

    @classmethod
    def for_knapsack(cls, **overrides):
        """Config with the knapsack driver defaults"""
        params = dict(population_size=KNAPSACK_POPULATION_SIZE, genotype_length=KNAPSACK_NUM_ITEMS,
                      generations=KNAPSACK_GENERATIONS, tournament_size=KNAPSACK_TOURNAMENT_SIZE)
        params.update(overrides)
        return cls(**params)

    @classmethod
    def for_tsp(cls, **overrides):
        """Config with the salesman driver defaults"""
        params = dict(population_size=TSP_POPULATION_SIZE, genotype_length=TSP_NUM_CITIES,
                      generations=TSP_GENERATIONS, tournament_size=TSP_TOURNAMENT_SIZE)
        params.update(overrides)
        return cls(**params)

    def to_dict(self):
        return asdict(self)

    def __str__(self):
        return (
            f"Population Size: {self.population_size}\n"
            f"Genotype Length: {self.genotype_length}\n"
            f"Crossover Probability: {self.crossover_probability}\n"
            f"Mutation Probability: {self.mutation_probability}\n"
            f"Generations: {self.generations}\n"
            f"Selection: {self.selection}"
            + (f" (k={self.tournament_size})" if self.selection == SelectionMethod.TOURNAMENT else "") + "\n"
            f"Seed: {self.seed}\n"
            f"Workers: {self.workers}"
        )
