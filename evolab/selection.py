import math
import random
from abc import ABC, abstractmethod

from evolab.config import GAConfig, SelectionMethod
from evolab.errors import ConfigurationError, EmptyPopulationError
from evolab.individual import Individual
from evolab.population import Population


class SelectionOperator(ABC):
    """Picks one breeder from a population without modifying it"""

    @abstractmethod
    def select(self, population: Population, rng: random.Random) -> Individual:
        pass

    def __call__(self, population, rng):
        return self.select(population, rng)


class TournamentSelection(SelectionOperator):
    """Best of ``k`` individuals drawn uniformly with replacement.

    Ties go to the contender drawn first. Larger ``k`` means stronger
    selection pressure.
    """

    def __init__(self, tournament_size: int):
        if tournament_size <= 0:
            raise ConfigurationError(f"tournament_size must be positive, got {tournament_size}")
        self.tournament_size = tournament_size

    def select(self, population, rng):
        if len(population) == 0:
            raise EmptyPopulationError("cannot select from an empty population")
        best = None
        for _ in range(self.tournament_size):
            contender = population[rng.randrange(len(population))]
            if best is None or contender.fitness > best.fitness:
                best = contender
        return best

    def __repr__(self):
        return f"TournamentSelection(k={self.tournament_size})"


class RouletteWheelSelection(SelectionOperator):
    """Fitness-proportionate selection; fitness values must be non-negative"""

    def select(self, population, rng):
        if len(population) == 0:
            raise EmptyPopulationError("cannot select from an empty population")

        scale = 1.0
        total_fitness = 0.0
        for ind in population:
            if ind.fitness < 0:
                raise ValueError(f"roulette wheel selection needs non-negative fitness, got {ind.fitness}")
            total_fitness += ind.fitness

        if math.isinf(total_fitness):
            infinite = [ind for ind in population if math.isinf(ind.fitness)]
            if infinite:
                return infinite[0]
            # finite values whose sum overflowed
            scale = max(ind.fitness for ind in population)
            total_fitness = sum(ind.fitness / scale for ind in population)

        slice_ = rng.random() * total_fitness
        cumulative = 0.0
        for ind in population:
            cumulative += ind.fitness / scale
            if cumulative >= slice_:
                return ind
        # only reachable through float rounding
        return population[len(population) - 1]

    def __repr__(self):
        return "RouletteWheelSelection()"


def make_selector(config: GAConfig) -> SelectionOperator:
    """Build the selection policy named in the config"""
    if config.selection == SelectionMethod.TOURNAMENT:
        return TournamentSelection(config.tournament_size)
    if config.selection == SelectionMethod.ROULETTE:
        return RouletteWheelSelection()
    raise ConfigurationError(f"unknown selection method {config.selection!r}")
