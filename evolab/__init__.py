"""
evolab - a generational evolutionary algorithm for the 0/1 knapsack and
traveling salesman problems.
"""

__version__ = "0.1.0"

from evolab.config import GAConfig, SelectionMethod, CityLayout
from evolab.engine import EvolutionEngine, EngineState, GenerationStats, RunResult
from evolab.errors import (
    ConfigurationError, EmptyPopulationError, EngineTerminatedError, EvolabError, UnevaluatedError,
)
from evolab.fitness import KnapsackFitness, TourFitness
from evolab.genotype import BitString, Genotype, Permutation
from evolab.individual import UNEVALUATED, Evaluated, Individual, Unevaluated
from evolab.population import Population
from evolab.problems import City, KnapsackInstance, KnapsackProblem, TSPInstance, TSPProblem
from evolab.selection import RouletteWheelSelection, SelectionOperator, TournamentSelection, make_selector
from evolab.stopping import AnyOf, StagnationStop, TargetFitnessStop

__all__ = [
    "GAConfig", "SelectionMethod", "CityLayout",
    "EvolutionEngine", "EngineState", "GenerationStats", "RunResult",
    "EvolabError", "ConfigurationError", "EmptyPopulationError", "UnevaluatedError", "EngineTerminatedError",
    "KnapsackFitness", "TourFitness",
    "Genotype", "BitString", "Permutation",
    "Individual", "Unevaluated", "Evaluated", "UNEVALUATED",
    "Population",
    "City", "KnapsackInstance", "KnapsackProblem", "TSPInstance", "TSPProblem",
    "SelectionOperator", "TournamentSelection", "RouletteWheelSelection", "make_selector",
    "StagnationStop", "TargetFitnessStop", "AnyOf",
]
