"""Problem instances and the problem adapters the engine runs against.

A problem adapter tells the engine how long a genotype is, how to draw a
random one, and which fitness function scores it. Instances are generated
once and never mutated afterwards.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from evolab.config import CityLayout
from evolab.errors import ConfigurationError
from evolab.fitness import KnapsackFitness, TourFitness, tour_length
from evolab.genotype import BitString, Permutation

logger = logging.getLogger(__name__)

MIN_ITEM_WEIGHT = 1
MAX_ITEM_WEIGHT = 10


@dataclass(frozen=True)
class KnapsackInstance:
    """Item values and weights plus the knapsack capacity"""
    values: Tuple[int, ...]
    weights: Tuple[int, ...]
    capacity: int

    def __post_init__(self):
        if not self.values:
            raise ConfigurationError("a knapsack instance needs at least one item")
        if len(self.values) != len(self.weights):
            raise ConfigurationError(
                f"got {len(self.values)} values but {len(self.weights)} weights")
        if any(v < 0 for v in self.values) or any(w < 0 for w in self.weights):
            raise ConfigurationError("item values and weights must be non-negative")
        if self.capacity < 0:
            raise ConfigurationError(f"capacity must be non-negative, got {self.capacity}")

    @property
    def num_items(self):
        return len(self.values)

    @property
    def total_weight(self):
        return sum(self.weights)

    @classmethod
    def from_items(cls, values: Sequence[int], weights: Sequence[int], capacity: Optional[int] = None):
        """Build an instance; capacity defaults to half the summed weights"""
        if capacity is None:
            capacity = sum(weights) // 2
        return cls(tuple(values), tuple(weights), capacity)

    @classmethod
    def generate(cls, num_items: int, rng: random.Random):
        """Item i is worth i+1 and weighs a uniform integer in [1, 10]"""
        if num_items <= 0:
            raise ConfigurationError(f"num_items must be positive, got {num_items}")
        values = [i + 1 for i in range(num_items)]
        weights = [rng.randint(MIN_ITEM_WEIGHT, MAX_ITEM_WEIGHT) for _ in range(num_items)]
        return cls.from_items(values, weights)


class City:
    def __init__(self, x, y, city_id=None):
        self.x = x
        self.y = y
        self.id = city_id

    def distance(self, city):
        return math.sqrt((self.x - city.x) ** 2 + (self.y - city.y) ** 2)

    def __eq__(self, other):
        if not isinstance(other, City):
            return NotImplemented
        return (self.x, self.y, self.id) == (other.x, other.y, other.id)

    def __hash__(self):
        return hash((self.x, self.y, self.id))

    def __repr__(self):
        return f"City({self.id}: {self.x}, {self.y})"


def precompute_distances(cities: Sequence[City]) -> np.ndarray:
    """Precompute all pairwise distances between cities"""
    n = len(cities)
    distances = np.zeros((n, n))
    for i in range(n):
        for j in range(i + 1, n):
            dist = cities[i].distance(cities[j])
            distances[i, j] = dist
            distances[j, i] = dist
    distances.setflags(write=False)
    return distances


def load_cities_from_file(filename: str) -> List[City]:
    """Read cities from a TSPLIB file or from a plain ``x,y`` per line file"""
    with open(filename, "r") as f:
        lines = f.readlines()

    cities = []
    if any(line.strip() == "NODE_COORD_SECTION" for line in lines):
        processing_coords = False
        for line in lines:
            line = line.strip()
            if line == "NODE_COORD_SECTION":
                processing_coords = True
                continue
            if line in ("EOF", "-1"):
                break
            if processing_coords:
                parts = line.split()
                if len(parts) >= 3:
                    # TSPLIB format: ID X Y
                    cities.append(City(float(parts[1]), float(parts[2]), int(parts[0])))
    else:
        for i, line in enumerate(lines):
            parts = line.strip().split(",")
            if len(parts) >= 2 and parts[0]:
                cities.append(City(float(parts[0]), float(parts[1]), i + 1))

    if not cities:
        raise ConfigurationError(f"no city coordinates found in {filename}")
    return cities


@dataclass(frozen=True, eq=False)
class TSPInstance:
    """Cities and their read-only distance matrix"""
    cities: Tuple[City, ...]
    distances: np.ndarray = field(repr=False)

    @property
    def num_cities(self):
        return len(self.cities)

    @classmethod
    def from_cities(cls, cities: Sequence[City]):
        if not cities:
            raise ConfigurationError("a TSP instance needs at least one city")
        cities = tuple(cities)
        return cls(cities, precompute_distances(cities))

    @classmethod
    def from_coordinates(cls, coordinates: Sequence[Tuple[float, float]]):
        return cls.from_cities([City(x, y, i) for i, (x, y) in enumerate(coordinates)])

    @classmethod
    def on_circle(cls, num_cities: int):
        """Cities evenly spaced on the unit circle"""
        if num_cities <= 0:
            raise ConfigurationError(f"num_cities must be positive, got {num_cities}")
        step = 2 * math.pi / num_cities
        return cls.from_coordinates([(math.cos(i * step), math.sin(i * step)) for i in range(num_cities)])

    @classmethod
    def random_square(cls, num_cities: int, rng: random.Random):
        """Cities drawn uniformly from the unit square"""
        if num_cities <= 0:
            raise ConfigurationError(f"num_cities must be positive, got {num_cities}")
        return cls.from_coordinates([(rng.random(), rng.random()) for _ in range(num_cities)])

    @classmethod
    def from_file(cls, filename: str):
        return cls.from_cities(load_cities_from_file(filename))


class KnapsackProblem:
    """0/1 knapsack over a bitstring genotype"""
    name = "knapsack"

    def __init__(self, instance: KnapsackInstance):
        self.instance = instance
        self.fitness = KnapsackFitness(instance.values, instance.weights, instance.capacity)

    @classmethod
    def generate(cls, num_items: int, rng: random.Random):
        problem = cls(KnapsackInstance.generate(num_items, rng))
        logger.info("Knapsack capacity: %d", problem.capacity)
        logger.info("Item values: %s", " ".join(str(v) for v in problem.values))
        logger.info("Item weights: %s", " ".join(str(w) for w in problem.weights))
        return problem

    @property
    def genotype_length(self):
        return self.instance.num_items

    @property
    def values(self):
        return self.instance.values

    @property
    def weights(self):
        return self.instance.weights

    @property
    def capacity(self):
        return self.instance.capacity

    def random_genotype(self, rng: random.Random) -> BitString:
        return BitString.random(self.genotype_length, rng)

    def is_feasible(self, genotype) -> bool:
        _, total_weight = self.fitness.totals(genotype)
        return total_weight <= self.capacity

    def describe(self, genotype) -> dict:
        """Total value, total weight and feasibility of a selection"""
        total_value, total_weight = self.fitness.totals(genotype)
        return {
            "genotype": str(genotype),
            "total_value": total_value,
            "total_weight": total_weight,
            "feasible": total_weight <= self.capacity,
        }


class TSPProblem:
    """Closed-tour traveling salesman over a permutation genotype"""
    name = "tsp"

    def __init__(self, instance: TSPInstance):
        self.instance = instance
        self.fitness = TourFitness(instance.distances)

    @classmethod
    def with_layout(cls, layout: str, num_cities: int = 0, rng: Optional[random.Random] = None,
                    filename: Optional[str] = None):
        """Build the cities with one of the ``CityLayout`` placements"""
        if layout == CityLayout.CIRCLE:
            instance = TSPInstance.on_circle(num_cities)
        elif layout == CityLayout.RANDOM:
            instance = TSPInstance.random_square(num_cities, rng or random.Random())
        elif layout == CityLayout.FILE:
            if not filename:
                raise ConfigurationError("the file layout needs a city file")
            instance = TSPInstance.from_file(filename)
        else:
            raise ConfigurationError(f"unknown city layout {layout!r}, expected one of {CityLayout.ALL}")

        logger.info("Cities (%s layout):", layout)
        for city in instance.cities:
            logger.info("City %s: (%.3f, %.3f)", city.id, city.x, city.y)
        return cls(instance)

    @property
    def genotype_length(self):
        return self.instance.num_cities

    @property
    def cities(self):
        return self.instance.cities

    def random_genotype(self, rng: random.Random) -> Permutation:
        return Permutation.random(self.genotype_length, rng)

    def is_feasible(self, genotype) -> bool:
        return True

    def tour_length(self, genotype) -> float:
        return tour_length(genotype.genes, self.instance.distances)

    def describe(self, genotype) -> dict:
        return {
            "genotype": str(genotype),
            "tour_length": self.tour_length(genotype),
        }
