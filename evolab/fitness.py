import math
from typing import Sequence

import numpy as np


class KnapsackFitness:
    """Total value of the selected items, scaled down when over capacity.

    An infeasible selection scores ``value * capacity / weight`` rather than
    zero, so overweight individuals still compete and selection keeps a
    gradient toward feasibility.
    """

    def __init__(self, values: Sequence[float], weights: Sequence[float], capacity: float):
        self.values = tuple(values)
        self.weights = tuple(weights)
        self.capacity = capacity

    def totals(self, genotype):
        """Sum value and weight over the selected items"""
        total_value = 0.0
        total_weight = 0.0
        for i, selected in enumerate(genotype):
            if selected:
                total_value += self.values[i]
                total_weight += self.weights[i]
        return total_value, total_weight

    def __call__(self, genotype) -> float:
        total_value, total_weight = self.totals(genotype)
        if total_weight <= self.capacity:
            return total_value
        return total_value * (self.capacity / total_weight)


def tour_length(tour: Sequence[int], distances: np.ndarray) -> float:
    """Closed tour length, including the edge from the last city back to the first"""
    size = len(tour)
    return float(sum(distances[tour[i], tour[(i + 1) % size]] for i in range(size)))


class TourFitness:
    """Inverse of the closed tour length"""

    def __init__(self, distances: np.ndarray):
        self.distances = distances

    def __call__(self, genotype) -> float:
        length = tour_length(genotype.genes, self.distances)
        # a single-city tour has no edges
        if length == 0.0:
            return math.inf
        return 1.0 / length
