import random
from dataclasses import dataclass
from typing import Callable, Union

from evolab.errors import UnevaluatedError
from evolab.genotype import Genotype


class Unevaluated:
    """Evaluation state of an individual whose fitness is not known"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNEVALUATED"

    def __reduce__(self):
        return (Unevaluated, ())


UNEVALUATED = Unevaluated()


@dataclass(frozen=True)
class Evaluated:
    score: float


Evaluation = Union[Unevaluated, Evaluated]


class Individual:
    """A genotype together with its lazily computed, cached fitness"""

    def __init__(self, genotype: Genotype):
        self.genotype = genotype
        self.evaluation: Evaluation = UNEVALUATED

    @property
    def is_evaluated(self) -> bool:
        return isinstance(self.evaluation, Evaluated)

    @property
    def fitness(self) -> float:
        if not isinstance(self.evaluation, Evaluated):
            raise UnevaluatedError(f"{self!r} has not been evaluated")
        return self.evaluation.score

    def set_fitness(self, score: float):
        self.evaluation = Evaluated(float(score))

    def evaluate(self, fitness_fn: Callable[[Genotype], float]) -> float:
        """Compute the fitness once; later calls return the cached score"""
        if not isinstance(self.evaluation, Evaluated):
            self.set_fitness(fitness_fn(self.genotype))
        return self.evaluation.score

    def invalidate(self):
        self.evaluation = UNEVALUATED

    def mutate(self, probability: float, rng: random.Random) -> int:
        """Mutate the genotype; a change drops the cached fitness"""
        changed = self.genotype.mutate(probability, rng)
        if changed:
            self.invalidate()
        return changed

    def copy(self) -> "Individual":
        """Independent copy owning a fresh genotype; the evaluation is kept"""
        clone = Individual(self.genotype.copy())
        clone.evaluation = self.evaluation
        return clone

    def __repr__(self):
        if isinstance(self.evaluation, Evaluated):
            return f"Individual(fitness={self.evaluation.score:.4f}, genotype={self.genotype})"
        return f"Individual(fitness=UNEVALUATED, genotype={self.genotype})"
