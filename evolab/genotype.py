"""Genotype representations and their variation operators.

Two encodings are supported:

- ``BitString``: a fixed-length list of booleans (knapsack item selection),
  varied by per-bit flip mutation and single-point crossover.
- ``Permutation``: a fixed-length ordering of ``0..n-1`` (a salesman tour),
  varied by swap mutation and Order Crossover (OX).

Operators never touch a global random state; the caller passes the
``random.Random`` stream to draw from.
"""
import random
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple


class Genotype(ABC):
    """Base class for encoded candidate solutions"""

    def __init__(self, genes):
        self.genes = list(genes)

    @abstractmethod
    def mutate(self, probability: float, rng: random.Random) -> int:
        """Mutate in place and return how many positions changed"""

    @abstractmethod
    def crossover(self, other: "Genotype", rng: random.Random) -> Tuple["Genotype", "Genotype"]:
        """Recombine with another genotype of the same kind into two children"""

    @abstractmethod
    def is_valid(self, length: int) -> bool:
        """Check the representation invariant for the expected length"""

    def copy(self):
        return type(self)(self.genes)

    def to_list(self) -> list:
        return list(self.genes)

    def _check_compatible(self, other):
        if type(other) is not type(self):
            raise ValueError(f"cannot cross {type(self).__name__} with {type(other).__name__}")
        if len(other) != len(self):
            raise ValueError(f"cannot cross genotypes of length {len(self)} and {len(other)}")

    def __len__(self):
        return len(self.genes)

    def __iter__(self):
        return iter(self.genes)

    def __getitem__(self, index):
        return self.genes[index]

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.genes == other.genes

    def __hash__(self):
        return hash((type(self).__name__, tuple(self.genes)))


class BitString(Genotype):
    """Fixed-length bitstring; bit ``i`` selects item ``i``"""

    def __init__(self, genes: Sequence[bool]):
        super().__init__(bool(g) for g in genes)

    @classmethod
    def random(cls, length: int, rng: random.Random) -> "BitString":
        return cls(rng.random() < 0.5 for _ in range(length))

    def mutate(self, probability, rng):
        """Flip every bit independently with the given probability"""
        flipped = 0
        for i in range(len(self.genes)):
            if rng.random() < probability:
                self.genes[i] = not self.genes[i]
                flipped += 1
        return flipped

    def crossover(self, other, rng):
        """Single-point crossover with the cut drawn from [1, length-1]"""
        self._check_compatible(other)
        size = len(self.genes)
        if size < 2:
            return self.copy(), other.copy()

        cut = rng.randint(1, size - 1)
        child1 = BitString(self.genes[:cut] + other.genes[cut:])
        child2 = BitString(other.genes[:cut] + self.genes[cut:])
        return child1, child2

    def is_valid(self, length):
        return len(self.genes) == length and all(isinstance(g, bool) for g in self.genes)

    def selected(self) -> List[int]:
        """Indices of the set bits"""
        return [i for i, bit in enumerate(self.genes) if bit]

    def __str__(self):
        return "".join("1" if bit else "0" for bit in self.genes)

    def __repr__(self):
        return f"BitString({self})"


def order_crossover(parent1: Sequence[int], parent2: Sequence[int], cut1: int, cut2: int) -> List[int]:
    """Order crossover (OX) of one child for fixed cut points.

    The slice ``[cut1, cut2]`` (inclusive) is copied from ``parent1``; the
    remaining positions are filled starting right after ``cut2``, wrapping
    around, with the cities of ``parent2`` read in order from the same
    position and skipping the ones already placed.
    """
    size = len(parent1)
    child = [-1] * size
    child[cut1:cut2 + 1] = parent1[cut1:cut2 + 1]
    used = set(child[cut1:cut2 + 1])

    position = (cut2 + 1) % size
    for i in range(size):
        candidate = parent2[(cut2 + 1 + i) % size]
        if candidate not in used:
            child[position] = candidate
            used.add(candidate)
            position = (position + 1) % size
    return child


class Permutation(Genotype):
    """Tour over ``n`` cities, a permutation of ``0..n-1``"""

    def __init__(self, genes: Sequence[int]):
        super().__init__(int(g) for g in genes)

    @classmethod
    def random(cls, length: int, rng: random.Random) -> "Permutation":
        tour = list(range(length))
        rng.shuffle(tour)
        return cls(tour)

    def mutate(self, probability, rng):
        """Swap mutation: with the given probability swap two random positions once"""
        if rng.random() >= probability:
            return 0
        size = len(self.genes)
        i = rng.randrange(size)
        j = rng.randrange(size)
        if i == j:
            return 0
        self.genes[i], self.genes[j] = self.genes[j], self.genes[i]
        return 2

    def crossover(self, other, rng):
        """Order crossover producing two children from shared cut points"""
        self._check_compatible(other)
        size = len(self.genes)
        cut1 = rng.randrange(size)
        cut2 = rng.randrange(size)
        if cut1 > cut2:
            cut1, cut2 = cut2, cut1

        child1 = Permutation(order_crossover(self.genes, other.genes, cut1, cut2))
        child2 = Permutation(order_crossover(other.genes, self.genes, cut1, cut2))
        return child1, child2

    def is_valid(self, length):
        return len(self.genes) == length and sorted(self.genes) == list(range(length))

    def __str__(self):
        return " ".join(str(city) for city in self.genes)

    def __repr__(self):
        return f"Permutation([{', '.join(str(city) for city in self.genes)}])"
