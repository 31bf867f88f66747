import random

import pytest

from evolab.genotype import BitString, Permutation, order_crossover


def test_bitstring_random_has_requested_length():
    rng = random.Random(1)
    genotype = BitString.random(25, rng)
    assert len(genotype) == 25
    assert genotype.is_valid(25)


def test_bitstring_mutation_extremes():
    """p=0 never flips a bit, p=1 flips every bit"""
    rng = random.Random(2)
    genotype = BitString([True, False, True, True, False])
    assert genotype.mutate(0.0, rng) == 0
    assert genotype.to_list() == [True, False, True, True, False]

    assert genotype.mutate(1.0, rng) == 5
    assert genotype.to_list() == [False, True, False, False, True]


def test_bitstring_mutation_rate_is_per_bit():
    rng = random.Random(3)
    genotype = BitString([False] * 1000)
    flipped = genotype.mutate(0.1, rng)
    # expected 100 flips, binomial std ~9.5
    assert 50 < flipped < 150
    assert len(genotype) == 1000


def test_bitstring_single_point_crossover():
    a = BitString([True] * 10)
    b = BitString([False] * 10)
    child1, child2 = a.crossover(b, random.Random(4))

    cut = random.Random(4).randint(1, 9)
    assert child1.to_list() == [True] * cut + [False] * (10 - cut)
    assert child2.to_list() == [False] * cut + [True] * (10 - cut)
    # parents are left untouched
    assert a.to_list() == [True] * 10
    assert b.to_list() == [False] * 10


def test_bitstring_crossover_cut_never_at_edges():
    rng = random.Random(5)
    a = BitString([True] * 6)
    b = BitString([False] * 6)
    for _ in range(200):
        child1, _ = a.crossover(b, rng)
        assert child1[0] is True
        assert child1[-1] is False


def test_bitstring_crossover_of_length_one_copies_parents():
    a = BitString([True])
    b = BitString([False])
    child1, child2 = a.crossover(b, random.Random(6))
    assert child1 == a and child1 is not a
    assert child2 == b and child2 is not b


def test_crossover_rejects_mismatched_genotypes():
    rng = random.Random(7)
    with pytest.raises(ValueError):
        BitString([True, False]).crossover(BitString([True, False, True]), rng)
    with pytest.raises(ValueError):
        BitString([True, False]).crossover(Permutation([0, 1]), rng)


def test_order_crossover_known_example():
    parent1 = [0, 1, 2, 3, 4, 5, 6, 7]
    parent2 = [7, 6, 5, 4, 3, 2, 1, 0]
    assert order_crossover(parent1, parent2, 2, 4) == [6, 5, 2, 3, 4, 1, 0, 7]


def test_order_crossover_full_slice_copies_first_parent():
    parent1 = [3, 1, 0, 2]
    parent2 = [0, 1, 2, 3]
    assert order_crossover(parent1, parent2, 0, 3) == parent1


def test_order_crossover_valid_for_every_cut_pair():
    rng = random.Random(8)
    n = 7
    for _ in range(30):
        parent1 = Permutation.random(n, rng)
        parent2 = Permutation.random(n, rng)
        for cut1 in range(n):
            for cut2 in range(cut1, n):
                child = order_crossover(parent1.genes, parent2.genes, cut1, cut2)
                assert sorted(child) == list(range(n))
                assert child[cut1:cut2 + 1] == parent1.genes[cut1:cut2 + 1]


def test_permutation_crossover_yields_valid_children():
    rng = random.Random(9)
    for n in (1, 2, 5, 20):
        for _ in range(50):
            child1, child2 = Permutation.random(n, rng).crossover(Permutation.random(n, rng), rng)
            assert child1.is_valid(n)
            assert child2.is_valid(n)


def test_permutation_swap_mutation_keeps_bijection():
    rng = random.Random(10)
    genotype = Permutation.random(12, rng)
    for _ in range(500):
        changed = genotype.mutate(1.0, rng)
        assert changed in (0, 2)
        assert genotype.is_valid(12)


def test_permutation_mutation_with_zero_probability_is_noop():
    rng = random.Random(11)
    genotype = Permutation([2, 0, 1, 3])
    assert genotype.mutate(0.0, rng) == 0
    assert genotype.to_list() == [2, 0, 1, 3]


def test_permutation_validity_check():
    assert Permutation([1, 0, 2]).is_valid(3)
    assert not Permutation([1, 1, 2]).is_valid(3)
    assert not Permutation([0, 1]).is_valid(3)


def test_copy_is_independent():
    original = BitString([True, False])
    clone = original.copy()
    clone.genes[0] = False
    assert original.to_list() == [True, False]
