import math
import random

import pytest

from evolab.config import CityLayout
from evolab.errors import ConfigurationError
from evolab.fitness import KnapsackFitness, TourFitness, tour_length
from evolab.genotype import BitString, Permutation
from evolab.problems import KnapsackInstance, KnapsackProblem, TSPInstance, TSPProblem, load_cities_from_file

UNIT_SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1)]


@pytest.fixture
def small_knapsack():
    return KnapsackProblem(KnapsackInstance.from_items([1, 2, 3, 4], [10, 8, 4, 1]))


def test_capacity_defaults_to_half_the_total_weight(small_knapsack):
    assert small_knapsack.capacity == 11
    assert small_knapsack.values == (1, 2, 3, 4)
    assert small_knapsack.weights == (10, 8, 4, 1)
    assert small_knapsack.genotype_length == 4


def test_knapsack_fitness_feasible_and_penalized(small_knapsack):
    fitness = small_knapsack.fitness
    assert fitness(BitString([False, False, False, False])) == 0.0
    assert fitness(BitString([False, False, True, True])) == 7.0
    assert fitness(BitString([True, False, False, True])) == 5.0
    # over capacity: value scaled by capacity / weight
    assert fitness(BitString([False, True, True, True])) == pytest.approx(9 * 11 / 13)
    assert fitness(BitString([True, True, True, True])) == pytest.approx(10 * 11 / 23)


def test_knapsack_describe_reports_feasibility(small_knapsack):
    info = small_knapsack.describe(BitString([False, True, False, True]))
    assert info == {"genotype": "0101", "total_value": 6.0, "total_weight": 9.0, "feasible": True}
    assert not small_knapsack.is_feasible(BitString([True, True, False, False]))


def test_zero_weight_selection_is_feasible():
    fitness = KnapsackFitness([5, 3], [0, 0], 0)
    assert fitness(BitString([True, True])) == 8.0


def test_generated_instance_follows_item_rules():
    instance = KnapsackInstance.generate(30, random.Random(12))
    assert instance.values == tuple(range(1, 31))
    assert all(1 <= w <= 10 for w in instance.weights)
    assert instance.capacity == sum(instance.weights) // 2
    assert KnapsackInstance.generate(30, random.Random(12)) == instance


def test_knapsack_instance_is_read_only(small_knapsack):
    with pytest.raises(Exception):
        small_knapsack.instance.capacity = 100


@pytest.mark.parametrize("values, weights", [([], []), ([1, 2], [1]), ([-1], [2]), ([1], [-2])])
def test_invalid_knapsack_instances(values, weights):
    with pytest.raises(ConfigurationError):
        KnapsackInstance.from_items(values, weights)


def test_tour_length_includes_wrap_edge():
    instance = TSPInstance.from_coordinates(UNIT_SQUARE)
    assert tour_length([0, 1, 2, 3], instance.distances) == pytest.approx(4.0)
    assert tour_length([0, 2, 1, 3], instance.distances) == pytest.approx(2 + 2 * math.sqrt(2))


def test_tour_fitness_is_inverse_length():
    problem = TSPProblem(TSPInstance.from_coordinates(UNIT_SQUARE))
    assert problem.fitness(Permutation([0, 1, 2, 3])) == pytest.approx(0.25)
    assert problem.fitness(Permutation([3, 2, 1, 0])) == pytest.approx(0.25)
    assert problem.tour_length(Permutation([1, 3, 0, 2])) == pytest.approx(2 + 2 * math.sqrt(2))


def test_single_city_tour_is_a_valid_state():
    problem = TSPProblem(TSPInstance.from_coordinates([(0.5, 0.5)]))
    assert problem.tour_length(Permutation([0])) == 0.0
    assert math.isinf(problem.fitness(Permutation([0])))


def test_fitness_is_deterministic():
    problem = TSPProblem.with_layout(CityLayout.RANDOM, 15, random.Random(13))
    tour = problem.random_genotype(random.Random(14))
    assert problem.fitness(tour) == problem.fitness(tour)


def test_circle_layout_spacing():
    instance = TSPInstance.on_circle(4)
    assert instance.num_cities == 4
    assert instance.distances[0, 1] == pytest.approx(math.sqrt(2))
    assert instance.distances[0, 2] == pytest.approx(2.0)


def test_distance_matrix_is_symmetric_and_read_only():
    instance = TSPInstance.random_square(6, random.Random(15))
    assert (instance.distances == instance.distances.T).all()
    with pytest.raises(ValueError):
        instance.distances[0, 1] = 3.0


def test_load_tsplib_file(tmp_path):
    path = tmp_path / "square.tsp"
    path.write_text(
        "NAME: square\nTYPE: TSP\nDIMENSION: 4\nNODE_COORD_SECTION\n"
        "1 0 0\n2 1 0\n3 1 1\n4 0 1\nEOF\n")
    cities = load_cities_from_file(str(path))
    assert [c.id for c in cities] == [1, 2, 3, 4]
    problem = TSPProblem.with_layout(CityLayout.FILE, filename=str(path))
    assert problem.tour_length(Permutation([0, 1, 2, 3])) == pytest.approx(4.0)


def test_load_xy_file(tmp_path):
    path = tmp_path / "cities.csv"
    path.write_text("0,0\n3,0\n3,4\n")
    problem = TSPProblem(TSPInstance.from_file(str(path)))
    assert problem.genotype_length == 3
    assert problem.tour_length(Permutation([0, 1, 2])) == pytest.approx(12.0)


def test_empty_city_file_is_rejected(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("\n")
    with pytest.raises(ConfigurationError):
        load_cities_from_file(str(path))


def test_unknown_layout_is_rejected():
    with pytest.raises(ConfigurationError):
        TSPProblem.with_layout("spiral", 5)
    with pytest.raises(ConfigurationError):
        TSPProblem.with_layout(CityLayout.FILE)


def test_tour_fitness_is_picklable():
    import pickle

    fitness = TourFitness(TSPInstance.on_circle(5).distances)
    clone = pickle.loads(pickle.dumps(fitness))
    assert clone(Permutation([0, 1, 2, 3, 4])) == fitness(Permutation([0, 1, 2, 3, 4]))
