import pytest

from evolab.config import GAConfig, SelectionMethod
from evolab.errors import ConfigurationError, EvolabError


def test_knapsack_defaults():
    config = GAConfig.for_knapsack()
    assert config.population_size == 1000
    assert config.genotype_length == 10
    assert config.generations == 300
    assert config.tournament_size == 40
    assert config.crossover_probability == 0.8
    assert config.mutation_probability == 0.1


def test_tsp_defaults_and_overrides():
    config = GAConfig.for_tsp(generations=7)
    assert config.population_size == 100
    assert config.genotype_length == 10
    assert config.tournament_size == 5
    assert config.generations == 7


@pytest.mark.parametrize("overrides", [
    {"population_size": 0},
    {"genotype_length": 0},
    {"crossover_probability": 1.5},
    {"mutation_probability": -0.1},
    {"generations": -1},
    {"selection": "rank"},
    {"tournament_size": 0},
    {"workers": 0},
    {"report_every": 0},
    {"stagnation_window": 0},
])
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ConfigurationError):
        GAConfig(**overrides)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        GAConfig(population_size=-5)
    assert issubclass(ConfigurationError, EvolabError)


def test_boundary_probabilities_are_accepted():
    config = GAConfig(crossover_probability=0.0, mutation_probability=1.0, generations=0)
    assert config.to_dict()["mutation_probability"] == 1.0


def test_str_lists_parameters():
    text = str(GAConfig.for_tsp(seed=3))
    assert "Population Size: 100" in text
    assert "Selection: tournament (k=5)" in text
    assert "Seed: 3" in text
    assert "(k=" not in str(GAConfig(selection=SelectionMethod.ROULETTE))


@pytest.mark.parametrize("name", ["population_size", "genotype_length", "generations", "tournament_size",
                                  "workers", "report_every", "stagnation_window"])
@pytest.mark.parametrize("value", [10.5, "10", True])
def test_counts_must_be_integers(name, value):
    with pytest.raises(ConfigurationError):
        GAConfig(**{name: value})
