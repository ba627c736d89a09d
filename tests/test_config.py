import pytest

from neat_evolve.config import DEFAULT_CONFIG, EvolutionConfig
from neat_evolve.errors import ConfigError


def test_defaults():
    assert DEFAULT_CONFIG.weight_mutation_rate == 0.8
    assert DEFAULT_CONFIG.add_node_rate == 0.03
    assert DEFAULT_CONFIG.add_connection_rate == 0.05
    assert DEFAULT_CONFIG.compatibility_threshold == 3.0
    assert DEFAULT_CONFIG.weight_coefficient == 0.4
    assert DEFAULT_CONFIG.stagnation_limit == 15
    assert DEFAULT_CONFIG.alignment == "positional"


@pytest.mark.parametrize(
    "changes",
    [
        {"weight_mutation_rate": 1.5},
        {"asexual_rate": -0.1},
        {"max_attempts": 0},
        {"workers": 0},
        {"compatibility_threshold": 0.0},
        {"new_weight_range": -1.0},
        {"alignment": "by-name"},
        {"log_genome_every": 0},
        {"normalize_below": -1},
        {"cull_steepness": 0.0},
    ],
)
def test_invalid_values(changes):
    with pytest.raises(ConfigError):
        EvolutionConfig(**changes)


def test_replace_returns_validated_copy():
    config = DEFAULT_CONFIG.replace(add_node_rate=0.5)

    assert config.add_node_rate == 0.5
    assert DEFAULT_CONFIG.add_node_rate == 0.03
    with pytest.raises(ConfigError):
        DEFAULT_CONFIG.replace(add_node_rate=2.0)
    with pytest.raises(ConfigError):
        DEFAULT_CONFIG.replace(no_such_field=1)
