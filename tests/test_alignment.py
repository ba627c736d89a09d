import random

import pytest

from neat_evolve.alignment import (
    align,
    compatibility_distance,
    innovation_align,
    positional_align,
    sharing,
)
from neat_evolve.config import EvolutionConfig
from neat_evolve.genome import ConnectionGene, Genome, NodeGene, NodeKind, starting_genome
from neat_evolve.mutation import InnovationTracker, mutate, split_connection

from conftest import with_weights


def test_distance_to_self_is_zero(rng):
    genome, next_id = starting_genome(3, 2, rng)
    tracker = InnovationTracker(next_id)
    config = EvolutionConfig(add_node_rate=0.5, add_connection_rate=0.5)
    for _ in range(10):
        genome = mutate(genome, tracker, rng, config)
        assert compatibility_distance(genome, genome) == 0
        assert sharing(genome, genome) == 1


def test_same_structure_only_weights_differ(two_input_genome):
    other = with_weights(two_input_genome, 0.5)

    result = positional_align(two_input_genome, other)

    assert result.matched == 5
    assert result.disjoint == 0
    assert result.excess == 0
    assert result.weight_diff == pytest.approx(1.0)
    assert result.size == 1.0
    assert compatibility_distance(two_input_genome, other) == pytest.approx(0.4)


def test_excess_genes_count_their_weight(rng):
    genome, next_id = starting_genome(2, 1, rng)
    split = split_connection(genome, InnovationTracker(next_id), rng)
    original = next(c for c in split.connections if not c.enabled)

    result = positional_align(genome, split)

    assert result.matched == 5
    assert result.excess == 3
    assert result.disjoint == 0
    assert result.weight_diff == pytest.approx(1.0 + abs(original.weight))
    assert compatibility_distance(genome, split) == pytest.approx(3 + 0.4 * (1.0 + abs(original.weight)))
    assert sharing(genome, split) == 0


def test_distance_is_symmetric():
    a, next_id = starting_genome(2, 2, random.Random(1))
    b, _ = starting_genome(2, 2, random.Random(2))
    b = split_connection(b, InnovationTracker(next_id), random.Random(3))

    assert compatibility_distance(a, b) == pytest.approx(compatibility_distance(b, a))


def _shifted_pair():
    nodes = [NodeGene(0, NodeKind.SENSOR), NodeGene(1, NodeKind.OUTPUT)]
    a = Genome(nodes + [ConnectionGene(3, 0, 1, 1.0, True), ConnectionGene(4, 1, 1, 1.0, True)])
    b = Genome(nodes + [ConnectionGene(2, 1, 1, 1.0, True), ConnectionGene(3, 0, 1, 1.0, True)])
    return a, b


def test_positional_alignment_compares_by_index():
    a, b = _shifted_pair()

    result = positional_align(a, b)

    assert (result.matched, result.disjoint, result.excess) == (2, 2, 0)


def test_innovation_alignment_compares_by_id():
    a, b = _shifted_pair()

    result = innovation_align(a, b)

    assert (result.matched, result.disjoint, result.excess) == (3, 1, 1)
    assert result.weight_diff == pytest.approx(1.0)


def test_configured_strategy_is_used():
    a, b = _shifted_pair()
    config = EvolutionConfig(alignment="innovation")

    assert align(a, b, config) == innovation_align(a, b)
    assert align(a, b) == positional_align(a, b)


def test_large_genomes_are_normalized(rng):
    genome, _ = starting_genome(4, 4, rng)
    assert len(genome) == 24

    assert positional_align(genome, genome).size == 24.0
    assert positional_align(genome, genome, normalize_below=30).size == 1.0


def test_sharing_threshold_is_configurable(two_input_genome):
    other = with_weights(two_input_genome, 2.0)
    # distance is 0.4 * 4.0 = 1.6
    assert sharing(two_input_genome, other) == 1
    assert sharing(two_input_genome, other, EvolutionConfig(compatibility_threshold=1.5)) == 0
