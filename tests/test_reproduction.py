import random

from neat_evolve.config import EvolutionConfig
from neat_evolve.genome import ConnectionGene, Genome, NodeGene, NodeKind, starting_genome
from neat_evolve.mutation import InnovationTracker, split_connection
from neat_evolve.network import Brain
from neat_evolve.reproduction import (
    crossover,
    innovation_crossover,
    positional_crossover,
    repair,
)


def test_repair_drops_duplicates_and_dangling_connections():
    genes = [
        NodeGene(0, NodeKind.SENSOR),
        NodeGene(1, NodeKind.OUTPUT),
        ConnectionGene(2, 0, 1, 1.0, True),
        ConnectionGene(2, 0, 1, -1.0, True),
        ConnectionGene(5, 0, 4, 1.0, True),
    ]

    genome = repair(genes)

    assert [g.mutation_id for g in genome] == [0, 1, 2]
    assert genome.connections[0].weight == 1.0


def test_matching_positions_are_split_between_offspring():
    mother, _ = starting_genome(2, 2, random.Random(1))
    father, _ = starting_genome(2, 2, random.Random(2))

    first, second = positional_crossover(mother, father, 1.0, 1.0, random.Random(3))

    assert len(first) == len(second) == len(mother)
    for i in range(len(mother)):
        assert (first[i], second[i]) in [(mother[i], father[i]), (father[i], mother[i])]


def _parents():
    father, next_id = starting_genome(2, 1, random.Random(1))
    mother = split_connection(father, InnovationTracker(next_id), random.Random(2))
    return mother, father


def test_tail_comes_from_fitter_longer_parent():
    mother, father = _parents()

    first, second = positional_crossover(mother, father, 2.0, 1.0, random.Random(3))

    assert len(first) == len(second) == len(mother)
    assert first.mutation_ids == second.mutation_ids == mother.mutation_ids
    Brain(first)
    Brain(second)


def test_no_tail_when_longer_parent_is_not_fitter():
    mother, father = _parents()

    first, second = positional_crossover(mother, father, 1.0, 2.0, random.Random(3))
    assert len(first) == len(second) == len(father)

    first, second = positional_crossover(mother, father, 1.0, 1.0, random.Random(3))
    assert len(first) == len(second) == len(father)


def test_innovation_crossover_tail():
    mother, father = _parents()

    first, second = innovation_crossover(mother, father, 2.0, 1.0, random.Random(3))
    assert first.mutation_ids == mother.mutation_ids

    first, second = innovation_crossover(mother, father, 1.0, 2.0, random.Random(3))
    assert first.mutation_ids == father.mutation_ids


def test_crossover_dispatches_on_alignment():
    mother, father = _parents()
    config = EvolutionConfig(alignment="innovation")

    assert crossover(mother, father, 2.0, 1.0, random.Random(4), config) == innovation_crossover(
        mother, father, 2.0, 1.0, random.Random(4), config
    )
    assert crossover(mother, father, 2.0, 1.0, random.Random(4)) == positional_crossover(
        mother, father, 2.0, 1.0, random.Random(4)
    )
