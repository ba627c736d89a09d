import random

import pytest

from neat_evolve.genome import ConnectionGene, Genome, NodeGene, NodeKind


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def two_input_genome():
    """Sensors 0 and 1 feeding output 2 with unit weights."""
    return Genome(
        [
            NodeGene(0, NodeKind.SENSOR),
            NodeGene(1, NodeKind.SENSOR),
            NodeGene(2, NodeKind.OUTPUT),
            ConnectionGene(3, 0, 2, 1.0, True),
            ConnectionGene(4, 1, 2, 1.0, True),
        ]
    )


def with_weights(genome: Genome, offset: float) -> Genome:
    """Same structure with every connection weight shifted by ``offset``."""
    genes = []
    for gene in genome:
        if isinstance(gene, ConnectionGene):
            gene = ConnectionGene(
                gene.mutation_id, gene.from_node, gene.to_node, gene.weight + offset, gene.enabled
            )
        genes.append(gene)
    return Genome(genes)
