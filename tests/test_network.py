import math

import numpy as np
import pytest

from neat_evolve.errors import GenomeError
from neat_evolve.genome import ConnectionGene, Genome, NodeGene, NodeKind
from neat_evolve.network import Brain, steepened_sigmoid


def _sigmoid(x):
    return 1 / (1 + math.exp(-5 * x))


def test_two_input_scenario(two_input_genome):
    brain = Brain(two_input_genome)

    assert brain.inputs == 2
    assert brain.outputs == 1
    assert brain.activate([1, 1])[0] == pytest.approx(1 / (1 + math.exp(-10)))
    assert brain.activate([1, 1])[0] == pytest.approx(0.9999546, abs=1e-7)
    assert brain.activate([0, 0])[0] == 0.5


def test_disabled_connections_are_not_evaluated():
    genome = Genome(
        [
            NodeGene(0, NodeKind.SENSOR),
            NodeGene(1, NodeKind.OUTPUT),
            ConnectionGene(2, 0, 1, 3.0, False),
        ]
    )
    brain = Brain(genome)

    assert brain.num_connections == 0
    assert brain.activate([1.0])[0] == 0.5
    # The gene itself is still part of the genome
    assert len(brain.genome.connections) == 1


def _recurrent_genome():
    # sensor 0 -> hidden 3 -> output 1, built in one step each call
    return Genome(
        [
            NodeGene(0, NodeKind.SENSOR),
            NodeGene(1, NodeKind.OUTPUT),
            ConnectionGene(2, 0, 3, 1.0, True),
            NodeGene(3, NodeKind.HIDDEN),
            ConnectionGene(4, 3, 1, 1.0, True),
        ]
    )


def test_state_carries_over_between_calls():
    brain = Brain(_recurrent_genome())

    first = brain.activate([1.0])[0]
    second = brain.activate([1.0])[0]

    assert first == 0.5
    assert second == pytest.approx(_sigmoid(_sigmoid(1.0)))


def test_reset_clears_state():
    brain = Brain(_recurrent_genome())
    brain.activate([1.0])
    brain.activate([1.0])

    brain.reset()

    assert brain.activate([1.0])[0] == 0.5


def test_too_few_inputs(two_input_genome):
    with pytest.raises(ValueError):
        Brain(two_input_genome).activate([1.0])


def test_dangling_connection_rejected():
    genome = Genome(
        [
            NodeGene(0, NodeKind.SENSOR),
            NodeGene(1, NodeKind.OUTPUT),
            ConnectionGene(2, 0, 9, 1.0, True),
        ]
    )
    with pytest.raises(GenomeError):
        Brain(genome)


def test_from_text_and_genes(two_input_genome):
    brain = Brain.from_text(two_input_genome.encode())
    assert brain.genome == two_input_genome
    assert brain.genes == two_input_genome.encode()
    assert brain.num_nodes == 3
    assert brain.num_connections == 2


def test_predict_resets_between_rows():
    brain = Brain(_recurrent_genome())
    results = brain.predict([[1.0], [1.0], [0.0]])
    assert results.shape == (3, 1)
    np.testing.assert_allclose(results[:, 0], 0.5)


def test_sigmoid_does_not_overflow():
    values = steepened_sigmoid(np.array([-1000.0, 0.0, 1000.0]))
    np.testing.assert_allclose(values, [0.0, 0.5, 1.0])
