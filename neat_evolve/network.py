"""
Evaluable network ("Brain") built from a genome.

A Brain is a disposable view of one genome. Each call to ``activate`` runs a
single synchronous time step: edges read the node outputs left by the previous
step, so recurrent connections feed back one call later. That state is kept
between calls on purpose and is only cleared by ``reset``.
"""

from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .errors import GenomeError
from .genome import Genome, NodeKind


def steepened_sigmoid(x: NDArray) -> NDArray:
    """Logistic sigmoid with slope 5 at the origin."""
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-5.0 * x))


class Brain:
    def __init__(self, genome: Genome):
        self.genome = genome
        self.fitness = 0.0

        nodes = genome.nodes
        slot = {node.mutation_id: i for i, node in enumerate(nodes)}
        self.kinds = np.array([int(n.kind) for n in nodes], dtype=np.int8)
        self.inputs = int(np.sum(self.kinds == NodeKind.SENSOR))
        self.outputs = int(np.sum(self.kinds == NodeKind.OUTPUT))

        self._sensor_slots = np.flatnonzero(self.kinds == NodeKind.SENSOR)
        self._output_slots = np.flatnonzero(self.kinds == NodeKind.OUTPUT)
        self._active_slots = np.flatnonzero(self.kinds != NodeKind.SENSOR)

        enabled = [c for c in genome.connections if c.enabled]
        try:
            self.sources = np.array([slot[c.from_node] for c in enabled], dtype=np.intp)
            self.targets = np.array([slot[c.to_node] for c in enabled], dtype=np.intp)
        except KeyError as exc:
            raise GenomeError(f"Connection refers to missing node {exc.args[0]}") from None
        self.weights = np.array([c.weight for c in enabled], dtype=np.float64)

        self.accumulator = np.zeros(len(nodes), dtype=np.float64)
        self.output = np.zeros(len(nodes), dtype=np.float64)

    @classmethod
    def from_text(cls, text: str) -> "Brain":
        return cls(Genome.decode(text))

    @property
    def genes(self) -> str:
        """Text encoding of the genome this brain was built from."""
        return self.genome.encode()

    @property
    def num_nodes(self) -> int:
        return len(self.kinds)

    @property
    def num_connections(self) -> int:
        return len(self.weights)

    def reset(self):
        """Forget the state carried over from previous time steps."""
        self.accumulator[:] = 0.0
        self.output[:] = 0.0

    def activate(self, inputs: Sequence[float]) -> NDArray:
        """Run one time step and return the output node values."""
        values = np.asarray(inputs, dtype=np.float64).ravel()
        if len(values) < self.inputs:
            raise ValueError(
                f"Expected {self.inputs} inputs, got {len(values)}"
            )

        self.accumulator[:] = 0.0
        self.output[self._sensor_slots] = values[: self.inputs]

        # Non-sensor outputs are still those of the previous step here
        np.add.at(self.accumulator, self.targets, self.output[self.sources] * self.weights)

        self.output[self._active_slots] = steepened_sigmoid(
            self.accumulator[self._active_slots]
        )
        return self.output[self._output_slots].copy()

    def predict(self, X: Union[Sequence[Sequence[float]], NDArray]) -> NDArray:
        """Evaluate each row independently from a fresh state."""
        rows = np.atleast_2d(np.asarray(X, dtype=np.float64))
        results = np.empty((len(rows), self.outputs), dtype=np.float64)
        for i, row in enumerate(rows):
            self.reset()
            results[i] = self.activate(row)
        return results

    def __repr__(self) -> str:
        return (
            f"Brain(inputs={self.inputs}, outputs={self.outputs}, "
            f"nodes={self.num_nodes}, connections={self.num_connections}, "
            f"fitness={self.fitness:.4f})"
        )
