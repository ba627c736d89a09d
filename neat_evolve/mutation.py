"""
Weight and structural mutation with innovation tracking.
"""

import logging
import random
from dataclasses import replace
from enum import Enum
from typing import Dict, Optional, Tuple

from .config import DEFAULT_CONFIG, EvolutionConfig
from .genome import ConnectionGene, Genome, NodeGene, NodeKind

logger = logging.getLogger(__name__)


class MutationKind(Enum):
    SPLIT_CONNECTION = "split_connection"
    ADD_CONNECTION = "add_connection"


# Number of mutation ids consumed by each structural change
ID_SPAN = {MutationKind.SPLIT_CONNECTION: 3, MutationKind.ADD_CONNECTION: 1}


class InnovationTracker:
    """Owns the run-wide mutation id counter and the per-generation registry.

    Two lineages making the same structural change (splitting the same
    connection, or adding the same connection) within one generation receive
    the same ids, so their genomes stay alignable.
    """

    def __init__(self, next_id: int = 0):
        self.next_id = next_id
        self.registry: Dict[Tuple[MutationKind, int, int], int] = {}

    def new_generation(self):
        """Forget this generation's structural changes; the counter keeps going."""
        self.registry.clear()

    def lookup(self, kind: MutationKind, from_node: int, to_node: int) -> Optional[int]:
        return self.registry.get((kind, from_node, to_node))

    def claim(self, kind: MutationKind, from_node: int, to_node: int) -> int:
        """First id of the block assigned to this change, minting one if needed."""
        key = (kind, from_node, to_node)
        if key in self.registry:
            return self.registry[key]
        first_id = self.next_id
        self.next_id += ID_SPAN[kind]
        self.registry[key] = first_id
        return first_id

    def __repr__(self) -> str:
        return f"InnovationTracker(next_id={self.next_id}, registered={len(self.registry)})"


def perturb_weights(
    genome: Genome, rng: random.Random, config: EvolutionConfig = DEFAULT_CONFIG
) -> Genome:
    """Nudge every connection weight, enabled or not, with some probability."""
    spread = config.weight_perturb_range
    genes = []
    for gene in genome:
        if isinstance(gene, ConnectionGene) and rng.random() < config.weight_perturb_probability:
            gene = replace(gene, weight=gene.weight + rng.uniform(-spread, spread))
        genes.append(gene)
    return Genome(genes)


def _reused_ids_collide(genome: Genome, first_id: Optional[int], span: int) -> bool:
    if first_id is None:
        return False
    present = genome.mutation_ids
    return any(first_id + k in present for k in range(span))


def split_connection(
    genome: Genome,
    tracker: InnovationTracker,
    rng: random.Random,
    config: EvolutionConfig = DEFAULT_CONFIG,
) -> Optional[Genome]:
    """Insert a hidden node in the middle of a random enabled connection.

    The old connection is disabled, ``from -> new`` gets weight 1.0 and
    ``new -> to`` keeps the old weight. Returns None if no enabled connection
    was found within ``config.max_attempts`` picks.
    """
    connections = genome.connections
    if not connections:
        return None

    chosen = None
    for _ in range(config.max_attempts):
        candidate = rng.choice(connections)
        if candidate.enabled:
            chosen = candidate
            break
    if chosen is None:
        logger.debug("split_connection: no enabled connection found")
        return None

    kind = MutationKind.SPLIT_CONNECTION
    known = tracker.lookup(kind, chosen.from_node, chosen.to_node)
    if _reused_ids_collide(genome, known, ID_SPAN[kind]):
        # This genome already carries this generation's split of the connection
        return None

    node_id = tracker.claim(kind, chosen.from_node, chosen.to_node)
    new_genes = [
        NodeGene(node_id, NodeKind.HIDDEN),
        ConnectionGene(node_id + 1, chosen.from_node, node_id, 1.0, True),
        ConnectionGene(node_id + 2, node_id, chosen.to_node, chosen.weight, True),
    ]

    genes = [
        replace(g, enabled=False) if g.mutation_id == chosen.mutation_id else g
        for g in genome
    ]
    return Genome(genes + new_genes)


def add_connection(
    genome: Genome,
    tracker: InnovationTracker,
    rng: random.Random,
    config: EvolutionConfig = DEFAULT_CONFIG,
) -> Optional[Genome]:
    """Connect a random node to a random non-sensor node not yet connected.

    Self loops and backward edges are allowed; the network is recurrent.
    """
    nodes = genome.nodes
    targets = [n for n in nodes if n.kind != NodeKind.SENSOR]
    if not targets:
        return None

    existing = {(c.from_node, c.to_node) for c in genome.connections}
    pair = None
    for _ in range(config.max_attempts):
        source = rng.choice(nodes).mutation_id
        target = rng.choice(targets).mutation_id
        if (source, target) not in existing:
            pair = (source, target)
            break
    if pair is None:
        logger.debug("add_connection: no unconnected pair found")
        return None

    kind = MutationKind.ADD_CONNECTION
    if _reused_ids_collide(genome, tracker.lookup(kind, *pair), ID_SPAN[kind]):
        return None

    weight = rng.uniform(-config.new_weight_range, config.new_weight_range)
    mutation_id = tracker.claim(kind, *pair)
    return Genome(list(genome) + [ConnectionGene(mutation_id, pair[0], pair[1], weight, True)])


def mutate(
    genome: Genome,
    tracker: InnovationTracker,
    rng: random.Random,
    config: EvolutionConfig = DEFAULT_CONFIG,
) -> Genome:
    """Apply the weight, split-connection and add-connection operators.

    Each operator is gated independently. The tracker's counter and registry
    are updated in place.
    """
    if rng.random() < config.weight_mutation_rate:
        genome = perturb_weights(genome, rng, config)

    if rng.random() < config.add_node_rate:
        mutated = split_connection(genome, tracker, rng, config)
        if mutated is not None:
            genome = mutated

    if rng.random() < config.add_connection_rate:
        mutated = add_connection(genome, tracker, rng, config)
        if mutated is not None:
            genome = mutated

    return genome
