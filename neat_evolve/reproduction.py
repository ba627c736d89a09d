"""
Crossover between two parent genomes.
"""

import random
from typing import Iterable, List, Optional, Sequence, Tuple

from .alignment import positional_align
from .config import DEFAULT_CONFIG, EvolutionConfig
from .genome import ConnectionGene, Gene, Genome, NodeGene


def repair(genes: Iterable[Gene]) -> Genome:
    """Build a valid genome from recombined genes.

    The first gene seen for each mutation id wins, and connections whose
    endpoints are not node genes of the result are dropped.
    """
    kept: List[Gene] = []
    seen = set()
    for gene in genes:
        if gene.mutation_id in seen:
            continue
        seen.add(gene.mutation_id)
        kept.append(gene)

    node_ids = {g.mutation_id for g in kept if isinstance(g, NodeGene)}
    return Genome(
        g
        for g in kept
        if not isinstance(g, ConnectionGene)
        or (g.from_node in node_ids and g.to_node in node_ids)
    )


def _dominant(
    mother: Genome, father: Genome, mother_fitness: float, father_fitness: float
) -> Optional[Genome]:
    """The parent that is both strictly fitter and strictly longer, if any."""
    if mother_fitness > father_fitness and len(mother) > len(father):
        return mother
    if father_fitness > mother_fitness and len(father) > len(mother):
        return father
    return None


def _swap_pairs(
    left: Sequence[Gene], right: Sequence[Gene], rng: random.Random
) -> Tuple[List[Gene], List[Gene]]:
    first, second = [], []
    for l_gene, r_gene in zip(left, right):
        if rng.random() < 0.5:
            first.append(l_gene)
            second.append(r_gene)
        else:
            first.append(r_gene)
            second.append(l_gene)
    return first, second


def positional_crossover(
    mother: Genome,
    father: Genome,
    mother_fitness: float,
    father_fitness: float,
    rng: random.Random,
    config: EvolutionConfig = DEFAULT_CONFIG,
) -> Tuple[Genome, Genome]:
    """Recombine the first ``matched`` positions of each parent.

    Each position goes to one offspring from the mother and to the other from
    the father. The dominant parent's remaining genes are appended to both.
    """
    matched = positional_align(mother, father, config.normalize_below).matched
    mother_genes = list(mother.genes[:matched])
    father_genes = list(father.genes[:matched])

    dominant = _dominant(mother, father, mother_fitness, father_fitness)
    if dominant is not None:
        tail = list(dominant.genes[matched:])
        mother_genes += tail
        father_genes += tail

    first, second = _swap_pairs(mother_genes, father_genes, rng)
    return repair(first), repair(second)


def innovation_crossover(
    mother: Genome,
    father: Genome,
    mother_fitness: float,
    father_fitness: float,
    rng: random.Random,
    config: EvolutionConfig = DEFAULT_CONFIG,
) -> Tuple[Genome, Genome]:
    """Recombine genes matched by mutation id.

    Unmatched genes are inherited only from the dominant parent.
    """
    genes_m = {g.mutation_id: g for g in mother}
    genes_f = {g.mutation_id: g for g in father}
    dominant = _dominant(mother, father, mother_fitness, father_fitness)

    first, second = [], []
    for mutation_id in sorted(genes_m.keys() | genes_f.keys()):
        m_gene, f_gene = genes_m.get(mutation_id), genes_f.get(mutation_id)
        if m_gene is not None and f_gene is not None:
            a, b = _swap_pairs([m_gene], [f_gene], rng)
            first += a
            second += b
        elif dominant is not None:
            gene = m_gene if dominant is mother else f_gene
            if gene is not None:
                first.append(gene)
                second.append(gene)

    return repair(first), repair(second)


CROSSOVERS = {
    "positional": positional_crossover,
    "innovation": innovation_crossover,
}


def crossover(
    mother: Genome,
    father: Genome,
    mother_fitness: float,
    father_fitness: float,
    rng: random.Random,
    config: EvolutionConfig = DEFAULT_CONFIG,
) -> Tuple[Genome, Genome]:
    """Produce two offspring using the configured alignment strategy."""
    return CROSSOVERS[config.alignment](
        mother, father, mother_fitness, father_fitness, rng, config
    )
