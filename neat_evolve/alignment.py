"""
Genome alignment, compatibility distance and the species-sharing predicate.

Two alignment strategies are available:

- ``positional`` walks both genomes index by index and compares the mutation
  ids found at each position. Genes are only considered homologous when they
  sit at the same index, so a single missing gene early in one genome shifts
  every later comparison to "disjoint".
- ``innovation`` matches genes by mutation id regardless of position, the
  canonical NEAT scheme, tolerating gaps.

``positional`` is the default.
"""

from dataclasses import dataclass
from typing import Callable, Dict

from .config import DEFAULT_CONFIG, EvolutionConfig
from .errors import ConfigError
from .genome import ConnectionGene, Genome


@dataclass(frozen=True)
class Alignment:
    size: float  # normalizing genome size, 1 for small genomes
    matched: int
    disjoint: int
    excess: int
    weight_diff: float


def _normalized_size(a: Genome, b: Genome, normalize_below: int) -> float:
    n = max(len(a), len(b))
    return 1.0 if n < normalize_below else float(n)


def positional_align(a: Genome, b: Genome, normalize_below: int = 20) -> Alignment:
    """Compare genes position by position up to the longer genome's length."""
    matched = disjoint = excess = 0
    weight_diff = 0.0
    longer = a if len(a) > len(b) else b

    for i in range(max(len(a), len(b))):
        if i < len(a) and i < len(b):
            left, right = a[i], b[i]
            if left.mutation_id == right.mutation_id:
                matched += 1
                if isinstance(left, ConnectionGene) and isinstance(right, ConnectionGene):
                    weight_diff += abs(left.weight - right.weight)
            else:
                disjoint += 1
        else:
            excess += 1
            gene = longer[i]
            if isinstance(gene, ConnectionGene):
                weight_diff += abs(gene.weight)

    return Alignment(
        _normalized_size(a, b, normalize_below), matched, disjoint, excess, weight_diff
    )


def innovation_align(a: Genome, b: Genome, normalize_below: int = 20) -> Alignment:
    """Match genes by mutation id; genes past the other genome's last id are excess."""
    genes_a = {g.mutation_id: g for g in a}
    genes_b = {g.mutation_id: g for g in b}
    if not genes_a or not genes_b:
        cutoff = -1
    else:
        cutoff = min(max(genes_a), max(genes_b))

    matched = disjoint = excess = 0
    weight_diff = 0.0
    for mutation_id in sorted(genes_a.keys() | genes_b.keys()):
        left, right = genes_a.get(mutation_id), genes_b.get(mutation_id)
        if left is not None and right is not None:
            matched += 1
            if isinstance(left, ConnectionGene) and isinstance(right, ConnectionGene):
                weight_diff += abs(left.weight - right.weight)
        elif mutation_id <= cutoff:
            disjoint += 1
        else:
            excess += 1
            gene = left if left is not None else right
            if isinstance(gene, ConnectionGene):
                weight_diff += abs(gene.weight)

    return Alignment(
        _normalized_size(a, b, normalize_below), matched, disjoint, excess, weight_diff
    )


ALIGNERS: Dict[str, Callable[[Genome, Genome, int], Alignment]] = {
    "positional": positional_align,
    "innovation": innovation_align,
}


def align(a: Genome, b: Genome, config: EvolutionConfig = DEFAULT_CONFIG) -> Alignment:
    try:
        aligner = ALIGNERS[config.alignment]
    except KeyError:
        raise ConfigError(f"Unknown alignment strategy {config.alignment!r}") from None
    return aligner(a, b, config.normalize_below)


def compatibility_distance(
    a: Genome, b: Genome, config: EvolutionConfig = DEFAULT_CONFIG
) -> float:
    """Disjoint and excess ratios plus weighted total weight difference."""
    result = align(a, b, config)
    return (
        config.disjoint_coefficient * result.disjoint / result.size
        + config.excess_coefficient * result.excess / result.size
        + config.weight_coefficient * result.weight_diff
    )


def sharing(a: Genome, b: Genome, config: EvolutionConfig = DEFAULT_CONFIG) -> int:
    """1 if the genomes belong in the same species, otherwise 0."""
    return 1 if compatibility_distance(a, b, config) < config.compatibility_threshold else 0
