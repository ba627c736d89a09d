"""
NeuroEvolution of Augmenting Topologies: evolve the structure and weights of
small recurrent networks against a caller-supplied fitness function.
"""

from .alignment import align, compatibility_distance, sharing
from .config import DEFAULT_CONFIG, EvolutionConfig
from .errors import ConfigError, GenomeDecodeError, GenomeError, NeatError
from .genome import (
    ConnectionGene,
    Genome,
    NodeGene,
    NodeKind,
    decode_genome,
    encode_genome,
    starting_genome,
)
from .mutation import InnovationTracker, mutate
from .network import Brain
from .population import GenerationSummary, Population, Species

__all__ = [
    "Brain",
    "ConfigError",
    "ConnectionGene",
    "DEFAULT_CONFIG",
    "EvolutionConfig",
    "GenerationSummary",
    "Genome",
    "GenomeDecodeError",
    "GenomeError",
    "InnovationTracker",
    "NeatError",
    "NodeGene",
    "NodeKind",
    "Population",
    "Species",
    "align",
    "compatibility_distance",
    "decode_genome",
    "encode_genome",
    "mutate",
    "sharing",
    "starting_genome",
]
