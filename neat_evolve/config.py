"""
Hyperparameters for NEAT evolution.
"""

from dataclasses import dataclass, fields, replace as dc_replace

from .errors import ConfigError

ALIGNMENT_STRATEGIES = ("positional", "innovation")


@dataclass(frozen=True)
class EvolutionConfig:
    """All rates and thresholds used by mutation, speciation and selection."""

    # Mutation
    weight_mutation_rate: float = 0.8
    weight_perturb_probability: float = 0.9
    weight_perturb_range: float = 0.5
    add_node_rate: float = 0.03
    add_connection_rate: float = 0.05
    new_weight_range: float = 2.0
    max_attempts: int = 10

    # Compatibility
    compatibility_threshold: float = 3.0
    disjoint_coefficient: float = 1.0
    excess_coefficient: float = 1.0
    weight_coefficient: float = 0.4
    normalize_below: int = 20  # genomes shorter than this are not size-normalized
    alignment: str = "positional"

    # Selection
    stagnation_limit: int = 15
    cull_steepness: float = 5.0
    asexual_rate: float = 0.25

    # Runtime
    workers: int = 1
    log_genome_every: int = 50

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigError if any value is out of range."""
        for name in (
            "weight_mutation_rate",
            "weight_perturb_probability",
            "add_node_rate",
            "add_connection_rate",
            "asexual_rate",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value}")

        for name in ("max_attempts", "stagnation_limit", "workers", "log_genome_every"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be at least 1")

        if self.compatibility_threshold <= 0:
            raise ConfigError("compatibility_threshold must be positive")
        if self.weight_perturb_range < 0 or self.new_weight_range < 0:
            raise ConfigError("weight ranges must be non-negative")
        if self.normalize_below < 0:
            raise ConfigError("normalize_below must be non-negative")
        if self.cull_steepness <= 0:
            raise ConfigError("cull_steepness must be positive")
        if self.alignment not in ALIGNMENT_STRATEGIES:
            raise ConfigError(
                f"alignment must be one of {ALIGNMENT_STRATEGIES}, got {self.alignment!r}"
            )

    def replace(self, **changes) -> "EvolutionConfig":
        """Return a validated copy with the given fields changed."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ConfigError(f"Unknown config fields: {sorted(unknown)}")
        return dc_replace(self, **changes)


DEFAULT_CONFIG = EvolutionConfig()
