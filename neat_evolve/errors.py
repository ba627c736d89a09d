"""
Exception types raised by neat_evolve.
"""


class NeatError(Exception):
    """Base class for all neat_evolve errors."""


class GenomeError(NeatError):
    """A genome is structurally invalid (duplicate ids, dangling endpoints)."""


class GenomeDecodeError(GenomeError, ValueError):
    """A genome text record could not be decoded."""

    def __init__(self, message: str, record: str = ""):
        super().__init__(f"{message}: {record!r}" if record else message)
        self.record = record


class ConfigError(NeatError, ValueError):
    """An EvolutionConfig holds an out-of-range value."""
