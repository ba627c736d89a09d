"""
Generational NEAT scheduler: species bookkeeping, fitness sharing, culling,
breeding and re-speciation.
"""

import logging
import math
import random
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

import numpy as np

from .alignment import compatibility_distance, sharing
from .config import DEFAULT_CONFIG, EvolutionConfig
from .errors import ConfigError
from .genome import starting_genome
from .mutation import InnovationTracker, mutate
from .network import Brain
from .reproduction import crossover

logger = logging.getLogger(__name__)

FitnessFn = Callable[[Brain], float]


@dataclass
class Species:
    """Brains descended from a common champion."""

    members: List[Brain]
    champion: Optional[Brain] = None
    best_fitness: float = float("-inf")
    shared_fitness: float = 0.0
    stagnation: int = 0

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class GenerationSummary:
    generation: int
    population_size: int
    species_count: int
    champion_fitness: float
    champion_nodes: int
    champion_connections: int


def tanh_cutoff(rank: int, n: int, steepness: float = 5.0) -> float:
    """Probability of culling the member at ``rank`` (0 is best) out of ``n``."""
    return 0.5 * (1 + math.tanh(2 * steepness * rank / n - steepness))


def _score_wrapper(args) -> float:
    """Helper for parallel fitness evaluation."""
    fitness_fn, brain = args
    return float(fitness_fn(brain))


class Population:
    """A collection of species competing to maximise a fitness function."""

    def __init__(
        self,
        inputs: int,
        outputs: int,
        size: int,
        config: Optional[EvolutionConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        if size < 1:
            raise ConfigError("Population size must be at least 1")
        self.inputs = inputs
        self.outputs = outputs
        self.size = size
        self.config = config if config is not None else DEFAULT_CONFIG
        self.rng = rng if rng is not None else random.Random()

        members = []
        next_id = 0
        for _ in range(size):
            genome, next_id = starting_genome(
                inputs, outputs, self.rng, self.config.new_weight_range
            )
            members.append(Brain(genome))

        self.tracker = InnovationTracker(next_id)
        self.species: List[Species] = [Species(members)]
        self.champion: Optional[Brain] = None
        self.generation = 0
        self.history: List[GenerationSummary] = []

    @property
    def members(self) -> Iterator[Brain]:
        for species in self.species:
            yield from species.members

    def __len__(self) -> int:
        return sum(len(s) for s in self.species)

    def optimize(
        self,
        fitness_fn: FitnessFn,
        generations: int,
        on_generation: Optional[Callable[[GenerationSummary], None]] = None,
    ) -> Brain:
        """Evolve for ``generations`` generations and return the champion."""
        if self.champion is None:
            self._evaluate(fitness_fn)
            self._report(on_generation)

        for _ in range(generations):
            self.step(fitness_fn)
            self._report(on_generation)

        return self.champion

    def step(self, fitness_fn: FitnessFn):
        """Advance one generation."""
        if self.champion is None:
            self._evaluate(fitness_fn)

        self.generation += 1
        self._remove_extinct()
        self._share_fitness()
        quotas = self._offspring_quotas()
        self._cull()
        self._breed(quotas)
        self._respeciate()
        self._evaluate(fitness_fn)

    def _remove_extinct(self):
        """Drop stagnant and empty species."""
        surviving = []
        for species in self.species:
            if species.stagnation >= self.config.stagnation_limit:
                logger.debug(
                    "Species of %d went extinct after %d stagnant generations",
                    len(species),
                    species.stagnation,
                )
                continue
            if not species.members:
                continue
            surviving.append(species)
        self.species = surviving

    def _share_fitness(self):
        """Divide each fitness by the number of compatible brains in the population."""
        brains = list(self.members)
        # Every genome is compatible with itself
        counts = np.ones(len(brains))
        for i in range(len(brains)):
            for j in range(i + 1, len(brains)):
                if sharing(brains[i].genome, brains[j].genome, self.config):
                    counts[i] += 1
                    counts[j] += 1

        index = 0
        for species in self.species:
            species.shared_fitness = 0.0
            for brain in species.members:
                species.shared_fitness += brain.fitness / counts[index]
                index += 1

    def _offspring_quotas(self) -> List[int]:
        """Next-generation size of each species, proportional to shared fitness."""
        total = sum(s.shared_fitness for s in self.species)
        # All-negative fitness still yields positive ratios
        if not math.isfinite(total) or total == 0:
            return [0] * len(self.species)
        return [
            max(0, int(math.floor(s.shared_fitness / total * self.size + 0.5)))
            for s in self.species
        ]

    def _cull(self):
        """Randomly remove members, lower ranks being removed more often."""
        for species in self.species:
            species.members.sort(key=lambda b: b.fitness, reverse=True)
            n = len(species.members)
            for rank in range(n - 1, 0, -1):
                if self.rng.random() < tanh_cutoff(rank, n, self.config.cull_steepness):
                    del species.members[rank]

    def _breed(self, quotas: List[int]):
        """Fill each species up to its quota with mutated and recombined offspring."""
        self.tracker.new_generation()
        for species, quota in zip(self.species, quotas):
            parents = list(species.members)
            if not parents:
                continue
            while len(species.members) < quota:
                if self.rng.random() < self.config.asexual_rate:
                    parent = parents[self.rng.randrange(len(parents))]
                    child = mutate(parent.genome, self.tracker, self.rng, self.config)
                    species.members.append(Brain(child))
                else:
                    mother = parents[self.rng.randrange(len(parents))]
                    father = parents[self.rng.randrange(len(parents))]
                    first, second = crossover(
                        mother.genome,
                        father.genome,
                        mother.fitness,
                        father.fitness,
                        self.rng,
                        self.config,
                    )
                    for genome in (first, second):
                        genome = mutate(genome, self.tracker, self.rng, self.config)
                        species.members.append(Brain(genome))

    def _respeciate(self):
        """Move members that drifted away from their champion into new species."""
        threshold = self.config.compatibility_threshold
        founded: List[Species] = []
        for species in self.species:
            if species.champion is None:
                continue
            for j in range(len(species.members) - 1, -1, -1):
                brain = species.members[j]
                delta = compatibility_distance(
                    species.champion.genome, brain.genome, self.config
                )
                if delta <= threshold:
                    continue

                home = None
                for candidate in founded:
                    if (
                        compatibility_distance(
                            brain.genome, candidate.members[0].genome, self.config
                        )
                        < threshold
                    ):
                        home = candidate
                        break

                if home is not None:
                    del species.members[j]
                    home.members.append(brain)
                elif len(species.members) > 1:
                    del species.members[j]
                    founded.append(Species([brain]))

        if founded:
            logger.debug("%d new species founded", len(founded))
        self.species.extend(founded)

    def _score_all(self, fitness_fn: FitnessFn, brains: List[Brain]) -> List[float]:
        if self.config.workers > 1 and len(brains) > 1:
            with ProcessPoolExecutor(max_workers=self.config.workers) as executor:
                return list(
                    executor.map(_score_wrapper, [(fitness_fn, b) for b in brains])
                )
        return [float(fitness_fn(b)) for b in brains]

    def _evaluate(self, fitness_fn: FitnessFn):
        """Score every member and update champions and stagnation counters."""
        brains = list(self.members)
        for brain, score in zip(brains, self._score_all(fitness_fn, brains)):
            brain.fitness = score

        for species in self.species:
            if not species.members:
                continue
            species.members.sort(key=lambda b: b.fitness, reverse=True)
            best = species.members[0]
            if best.fitness > species.best_fitness:
                species.champion = best
                species.best_fitness = best.fitness
                species.stagnation = 0
            else:
                species.stagnation += 1

            if species.champion is None:
                continue
            if self.champion is None or species.champion.fitness > self.champion.fitness:
                self.champion = species.champion

    def summary(self) -> GenerationSummary:
        champion = self.champion
        return GenerationSummary(
            generation=self.generation,
            population_size=len(self),
            species_count=len(self.species),
            champion_fitness=champion.fitness if champion else float("nan"),
            champion_nodes=champion.num_nodes if champion else 0,
            champion_connections=champion.num_connections if champion else 0,
        )

    def _report(self, on_generation):
        summary = self.summary()
        self.history.append(summary)
        logger.info(
            "Gen %d: %d specimens in %d species, %.2f best score with %d nodes %d connections",
            summary.generation,
            summary.population_size,
            summary.species_count,
            summary.champion_fitness,
            summary.champion_nodes,
            summary.champion_connections,
        )
        every = self.config.log_genome_every
        if self.champion is not None and self.generation and self.generation % every == 0:
            logger.info("Champion genome: %s", self.champion.genes)
        if on_generation is not None:
            on_generation(summary)
