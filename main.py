"""
Evolve a network that solves XOR, or one of the noisy 2-D datasets.
Inputs are a constant bias followed by the two operands.
"""

import logging
import os
import random

import numpy as np

from neat_evolve import EvolutionConfig, Population
from neat_evolve.datasets import (
    ErrorFitness,
    generate_two_circles,
    generate_xor,
    xor_cases,
)
from neat_evolve.visualization import (
    plot_decision_boundary,
    plot_fitness_history,
    plot_genome,
)


def load_dataset(dataset_fn=None, n_samples: int = 200):
    """The XOR truth table by default, otherwise ``dataset_fn`` with a bias column."""
    if dataset_fn is None:
        return xor_cases(bias=True)
    X, y = dataset_fn(n_samples=n_samples)
    return np.hstack([np.ones((len(X), 1)), X]), y


def main(
    generations: int = 500,
    population_size: int = 50,
    seed: int = 0,
    workers: int = 1,
    visualize: bool = False,
    dataset_fn=None,
    n_samples: int = 200,
):
    """Run the demo and print how the champion does on the data."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    if dataset_fn is not None:
        print(f"Generating dataset using {dataset_fn.__name__}...")
    X, y = load_dataset(dataset_fn, n_samples)
    fitness = ErrorFitness(X, y)
    config = EvolutionConfig(workers=workers)

    print(f"Generating new population with {population_size} specimens.")
    population = Population(
        X.shape[1], y.shape[1], population_size, config=config, rng=random.Random(seed)
    )

    print(f"Starting optimization for {generations} steps.")
    champion = population.optimize(fitness, generations)
    print(champion.genes)

    if dataset_fn is None:
        for inputs, expected in zip(X, y):
            champion.reset()
            output = champion.activate(inputs)
            print(f"  {inputs[1:].astype(int).tolist()} -> {output[0]:.4f} (expected {expected[0]:.0f})")
    else:
        predictions = champion.predict(X)
        accuracy = float(np.mean((predictions > 0.5) == (y > 0.5)))
        print(f"Accuracy: {accuracy:.4f}")

    if visualize:
        os.makedirs("graphs", exist_ok=True)
        plot_genome(champion.genome, title="graphs/champion")
        plot_decision_boundary(champion, X, y, title="graphs/decision_boundary")
        plot_fitness_history(population.history, title="graphs/fitness")

    return champion


if __name__ == "__main__":
    main(generations=500, population_size=50, seed=0, visualize=True)
    main(
        generations=300,
        population_size=50,
        seed=0,
        dataset_fn=generate_two_circles,
        n_samples=200,
    )
