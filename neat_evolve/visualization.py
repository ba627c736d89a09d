"""
Visualization utilities for genomes, brains and evolution runs.
"""

from typing import Dict, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np
from matplotlib.lines import Line2D

from .genome import Genome, NodeKind
from .network import Brain
from .population import GenerationSummary

NODE_COLORS = {
    NodeKind.SENSOR: "#1B1464",  # Deep navy
    NodeKind.HIDDEN: "#2ECC71",  # Bright green
    NodeKind.OUTPUT: "#6F1E51",  # Deep magenta
}


def _finish(title: Optional[str]):
    if title:
        plt.savefig(f"{title}.png", bbox_inches="tight", dpi=150)
        plt.close()
    else:
        plt.show()


def _layout(genome: Genome) -> Dict[int, Tuple[float, float]]:
    """Sensors on the left, hidden nodes in the middle, outputs on the right."""
    layer_spacing = 2.0
    node_spacing = 1.0
    columns = {NodeKind.SENSOR: 0, NodeKind.HIDDEN: 1, NodeKind.OUTPUT: 2}

    pos = {}
    for kind, column in columns.items():
        ids = [n.mutation_id for n in genome.nodes if n.kind == kind]
        for i, node_id in enumerate(ids):
            pos[node_id] = (column * layer_spacing, (i - len(ids) / 2) * node_spacing)
    return pos


def genome_graph(genome: Genome) -> nx.DiGraph:
    """Directed graph of a genome; edges carry ``weight``, ``enabled`` and ``mutation_id``."""
    G = nx.DiGraph()
    for node in genome.nodes:
        G.add_node(node.mutation_id, kind=node.kind)
    for conn in genome.connections:
        G.add_edge(
            conn.from_node,
            conn.to_node,
            weight=conn.weight,
            enabled=conn.enabled,
            mutation_id=conn.mutation_id,
        )
    return G


def plot_genome(genome: Genome, title: Optional[str] = None):
    """Draw a genome; enabled edges are coloured by sign, disabled ones dashed."""
    G = genome_graph(genome)
    pos = _layout(genome)

    plt.figure(figsize=(10, 8))

    for kind, color in NODE_COLORS.items():
        nodes = [n for n, data in G.nodes(data=True) if data["kind"] == kind]
        if nodes:
            nx.draw_networkx_nodes(
                G, pos, nodelist=nodes, node_color=color, node_shape="o", node_size=500
            )

    enabled = [(u, v) for u, v, d in G.edges(data=True) if d["enabled"]]
    disabled = [(u, v) for u, v, d in G.edges(data=True) if not d["enabled"]]
    if enabled:
        widths = [0.5 + min(abs(G.edges[e]["weight"]), 3.0) for e in enabled]
        colors = ["#E74C3C" if G.edges[e]["weight"] < 0 else "#3498DB" for e in enabled]
        nx.draw_networkx_edges(
            G,
            pos,
            edgelist=enabled,
            edge_color=colors,
            width=widths,
            arrows=True,
            alpha=0.7,
            arrowsize=10,
            connectionstyle="arc3,rad=0.1",
        )
    if disabled:
        nx.draw_networkx_edges(
            G,
            pos,
            edgelist=disabled,
            edge_color="#808080",  # Medium gray
            style="dashed",
            arrows=True,
            alpha=0.4,
            arrowsize=8,
            connectionstyle="arc3,rad=0.1",
        )

    labels = {node: str(node) for node in G.nodes()}
    nx.draw_networkx_labels(G, pos, labels, font_color="white")

    legend_elements = [
        Line2D([0], [0], marker="o", color="w", markerfacecolor=color,
               label=kind.name.capitalize(), markersize=10)
        for kind, color in NODE_COLORS.items()
    ]
    legend_elements += [
        Line2D([0], [0], color="#3498DB", label="Positive weight"),
        Line2D([0], [0], color="#E74C3C", label="Negative weight"),
        Line2D([0], [0], color="#808080", linestyle="--", label="Disabled"),
    ]
    plt.legend(handles=legend_elements, loc="center left", bbox_to_anchor=(1, 0.5))
    plt.axis("off")

    _finish(title)


def plot_decision_boundary(brain: Brain, X, y, title: Optional[str] = None):
    """Plot the first output of a two-input brain over the plane of ``X``.

    If the brain has an extra leading input (a bias), it is held at 1.
    """
    X = np.asarray(X, dtype=np.float64)
    y = np.asarray(y).ravel()
    h = 0.05  # Step size in the mesh

    x_min, x_max = X[:, -2].min() - 0.5, X[:, -2].max() + 0.5
    y_min, y_max = X[:, -1].min() - 0.5, X[:, -1].max() + 0.5
    xx, yy = np.meshgrid(np.arange(x_min, x_max, h), np.arange(y_min, y_max, h))

    grid_points = np.column_stack([xx.ravel(), yy.ravel()])
    if brain.inputs > 2:
        bias = np.ones((len(grid_points), brain.inputs - 2))
        grid_points = np.hstack([bias, grid_points])

    Z = brain.predict(grid_points)[:, 0].reshape(xx.shape)

    fig, ax = plt.subplots(figsize=(10, 9))
    cs = ax.contourf(xx, yy, Z, cmap="coolwarm", alpha=0.8, levels=20)
    ax.scatter(X[:, -2], X[:, -1], c=y, cmap="coolwarm", edgecolors="black", s=40)
    ax.contour(xx, yy, Z, levels=[0.5], colors="k", linewidths=2, linestyles="--")
    ax.set_title(f"Brain output (fitness: {brain.fitness:.2f})", fontsize=14)
    ax.set_xlabel("X1", fontsize=12)
    ax.set_ylabel("X2", fontsize=12)
    fig.colorbar(cs, ax=ax, label="Output")

    _finish(title)


def plot_fitness_history(history: Sequence[GenerationSummary], title: Optional[str] = None):
    """Champion fitness and species count per generation."""
    generations = [s.generation for s in history]

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(generations, [s.champion_fitness for s in history], color="#2ECC71")
    ax.set_xlabel("Generation")
    ax.set_ylabel("Champion fitness")

    species_ax = ax.twinx()
    species_ax.step(
        generations, [s.species_count for s in history], color="#6F1E51", where="post"
    )
    species_ax.set_ylabel("Species")

    _finish(title)
