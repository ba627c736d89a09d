"""
Genome representation and its text encoding.

A genome is an ordered sequence of node and connection genes kept sorted by
mutation id. The text form is the only persisted representation:

    n,<id>,<kind>;                                node gene
    c,<id>,<from>,<to>,<hex16 weight>,<0|1>;      connection gene
"""

import random
import re
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, List, Sequence, Set, Tuple, Union

from .errors import GenomeDecodeError, GenomeError


class NodeKind(IntEnum):
    SENSOR = 0
    OUTPUT = 1
    HIDDEN = 2


@dataclass(frozen=True)
class NodeGene:
    mutation_id: int
    kind: NodeKind

    def encode(self) -> str:
        return f"n,{self.mutation_id},{int(self.kind)};"


@dataclass(frozen=True)
class ConnectionGene:
    mutation_id: int
    from_node: int
    to_node: int
    weight: float
    enabled: bool = True

    def encode(self) -> str:
        return (
            f"c,{self.mutation_id},{self.from_node},{self.to_node},"
            f"{encode_weight(self.weight)},{int(self.enabled)};"
        )


Gene = Union[NodeGene, ConnectionGene]

_HEX_WEIGHT = re.compile(r"[0-9a-fA-F]{1,16}")


def encode_weight(weight: float) -> str:
    """Big-endian IEEE-754 bit pattern of a double as 16 hex digits."""
    return struct.pack(">d", weight).hex()


def decode_weight(text: str) -> float:
    if not _HEX_WEIGHT.fullmatch(text):
        raise GenomeDecodeError("Malformed hex weight", text)
    return struct.unpack(">d", bytes.fromhex(text.rjust(16, "0")))[0]


def _parse_int(text: str, record: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise GenomeDecodeError(f"Expected an integer, got {text!r}", record) from None


def decode_gene(record: str) -> Gene:
    """Decode a single gene record (with or without its trailing ';')."""
    body = record[:-1] if record.endswith(";") else record
    parts = body.split(",")
    if len(parts) < 2:
        raise GenomeDecodeError("Gene record has no mutation id", record)

    # The id is the second field of every record kind
    mutation_id = _parse_int(parts[1], record)

    if parts[0] == "n":
        if len(parts) != 3:
            raise GenomeDecodeError("Node gene needs 3 fields", record)
        kind = _parse_int(parts[2], record)
        try:
            return NodeGene(mutation_id, NodeKind(kind))
        except ValueError:
            raise GenomeDecodeError(f"Unknown node kind {kind}", record) from None

    if parts[0] == "c":
        if len(parts) != 6:
            raise GenomeDecodeError("Connection gene needs 6 fields", record)
        from_node = _parse_int(parts[2], record)
        to_node = _parse_int(parts[3], record)
        weight = decode_weight(parts[4])
        if parts[5] not in ("0", "1"):
            raise GenomeDecodeError(f"Bad enabled bit {parts[5]!r}", record)
        return ConnectionGene(mutation_id, from_node, to_node, weight, parts[5] == "1")

    raise GenomeDecodeError("Unknown gene signature", record)


class Genome:
    """Immutable, id-sorted sequence of genes."""

    __slots__ = ("_genes",)

    def __init__(self, genes: Iterable[Gene] = ()):
        ordered = sorted(genes, key=lambda g: g.mutation_id)
        for prev, gene in zip(ordered, ordered[1:]):
            if prev.mutation_id == gene.mutation_id:
                raise GenomeError(f"Duplicate mutation id {gene.mutation_id}")
        self._genes: Tuple[Gene, ...] = tuple(ordered)

    @classmethod
    def decode(cls, text: str) -> "Genome":
        return decode_genome(text)

    def encode(self) -> str:
        return encode_genome(self)

    @property
    def genes(self) -> Tuple[Gene, ...]:
        return self._genes

    @property
    def nodes(self) -> List[NodeGene]:
        return [g for g in self._genes if isinstance(g, NodeGene)]

    @property
    def connections(self) -> List[ConnectionGene]:
        return [g for g in self._genes if isinstance(g, ConnectionGene)]

    @property
    def hidden_nodes(self) -> List[NodeGene]:
        return [n for n in self.nodes if n.kind == NodeKind.HIDDEN]

    @property
    def node_ids(self) -> Set[int]:
        return {n.mutation_id for n in self.nodes}

    @property
    def mutation_ids(self) -> Set[int]:
        return {g.mutation_id for g in self._genes}

    @property
    def inputs(self) -> int:
        return sum(1 for n in self.nodes if n.kind == NodeKind.SENSOR)

    @property
    def outputs(self) -> int:
        return sum(1 for n in self.nodes if n.kind == NodeKind.OUTPUT)

    def __len__(self) -> int:
        return len(self._genes)

    def __iter__(self) -> Iterator[Gene]:
        return iter(self._genes)

    def __getitem__(self, index):
        return self._genes[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Genome):
            return NotImplemented
        return self._genes == other._genes

    def __hash__(self) -> int:
        return hash(self._genes)

    def __repr__(self) -> str:
        return (
            f"Genome(nodes={len(self.nodes)}, connections={len(self.connections)}, "
            f"text={self.encode()!r})"
        )


def encode_genome(genome: Union[Genome, Sequence[Gene]]) -> str:
    """Concatenate gene records in ascending mutation id order."""
    genes = genome.genes if isinstance(genome, Genome) else Genome(genome).genes
    return "".join(gene.encode() for gene in genes)


def decode_genome(text: str) -> Genome:
    """Parse a genome string. Raises GenomeDecodeError on any malformed record."""
    text = text.strip()
    if not text:
        return Genome()
    records = text.split(";")
    if records[-1] != "":
        raise GenomeDecodeError("Unterminated gene record", records[-1])
    return Genome(decode_gene(record) for record in records[:-1])


def starting_genome(
    inputs: int, outputs: int, rng: random.Random, weight_range: float = 2.0
) -> Tuple[Genome, int]:
    """Minimal genome: sensors, outputs and every sensor->output connection.

    Returns the genome and the next free mutation id.
    """
    if inputs < 1 or outputs < 1:
        raise GenomeError("A genome needs at least one input and one output")

    genes: List[Gene] = []
    mutation_id = 0
    for _ in range(inputs):
        genes.append(NodeGene(mutation_id, NodeKind.SENSOR))
        mutation_id += 1
    for _ in range(outputs):
        genes.append(NodeGene(mutation_id, NodeKind.OUTPUT))
        mutation_id += 1

    for i in range(inputs):
        for j in range(outputs):
            weight = rng.uniform(-weight_range, weight_range)
            genes.append(ConnectionGene(mutation_id, i, inputs + j, weight, True))
            mutation_id += 1

    return Genome(genes), mutation_id
