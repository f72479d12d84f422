"""
Data models for graph nodes and edges.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

# Accepted sex codes and their display labels
SEXES: Dict[str, str] = {
    "M": "Male",
    "F": "Female",
    "U": "Undefined",
}


def canonical_pair(a: int, b: int) -> Tuple[int, int]:
    """Order an unordered endpoint pair so the smaller id comes first."""
    if a > b:
        return b, a
    return a, b


@dataclass
class Node:
    """Represents a person node in the graph."""

    id: int
    name: str
    x: int
    y: int
    year: int
    sex: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Edge:
    """Represents an undirected link between two nodes.

    Endpoints are always stored in canonical order (a < b).
    """

    id: int
    a: int
    b: int
    votes: int = 1

    @property
    def key(self) -> str:
        """Key used by clients to address the edge, e.g. '100_101'."""
        return f"{self.a}_{self.b}"

    def to_dict(self) -> dict:
        return asdict(self)
