"""
Graph module for node and edge storage.

- models: Data classes for nodes and edges
- schema: Database schema creation
- node_operations: Node CRUD operations
- edge_operations: Edge CRUD operations
- queries: Whole-graph read operations
- graph: Main GraphStore facade with per-request sessions
"""

from graf.graph.graph import GraphSession, GraphStore, WriteConflictError
from graf.graph.models import SEXES, Edge, Node, canonical_pair

__all__ = [
    "GraphStore",
    "GraphSession",
    "WriteConflictError",
    "Node",
    "Edge",
    "SEXES",
    "canonical_pair",
]
