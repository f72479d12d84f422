"""
Edge CRUD operations for the graph store.

Edges are stored as Link relationships directed from the smaller node id to
the larger one, so a single MATCH with a fixed direction finds any pair.
"""

from typing import Optional

import kuzu

from graf.graph.models import Edge
from graf.graph.schema import EDGE_ID_SEQUENCE, EDGE_TABLE, NODE_TABLE


class EdgeOperations:
    """Handles CRUD operations for links between nodes."""

    def __init__(self, conn: kuzu.Connection, read_only: bool = False):
        """Initialize edge operations.

        Args:
            conn: KuzuDB connection to use for operations
            read_only: Whether database is in read-only mode
        """
        self.conn = conn
        self.read_only = read_only

    def _check_read_only(self) -> None:
        """Raise exception if database is in read-only mode.

        Raises:
            RuntimeError: If database is in read-only mode
        """
        if self.read_only:
            raise RuntimeError(
                "Cannot perform write operation: database is in read-only mode. "
                "Open the GraphStore with read_only=False to enable writes."
            )

    @staticmethod
    def _row_to_edge(row: list) -> Edge:
        return Edge(id=row[0], a=row[1], b=row[2], votes=row[3])

    def get(self, edge_id: int) -> Optional[Edge]:
        """Get an edge by its id.

        Args:
            edge_id: Edge identifier

        Returns:
            Edge if found, None otherwise
        """
        result = self.conn.execute(
            f"""
            MATCH (a:{NODE_TABLE})-[l:{EDGE_TABLE} {{id: $id}}]->(b:{NODE_TABLE})
            RETURN l.id, a.id, b.id, l.votes
        """,
            {"id": edge_id},
        )
        if not result.has_next():
            return None
        return self._row_to_edge(result.get_next())

    def find_by_pair(self, a: int, b: int) -> Optional[Edge]:
        """Get the edge between two nodes.

        Args:
            a: Smaller endpoint id (canonical order)
            b: Larger endpoint id (canonical order)

        Returns:
            Edge if found, None otherwise
        """
        result = self.conn.execute(
            f"""
            MATCH (a:{NODE_TABLE} {{id: $a}})-[l:{EDGE_TABLE}]->(b:{NODE_TABLE} {{id: $b}})
            RETURN l.id, a.id, b.id, l.votes
        """,
            {"a": a, "b": b},
        )
        if not result.has_next():
            return None
        return self._row_to_edge(result.get_next())

    def insert(self, a: int, b: int) -> int:
        """Create an edge with a single vote.

        Args:
            a: Smaller endpoint id (canonical order)
            b: Larger endpoint id (canonical order)

        Returns:
            The store-assigned edge id

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        result = self.conn.execute(f"RETURN nextval('{EDGE_ID_SEQUENCE}')")
        edge_id = result.get_next()[0]

        self.conn.execute(
            f"""
            MATCH (a:{NODE_TABLE} {{id: $a}}), (b:{NODE_TABLE} {{id: $b}})
            CREATE (a)-[:{EDGE_TABLE} {{id: $id, votes: 1}}]->(b)
        """,
            {"a": a, "b": b, "id": edge_id},
        )
        return edge_id

    def delete(self, edge_id: int) -> None:
        """Delete an edge by its id.

        Args:
            edge_id: Edge identifier

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            f"""
            MATCH (:{NODE_TABLE})-[l:{EDGE_TABLE} {{id: $id}}]->(:{NODE_TABLE})
            DELETE l
        """,
            {"id": edge_id},
        )
