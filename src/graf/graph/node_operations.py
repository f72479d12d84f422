"""
Node CRUD operations for the graph store.
"""

from typing import Dict, Optional, Union

import kuzu

from graf.graph.models import Node
from graf.graph.schema import EDGE_TABLE, NODE_TABLE

# Columns that may be changed by update_fields()
EDITABLE_COLUMNS = ("name", "year", "sex")


class DuplicateNodeError(Exception):
    """Raised when inserting a node whose id is already taken."""

    def __init__(self, node_id: int):
        super().__init__(f"Node id {node_id} is already in use")
        self.node_id = node_id


class NodeOperations:
    """Handles CRUD operations for person nodes."""

    def __init__(self, conn: kuzu.Connection, read_only: bool = False):
        """Initialize node operations.

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

    def exists(self, node_id: int) -> bool:
        """Check if a node with this id exists.

        Args:
            node_id: Node identifier

        Returns:
            True if the node is present
        """
        result = self.conn.execute(
            f"MATCH (p:{NODE_TABLE} {{id: $id}}) RETURN p.id",
            {"id": node_id},
        )
        return result.has_next()

    def get(self, node_id: int) -> Optional[Node]:
        """Get a node by id.

        Args:
            node_id: Node identifier

        Returns:
            Node if found, None otherwise
        """
        result = self.conn.execute(
            f"""
            MATCH (p:{NODE_TABLE} {{id: $id}})
            RETURN p.id, p.name, p.x, p.y, p.year, p.sex
        """,
            {"id": node_id},
        )
        if not result.has_next():
            return None
        row = result.get_next()
        return Node(id=row[0], name=row[1], x=row[2], y=row[3], year=row[4], sex=row[5])

    def max_id_in_range(self, minimum: int, maximum: int) -> Optional[int]:
        """Get the highest node id in [minimum, maximum).

        Args:
            minimum: Inclusive lower bound
            maximum: Exclusive upper bound

        Returns:
            Highest id in the range, or None if the range is empty
        """
        result = self.conn.execute(
            f"""
            MATCH (p:{NODE_TABLE})
            WHERE p.id >= $min AND p.id < $max
            RETURN p.id
            ORDER BY p.id DESC
            LIMIT 1
        """,
            {"min": minimum, "max": maximum},
        )
        if not result.has_next():
            return None
        return result.get_next()[0]

    def has_edges(self, node_id: int) -> bool:
        """Check if any edge references the node as either endpoint.

        Args:
            node_id: Node identifier

        Returns:
            True if at least one edge touches the node
        """
        result = self.conn.execute(
            f"""
            MATCH (p:{NODE_TABLE} {{id: $id}})-[l:{EDGE_TABLE}]-(:{NODE_TABLE})
            RETURN COUNT(l)
        """,
            {"id": node_id},
        )
        return result.get_next()[0] > 0

    def insert(self, node: Node) -> None:
        """Insert a new node.

        Args:
            node: Node to insert

        Raises:
            RuntimeError: If database is in read-only mode
            DuplicateNodeError: If the id is already in use
        """
        self._check_read_only()
        try:
            self.conn.execute(
                f"""
                CREATE (:{NODE_TABLE} {{
                    id: $id, name: $name, x: $x, y: $y, year: $year, sex: $sex
                }})
            """,
                node.to_dict(),
            )
        except RuntimeError as e:
            if "duplicated primary key" in str(e).lower():
                raise DuplicateNodeError(node.id) from e
            raise

    def update_fields(self, node_id: int, fields: Dict[str, Union[str, int]]) -> None:
        """Update several columns of a node in one statement.

        Args:
            node_id: Node identifier
            fields: Column name to new value, keys from EDITABLE_COLUMNS

        Raises:
            RuntimeError: If database is in read-only mode
            ValueError: If a column is not editable or no column is given
        """
        self._check_read_only()
        if not fields:
            raise ValueError("No fields to update")
        unknown = set(fields) - set(EDITABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Columns not editable: {sorted(unknown)}")

        # Column names come from EDITABLE_COLUMNS only, values are bound
        assignments = ", ".join(f"p.{column} = ${column}" for column in fields)
        self.conn.execute(
            f"MATCH (p:{NODE_TABLE} {{id: $id}}) SET {assignments}",
            {"id": node_id, **fields},
        )

    def move(self, node_id: int, x: int, y: int) -> None:
        """Set the coordinates of a node.

        Args:
            node_id: Node identifier
            x: New x-coordinate
            y: New y-coordinate

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            f"MATCH (p:{NODE_TABLE} {{id: $id}}) SET p.x = $x, p.y = $y",
            {"id": node_id, "x": x, "y": y},
        )

    def delete(self, node_id: int) -> None:
        """Delete a node. The node must not have edges.

        Args:
            node_id: Node identifier

        Raises:
            RuntimeError: If database is in read-only mode, or the store
                refuses to delete a node that still has edges
        """
        self._check_read_only()
        self.conn.execute(
            f"MATCH (p:{NODE_TABLE} {{id: $id}}) DELETE p",
            {"id": node_id},
        )
