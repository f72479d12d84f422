"""
Read-only queries over the whole graph.
"""

from typing import Dict, List

import kuzu
import pandas as pd

from graf.graph.models import Edge, Node
from graf.graph.schema import EDGE_TABLE, NODE_TABLE


class QueryOperations:
    """Handles query operations for the graph store."""

    def __init__(self, conn: kuzu.Connection):
        """Initialize query operations.

        Args:
            conn: KuzuDB connection to use for operations
        """
        self.conn = conn

    def get_all_nodes(self) -> List[Node]:
        """Get every node ordered by id.

        Returns:
            List of Node objects
        """
        result = self.conn.execute(f"""
            MATCH (p:{NODE_TABLE})
            RETURN p.id, p.name, p.x, p.y, p.year, p.sex
            ORDER BY p.id
        """)

        nodes = []
        while result.has_next():
            row = result.get_next()
            nodes.append(
                Node(id=row[0], name=row[1], x=row[2], y=row[3], year=row[4], sex=row[5])
            )
        return nodes

    def get_all_edges(self) -> List[Edge]:
        """Get every edge ordered by id.

        Returns:
            List of Edge objects with canonical endpoints
        """
        result = self.conn.execute(f"""
            MATCH (a:{NODE_TABLE})-[l:{EDGE_TABLE}]->(b:{NODE_TABLE})
            RETURN l.id, a.id, b.id, l.votes
            ORDER BY l.id
        """)

        edges = []
        while result.has_next():
            row = result.get_next()
            edges.append(Edge(id=row[0], a=row[1], b=row[2], votes=row[3]))
        return edges

    def get_statistics(self) -> Dict[str, int]:
        """Get statistics about the graph.

        Returns:
            Dictionary with node, edge, vote and isolated node counts
        """
        stats = {}

        result = self.conn.execute(f"MATCH (p:{NODE_TABLE}) RETURN COUNT(*)")
        stats["total_nodes"] = result.get_next()[0]

        result = self.conn.execute(f"""
            MATCH (:{NODE_TABLE})-[l:{EDGE_TABLE}]->(:{NODE_TABLE})
            RETURN COUNT(l), SUM(l.votes)
        """)
        row = result.get_next()
        stats["total_edges"] = row[0]
        stats["total_votes"] = row[1] or 0

        result = self.conn.execute(f"""
            MATCH (p:{NODE_TABLE})-[:{EDGE_TABLE}]-(:{NODE_TABLE})
            RETURN COUNT(DISTINCT p.id)
        """)
        stats["isolated_nodes"] = stats["total_nodes"] - result.get_next()[0]

        return stats

    def nodes_as_df(self) -> pd.DataFrame:
        """Get every node as a DataFrame, one row per node."""
        result = self.conn.execute(f"""
            MATCH (p:{NODE_TABLE})
            RETURN p.id AS id, p.name AS name, p.x AS x, p.y AS y,
                   p.year AS year, p.sex AS sex
            ORDER BY id
        """)
        return result.get_as_df()

    def edges_as_df(self) -> pd.DataFrame:
        """Get every edge as a DataFrame, one row per edge."""
        result = self.conn.execute(f"""
            MATCH (a:{NODE_TABLE})-[l:{EDGE_TABLE}]->(b:{NODE_TABLE})
            RETURN l.id AS id, a.id AS a, b.id AS b, l.votes AS votes
            ORDER BY id
        """)
        return result.get_as_df()
