"""
Database schema management for the graph store.
"""

import logging

import kuzu

logger = logging.getLogger(__name__)

NODE_TABLE = "Person"
EDGE_TABLE = "Link"
EDGE_ID_SEQUENCE = "link_id_seq"


class SchemaManager:
    """Manages KuzuDB schema creation."""

    def __init__(self, conn: kuzu.Connection):
        """Initialize schema manager.

        Args:
            conn: KuzuDB connection to use for schema operations
        """
        self.conn = conn

    def schema_exists(self) -> bool:
        """Check whether the node table has already been created.

        Returns:
            True if the Person table can be queried
        """
        try:
            result = self.conn.execute(f"MATCH (p:{NODE_TABLE}) RETURN COUNT(*)")
            result.get_next()
            return True
        except RuntimeError:
            # Person table doesn't exist yet
            return False

    def create_schema(self) -> bool:
        """Create the node table, the edge table and the edge id sequence.

        Returns:
            True if the schema was created, False if it already existed
        """
        if self.schema_exists():
            return False

        logger.info("Creating schema...")

        self.conn.execute(f"""
            CREATE NODE TABLE {NODE_TABLE}(
                id INT64,
                name STRING,
                x INT64,
                y INT64,
                year INT64,
                sex STRING,
                PRIMARY KEY(id)
            )
        """)

        # Stored direction is always from the smaller id to the larger id
        self.conn.execute(f"""
            CREATE REL TABLE {EDGE_TABLE}(
                FROM {NODE_TABLE} TO {NODE_TABLE},
                id INT64,
                votes INT64
            )
        """)

        self.conn.execute(f"CREATE SEQUENCE {EDGE_ID_SEQUENCE} START 1")

        logger.info("Schema created successfully")
        return True
