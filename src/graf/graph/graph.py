"""
Main facade for the graph store.

Owns the KuzuDB database handle and hands out one transactional session per
request. Each session bundles the node, edge and query operation classes
bound to a fresh connection.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import kuzu

from graf.config import DEFAULT_DB_PATH
from graf.graph.edge_operations import EdgeOperations
from graf.graph.node_operations import NodeOperations
from graf.graph.queries import QueryOperations
from graf.graph.schema import SchemaManager

logger = logging.getLogger(__name__)

# KuzuDB allows a single write transaction per database at a time
WRITE_CONFLICT_MARKERS = (
    "only one write transaction",
    "cannot start a new write transaction",
)


class WriteConflictError(Exception):
    """Raised when another session already holds the write transaction."""


def is_write_conflict(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in WRITE_CONFLICT_MARKERS)


class GraphSession:
    """Operations bound to one connection inside one transaction."""

    def __init__(self, conn: kuzu.Connection, read_only: bool):
        self.conn = conn
        self.nodes = NodeOperations(conn, read_only)
        self.edges = EdgeOperations(conn, read_only)
        self.queries = QueryOperations(conn)


class GraphStore:
    """KuzuDB-backed store for person nodes and the links between them.

    The store is the only durable owner of nodes and edges. Nothing is cached
    between sessions; every session re-reads what it needs.
    """

    def __init__(self, db_path: Optional[Path] = None, read_only: bool = False):
        """Open the database and create the schema if needed.

        Args:
            db_path: Path to the KuzuDB database. Defaults to .graf/graph.db
            read_only: If True, opens the database in read-only mode. Schema
                      creation is skipped and write operations raise.
        """
        if db_path is None:
            db_path = Path.cwd() / DEFAULT_DB_PATH

        # Ensure parent directory exists (only in read-write mode)
        if not read_only:
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        self.read_only = read_only
        self.db = kuzu.Database(str(db_path), read_only=read_only)

        if not self.read_only:
            conn = kuzu.Connection(self.db)
            try:
                SchemaManager(conn).create_schema()
            finally:
                conn.close()

    @contextmanager
    def session(self) -> Iterator[GraphSession]:
        """Open a connection and run the caller's block in one transaction.

        Commits when the block completes, rolls back when it raises, and
        always closes the connection.

        Yields:
            GraphSession bound to the new connection

        Raises:
            WriteConflictError: If another session holds the write transaction
        """
        conn = kuzu.Connection(self.db)
        try:
            try:
                if self.read_only:
                    conn.execute("BEGIN TRANSACTION READ ONLY")
                else:
                    conn.execute("BEGIN TRANSACTION")
            except RuntimeError as e:
                if is_write_conflict(e):
                    raise WriteConflictError(str(e)) from e
                raise
            try:
                yield GraphSession(conn, self.read_only)
            except RuntimeError as e:
                self._rollback(conn)
                if is_write_conflict(e):
                    raise WriteConflictError(str(e)) from e
                raise
            except BaseException:
                self._rollback(conn)
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    @staticmethod
    def _rollback(conn: kuzu.Connection) -> None:
        try:
            conn.execute("ROLLBACK")
        except RuntimeError as e:
            # A failed statement may already have rolled the transaction back
            logger.debug(f"Rollback skipped: {e}")

    def close(self) -> None:
        """Release the database handle."""
        self.db.close()

    def __enter__(self) -> "GraphStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
