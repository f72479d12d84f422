"""
Request dispatcher.

Maps the ``action`` field of a request to its handler, runs the handler inside
one store session and turns every outcome into a single response dict:

    {"status": 0, "action": "create_node", "par": {...}}
    {"status": 7, "action": "delete_node", "msg": "node does not exist"}

Internal failures are logged and reported to the client only as
``"Internal error"``.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from codetiming import Timer

from graf.api.errors import (
    INTERNAL_ERROR_MSG,
    ApiError,
    ContentionError,
    InternalError,
    Status,
)
from graf.api.handlers import OperationHandlers
from graf.config import GrafConfig
from graf.graph.graph import GraphStore, WriteConflictError

logger = logging.getLogger(__name__)

SUPPORTED_OPERATIONS = (
    "create_node",
    "create_edge",
    "edit_node",
    "move_node",
    "delete_node",
    "delete_edge",
    "fetch_graph",
)

# Wire names used by older clients
LEGACY_ALIASES = {
    "add_node": "create_node",
    "add_edge": "create_edge",
    "del_node": "delete_node",
    "del_edge": "delete_edge",
    "fetch_json": "fetch_graph",
}


def resolve_operation(action: str) -> Optional[str]:
    """Return the canonical operation name for an action, or None if unknown."""
    if action in SUPPORTED_OPERATIONS:
        return action
    return LEGACY_ALIASES.get(action)


class Dispatcher:
    """Runs one request per call against a GraphStore."""

    def __init__(self, store: GraphStore, config: GrafConfig):
        """Initialize dispatcher.

        Args:
            store: Graph store that provides one session per request
            config: Configuration with id bands and coordinate/year bounds
        """
        self.store = store
        self.config = config
        self.handlers = OperationHandlers(config)

    def dispatch(self, request: Mapping[str, Any]) -> Dict[str, Any]:
        """Handle one request and return its response.

        Args:
            request: Field name to value, including "action"

        Returns:
            Response dict with status, action and msg/par/data
        """
        action = request.get("action")
        if not action:
            return {"status": int(Status.NO_OPERATION), "msg": "Operation not set"}

        operation = resolve_operation(action) if isinstance(action, str) else None
        if operation is None:
            return {"status": int(Status.UNKNOWN_OPERATION), "msg": "Operation not supported"}

        with Timer(text=f"{action} handled in {{:.4f}}s", logger=logger.debug):
            return self._run(action, operation, request)

    def _attempt(self, handler: Callable, request: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            with self.store.session() as session:
                return handler(request, session)
        except WriteConflictError as e:
            raise ContentionError(str(e)) from e

    def _run(self, action: str, operation: str, request: Mapping[str, Any]) -> Dict[str, Any]:
        handler = getattr(self.handlers, operation)
        attempts = self.config.contention_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                payload = self._attempt(handler, request)
            except ContentionError as e:
                if attempt < attempts:
                    logger.warning(f"{action}: {e.msg}, retrying ({attempt}/{attempts - 1})")
                    continue
                logger.error(f"{action}: {e.msg}, giving up after {attempt} attempts")
                return self._internal_error(action)
            except InternalError as e:
                logger.error(f"{action} internal error: {e.msg}")
                return self._internal_error(action)
            except ApiError as e:
                response = {"status": int(e.status), "action": action, "msg": e.msg}
                if e.par is not None:
                    response["par"] = e.par
                return response
            except RuntimeError:
                # KuzuDB reports query and transaction failures as RuntimeError
                logger.exception(f"{action} store error")
                return self._internal_error(action)

            return {"status": int(Status.SUCCESS), "action": action, **payload}

    @staticmethod
    def _internal_error(action: str) -> Dict[str, Any]:
        return {
            "status": int(Status.INTERNAL_ERROR),
            "action": action,
            "msg": INTERNAL_ERROR_MSG,
        }
