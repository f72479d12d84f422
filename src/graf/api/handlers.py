"""
Operation handlers.

Each handler checks its fields in a fixed order (presence first, then
type/range), checks preconditions against the store, performs the change and
re-reads the affected rows to confirm it. The first failing check raises an
ApiError naming the field or object at fault.
"""

from typing import Any, Callable, Dict, Iterable, Mapping

from graf.api.allocator import allocate_node_id
from graf.api.errors import (
    AlreadyExistsError,
    ContentionError,
    ForbiddenOperationError,
    InternalError,
    InvalidArgumentError,
    InvalidRequestError,
    MissingArgumentError,
    NotFoundError,
)
from graf.api.validation import (
    parse_int,
    sanitize_name,
    validate_edge_id,
    validate_node_id,
    validate_sex,
    validate_x,
    validate_y,
    validate_year,
)
from graf.config import GrafConfig
from graf.graph.graph import GraphSession
from graf.graph.models import Node, canonical_pair
from graf.graph.node_operations import DuplicateNodeError


Request = Mapping[str, Any]

X_MSG = "x-coordinate not an integer or out of range"
Y_MSG = "y-coordinate not an integer or out of range"
YEAR_MSG = "year not an integer or out of range"
SEX_MSG = "Invalid sex"
NODE_MSG = "Non-valid node number"
EDGE_MSG = "Non-valid edge number"

EDITABLE_FIELDS = ("name", "year", "sex")


def is_set(request: Request, field: str) -> bool:
    """A field is set when the request carries it with a non-null value."""
    return request.get(field) is not None


def require(request: Request, fields: Iterable[str]) -> None:
    """Raise MissingArgumentError naming the first field that is not set."""
    for field in fields:
        if not is_set(request, field):
            raise MissingArgumentError(
                f"{field} is not set in the request and is a mandatory parameter"
            )


def checked_int(request: Request, field: str, check: Callable[[Any], bool], msg: str) -> int:
    """Return the field as int, or raise InvalidArgumentError with msg."""
    value = request[field]
    if not check(value):
        raise InvalidArgumentError(msg)
    return parse_int(value)


class OperationHandlers:
    """One method per supported operation.

    Every handler takes the request fields and the session of the current
    request, and returns the response fragment for a successful call
    (``{"par": ...}`` or ``{"data": ...}``).
    """

    def __init__(self, config: GrafConfig):
        self.config = config

    def _x(self, value: Any) -> bool:
        return validate_x(value, self.config)

    def _y(self, value: Any) -> bool:
        return validate_y(value, self.config)

    def _year(self, value: Any) -> bool:
        return validate_year(value, self.config)

    def create_node(self, request: Request, session: GraphSession) -> Dict[str, Any]:
        """Allocate an id in the configured band and insert a node."""
        require(request, ("name", "x", "y", "year", "sex"))

        name = sanitize_name(request["name"])
        x = checked_int(request, "x", self._x, X_MSG)
        y = checked_int(request, "y", self._y, Y_MSG)
        year = checked_int(request, "year", self._year, YEAR_MSG)
        sex = request["sex"]
        if not validate_sex(sex):
            raise InvalidArgumentError(SEX_MSG)

        node_id = allocate_node_id(
            self.config.min_node_id, self.config.max_node_id, session.nodes
        )

        node = Node(id=node_id, name=name, x=x, y=y, year=year, sex=sex)
        try:
            session.nodes.insert(node)
        except DuplicateNodeError as e:
            raise ContentionError(str(e)) from e

        if session.nodes.get(node_id) is None:
            raise InternalError(f"Node {node_id} does not appear after being inserted")

        return {"par": node.to_dict()}

    def create_edge(self, request: Request, session: GraphSession) -> Dict[str, Any]:
        """Link two existing nodes with a single-vote edge."""
        require(request, ("a", "b"))

        a = checked_int(request, "a", validate_node_id, "Non-valid node a number")
        b = checked_int(request, "b", validate_node_id, "Non-valid node b number")

        if a == b:
            raise InvalidRequestError("The two nodes must be different")

        if not session.nodes.exists(a):
            raise NotFoundError("a node does not exist", par={"a": a, "b": b})
        if not session.nodes.exists(b):
            raise NotFoundError("b node does not exist", par={"a": a, "b": b})

        a, b = canonical_pair(a, b)
        if session.edges.find_by_pair(a, b) is not None:
            raise AlreadyExistsError("Edge already exists")

        session.edges.insert(a, b)

        edge = session.edges.find_by_pair(a, b)
        if edge is None:
            raise InternalError(f"Edge {a}_{b} does not appear after being inserted")

        return {"par": {"id": edge.id, "a": a, "b": b}}

    def edit_node(self, request: Request, session: GraphSession) -> Dict[str, Any]:
        """Change any subset of name, year and sex in one update."""
        require(request, ("id",))
        if not any(is_set(request, field) for field in EDITABLE_FIELDS):
            raise MissingArgumentError(
                "Tried to edit a node but specified no fields to edit"
            )

        node_id = checked_int(request, "id", validate_node_id, NODE_MSG)

        fields: Dict[str, Any] = {}
        if is_set(request, "year"):
            fields["year"] = checked_int(request, "year", self._year, YEAR_MSG)
        if is_set(request, "sex"):
            if not validate_sex(request["sex"]):
                raise InvalidArgumentError(SEX_MSG)
            fields["sex"] = request["sex"]
        if is_set(request, "name"):
            fields["name"] = sanitize_name(request["name"])

        if not session.nodes.exists(node_id):
            raise NotFoundError("node does not exist")

        session.nodes.update_fields(node_id, fields)

        node = session.nodes.get(node_id)
        if node is None or any(getattr(node, k) != v for k, v in fields.items()):
            raise InternalError(f"Node {node_id} does not hold the edited values")

        return {"par": {"id": node_id, **fields}}

    def move_node(self, request: Request, session: GraphSession) -> Dict[str, Any]:
        """Set new coordinates for a node."""
        require(request, ("id", "x", "y"))

        node_id = checked_int(request, "id", validate_node_id, NODE_MSG)
        x = checked_int(request, "x", self._x, X_MSG)
        y = checked_int(request, "y", self._y, Y_MSG)

        if not session.nodes.exists(node_id):
            raise NotFoundError("node does not exist")

        session.nodes.move(node_id, x, y)

        node = session.nodes.get(node_id)
        if node is None or (node.x, node.y) != (x, y):
            raise InternalError(f"Node {node_id} was not moved to ({x}, {y})")

        return {"par": {"id": node_id, "x": x, "y": y}}

    def delete_node(self, request: Request, session: GraphSession) -> Dict[str, Any]:
        """Delete a node that has no edges."""
        require(request, ("id",))

        node_id = checked_int(request, "id", validate_node_id, NODE_MSG)

        if not session.nodes.exists(node_id):
            raise NotFoundError("node does not exist")
        if session.nodes.has_edges(node_id):
            raise ForbiddenOperationError("Trying to delete a node with edges")

        session.nodes.delete(node_id)

        if session.nodes.exists(node_id):
            raise InternalError(f"Node {node_id} deleted but still present in database")

        return {"par": {"id": node_id}}

    def delete_edge(self, request: Request, session: GraphSession) -> Dict[str, Any]:
        """Delete an edge given either its id or its two endpoints."""
        if is_set(request, "id"):
            edge_id = checked_int(request, "id", validate_edge_id, EDGE_MSG)
            if session.edges.get(edge_id) is None:
                raise NotFoundError("Edge does not exist")
            par: Dict[str, Any] = {"id": edge_id}
        else:
            try:
                require(request, ("a", "b"))
            except MissingArgumentError:
                raise MissingArgumentError(
                    "Missing both id and a and b, one way to identify the edge "
                    "is needed to delete it"
                ) from None

            a = checked_int(request, "a", validate_node_id, "Non-valid node a number")
            b = checked_int(request, "b", validate_node_id, "Non-valid node b number")
            if a == b:
                raise InvalidRequestError("The two nodes must be different")

            a, b = canonical_pair(a, b)
            edge = session.edges.find_by_pair(a, b)
            if edge is None:
                raise NotFoundError("Edge does not exist")
            edge_id = edge.id
            par = {"a": a, "b": b, "id": edge_id}

        session.edges.delete(edge_id)

        if session.edges.get(edge_id) is not None:
            raise InternalError(f"Edge {edge_id} deleted but still present in database")

        return {"par": par}

    def fetch_graph(self, request: Request, session: GraphSession) -> Dict[str, Any]:
        """Return every node keyed by id and every edge keyed by 'a_b'."""
        nodes = {node.id: node.to_dict() for node in session.queries.get_all_nodes()}
        edges = {edge.key: edge.to_dict() for edge in session.queries.get_all_edges()}
        return {"data": {"nodes": nodes, "edges": edges}}
