"""
Tests for the individual operations, driven through the dispatcher.
"""

import pytest

from graf.api.errors import Status


def call(dispatcher, action, **fields):
    return dispatcher.dispatch({"action": action, **fields})


NODE_FIELDS = {"name": "Ada", "x": "10", "y": "20", "year": "1990", "sex": "F"}


class TestCreateNode:
    """Test node creation."""

    def test_first_node_gets_band_minimum(self, dispatcher):
        response = call(dispatcher, "create_node", **NODE_FIELDS)

        assert response == {
            "status": 0,
            "action": "create_node",
            "par": {"id": 100, "name": "Ada", "x": 10, "y": 20, "year": 1990, "sex": "F"},
        }

    def test_identical_nodes_get_distinct_ids(self, dispatcher):
        first = call(dispatcher, "create_node", **NODE_FIELDS)
        second = call(dispatcher, "create_node", **NODE_FIELDS)

        assert first["par"]["id"] == 100
        assert second["status"] == 0
        assert second["par"]["id"] == 101

    def test_name_is_sanitized(self, dispatcher):
        fields = dict(NODE_FIELDS, name="  <i>Ada</i>  ")
        response = call(dispatcher, "create_node", **fields)

        assert response["par"]["name"] == "&lt;i&gt;Ada&lt;/i&gt;"

    @pytest.mark.parametrize("missing", ["name", "x", "y", "year", "sex"])
    def test_missing_field(self, dispatcher, missing):
        fields = {k: v for k, v in NODE_FIELDS.items() if k != missing}
        response = call(dispatcher, "create_node", **fields)

        assert response["status"] == Status.MISSING_ARGUMENT
        assert response["action"] == "create_node"
        assert response["msg"].startswith(f"{missing} is not set")

    def test_first_missing_field_is_reported(self, dispatcher):
        response = call(dispatcher, "create_node", name="Ada", sex="F")

        assert response["msg"].startswith("x is not set")

    @pytest.mark.parametrize(
        "field,value,msg",
        [
            ("x", "abc", "x-coordinate not an integer or out of range"),
            ("x", "1001", "x-coordinate not an integer or out of range"),
            ("y", "-1001", "y-coordinate not an integer or out of range"),
            ("year", "999", "year not an integer or out of range"),
            ("year", "19.5", "year not an integer or out of range"),
            ("sex", "X", "Invalid sex"),
        ],
    )
    def test_invalid_field(self, dispatcher, field, value, msg):
        fields = dict(NODE_FIELDS, **{field: value})
        response = call(dispatcher, "create_node", **fields)

        assert response["status"] == Status.INVALID_ARGUMENT
        assert response["msg"] == msg

    def test_first_invalid_field_is_reported(self, dispatcher):
        fields = dict(NODE_FIELDS, y="bad", sex="bad")
        response = call(dispatcher, "create_node", **fields)

        assert response["msg"] == "y-coordinate not an integer or out of range"

    def test_ids_stay_within_band(self, dispatcher):
        ids = {call(dispatcher, "create_node", **NODE_FIELDS)["par"]["id"] for _ in range(5)}

        assert ids == {100, 101, 102, 103, 104}

    def test_exhausted_band_is_internal_error(self, dispatcher, store):
        from graf.graph.models import Node

        with store.session() as session:
            session.nodes.insert(Node(id=199, name="last", x=0, y=0, year=2000, sex="U"))

        response = call(dispatcher, "create_node", **NODE_FIELDS)

        assert response == {"status": 5, "action": "create_node", "msg": "Internal error"}


class TestCreateEdge:
    """Test edge creation."""

    def test_creates_edge_in_canonical_order(self, dispatcher, make_node):
        a, b = make_node(), make_node()
        response = call(dispatcher, "create_edge", a=str(b), b=str(a))

        assert response["status"] == 0
        assert response["par"]["a"] == a
        assert response["par"]["b"] == b
        assert isinstance(response["par"]["id"], int)

    def test_swapped_pair_is_duplicate(self, dispatcher, make_node):
        a, b = make_node(), make_node()
        assert call(dispatcher, "create_edge", a=str(a), b=str(b))["status"] == 0

        response = call(dispatcher, "create_edge", a=str(b), b=str(a))

        assert response["status"] == Status.ALREADY_EXISTS
        assert response["msg"] == "Edge already exists"

    def test_repeat_request_returns_already_exists(self, dispatcher, make_node):
        a, b = make_node(), make_node()
        call(dispatcher, "create_edge", a=str(a), b=str(b))

        response = call(dispatcher, "create_edge", a=str(a), b=str(b))

        assert response["status"] == Status.ALREADY_EXISTS

    def test_self_loop_is_invalid(self, dispatcher, make_node):
        a = make_node()
        response = call(dispatcher, "create_edge", a=str(a), b=str(a))

        assert response["status"] == Status.INVALID_REQUEST
        assert response["msg"] == "The two nodes must be different"

    def test_missing_endpoint_reports_pair(self, dispatcher, make_node):
        a = make_node()
        response = call(dispatcher, "create_edge", a=str(a), b="150")

        assert response["status"] == Status.NOT_FOUND
        assert response["msg"] == "b node does not exist"
        assert response["par"] == {"a": a, "b": 150}

    def test_missing_first_endpoint(self, dispatcher, make_node):
        b = make_node()
        response = call(dispatcher, "create_edge", a="150", b=str(b))

        assert response["msg"] == "a node does not exist"

    def test_missing_argument(self, dispatcher):
        response = call(dispatcher, "create_edge", a="100")

        assert response["status"] == Status.MISSING_ARGUMENT
        assert response["msg"].startswith("b is not set")

    def test_invalid_endpoint(self, dispatcher):
        response = call(dispatcher, "create_edge", a="-1", b="100")

        assert response["status"] == Status.INVALID_ARGUMENT
        assert response["msg"] == "Non-valid node a number"

    def test_edge_ids_are_distinct(self, dispatcher, make_node):
        a, b, c = make_node(), make_node(), make_node()
        first = call(dispatcher, "create_edge", a=str(a), b=str(b))
        second = call(dispatcher, "create_edge", a=str(b), b=str(c))

        assert first["par"]["id"] != second["par"]["id"]


class TestEditNode:
    """Test node editing."""

    def test_edits_only_given_fields(self, dispatcher, make_node):
        node_id = make_node()
        response = call(dispatcher, "edit_node", id=str(node_id), year="1991")

        assert response == {
            "status": 0,
            "action": "edit_node",
            "par": {"id": node_id, "year": 1991},
        }
        node = call(dispatcher, "fetch_graph")["data"]["nodes"][node_id]
        assert node["year"] == 1991
        assert node["name"] == "Ada"
        assert node["sex"] == "F"

    def test_edits_all_fields(self, dispatcher, make_node):
        node_id = make_node()
        response = call(
            dispatcher, "edit_node", id=str(node_id), name=" Grace ", year="1906", sex="U"
        )

        assert response["par"] == {"id": node_id, "year": 1906, "sex": "U", "name": "Grace"}

    def test_no_fields_is_missing_argument(self, dispatcher, make_node):
        node_id = make_node()
        response = call(dispatcher, "edit_node", id=str(node_id))

        assert response["status"] == Status.MISSING_ARGUMENT
        assert response["msg"] == "Tried to edit a node but specified no fields to edit"

    def test_missing_id(self, dispatcher):
        response = call(dispatcher, "edit_node", year="1991")

        assert response["status"] == Status.MISSING_ARGUMENT
        assert response["msg"].startswith("id is not set")

    def test_unknown_node(self, dispatcher):
        response = call(dispatcher, "edit_node", id="150", year="1991")

        assert response["status"] == Status.NOT_FOUND
        assert response["msg"] == "node does not exist"

    def test_invalid_field_leaves_node_unchanged(self, dispatcher, make_node):
        node_id = make_node()
        response = call(dispatcher, "edit_node", id=str(node_id), name="Bob", sex="Q")

        assert response["status"] == Status.INVALID_ARGUMENT
        assert response["msg"] == "Invalid sex"
        node = call(dispatcher, "fetch_graph")["data"]["nodes"][node_id]
        assert node["name"] == "Ada"


class TestMoveNode:
    """Test node moves."""

    def test_moves_node_and_echoes_coordinates(self, dispatcher, make_node):
        node_id = make_node()
        response = call(dispatcher, "move_node", id=str(node_id), x="-5", y="+7")

        assert response == {
            "status": 0,
            "action": "move_node",
            "par": {"id": node_id, "x": -5, "y": 7},
        }
        node = call(dispatcher, "fetch_graph")["data"]["nodes"][node_id]
        assert (node["x"], node["y"]) == (-5, 7)

    def test_unknown_node(self, dispatcher):
        response = call(dispatcher, "move_node", id="150", x="1", y="1")

        assert response["status"] == Status.NOT_FOUND

    def test_out_of_range(self, dispatcher, make_node):
        node_id = make_node()
        response = call(dispatcher, "move_node", id=str(node_id), x="1", y="5000")

        assert response["status"] == Status.INVALID_ARGUMENT
        assert response["msg"] == "y-coordinate not an integer or out of range"

    def test_missing_coordinate(self, dispatcher):
        response = call(dispatcher, "move_node", id="100", y="1")

        assert response["msg"].startswith("x is not set")


class TestDeleteNode:
    """Test node deletion and its edge rule."""

    def test_deletes_isolated_node(self, dispatcher, make_node):
        node_id = make_node()
        response = call(dispatcher, "delete_node", id=str(node_id))

        assert response == {"status": 0, "action": "delete_node", "par": {"id": node_id}}
        assert call(dispatcher, "fetch_graph")["data"]["nodes"] == {}

    @pytest.mark.parametrize("endpoint", ["a", "b"])
    def test_refuses_node_with_edges(self, dispatcher, make_node, endpoint):
        a, b = make_node(), make_node()
        call(dispatcher, "create_edge", a=str(a), b=str(b))
        target = a if endpoint == "a" else b

        response = call(dispatcher, "delete_node", id=str(target))

        assert response["status"] == Status.FORBIDDEN
        assert response["msg"] == "Trying to delete a node with edges"
        assert target in call(dispatcher, "fetch_graph")["data"]["nodes"]

    def test_unknown_node(self, dispatcher):
        response = call(dispatcher, "delete_node", id="150")

        assert response["status"] == Status.NOT_FOUND

    def test_repeat_delete_is_not_found(self, dispatcher, make_node):
        node_id = make_node()
        call(dispatcher, "delete_node", id=str(node_id))

        response = call(dispatcher, "delete_node", id=str(node_id))

        assert response["status"] == Status.NOT_FOUND

    def test_invalid_id(self, dispatcher):
        response = call(dispatcher, "delete_node", id="abc")

        assert response["status"] == Status.INVALID_ARGUMENT
        assert response["msg"] == "Non-valid node number"


class TestDeleteEdge:
    """Test edge deletion by id and by endpoints."""

    def test_delete_by_id(self, dispatcher, make_node):
        a, b = make_node(), make_node()
        edge_id = call(dispatcher, "create_edge", a=str(a), b=str(b))["par"]["id"]

        response = call(dispatcher, "delete_edge", id=str(edge_id))

        assert response == {"status": 0, "action": "delete_edge", "par": {"id": edge_id}}
        assert call(dispatcher, "fetch_graph")["data"]["edges"] == {}

    def test_delete_by_swapped_pair(self, dispatcher, make_node):
        a, b = make_node(), make_node()
        edge_id = call(dispatcher, "create_edge", a=str(a), b=str(b))["par"]["id"]

        response = call(dispatcher, "delete_edge", a=str(b), b=str(a))

        assert response["status"] == 0
        assert response["par"] == {"a": a, "b": b, "id": edge_id}

    def test_unknown_id(self, dispatcher):
        response = call(dispatcher, "delete_edge", id="999")

        assert response["status"] == Status.NOT_FOUND
        assert response["msg"] == "Edge does not exist"

    def test_unknown_pair(self, dispatcher, make_node):
        a, b = make_node(), make_node()
        response = call(dispatcher, "delete_edge", a=str(a), b=str(b))

        assert response["status"] == Status.NOT_FOUND

    def test_identical_endpoints(self, dispatcher):
        response = call(dispatcher, "delete_edge", a="100", b="100")

        assert response["status"] == Status.INVALID_REQUEST

    def test_no_identification(self, dispatcher):
        response = call(dispatcher, "delete_edge", a="100")

        assert response["status"] == Status.MISSING_ARGUMENT
        assert response["msg"].startswith("Missing both id and a and b")

    def test_invalid_id(self, dispatcher):
        response = call(dispatcher, "delete_edge", id="x")

        assert response["status"] == Status.INVALID_ARGUMENT
        assert response["msg"] == "Non-valid edge number"


class TestFetchGraph:
    """Test the full graph read."""

    def test_empty_graph(self, dispatcher):
        response = call(dispatcher, "fetch_graph")

        assert response == {
            "status": 0,
            "action": "fetch_graph",
            "data": {"nodes": {}, "edges": {}},
        }

    def test_keys_and_records(self, dispatcher, make_node):
        a = make_node(name="Ada")
        b = make_node(name="Bob", sex="M")
        edge_id = call(dispatcher, "create_edge", a=str(b), b=str(a))["par"]["id"]

        data = call(dispatcher, "fetch_graph")["data"]

        assert data["nodes"][b] == {
            "id": b, "name": "Bob", "x": 10, "y": 20, "year": 1990, "sex": "M"
        }
        assert data["edges"] == {f"{a}_{b}": {"id": edge_id, "a": a, "b": b, "votes": 1}}

    def test_ignores_extra_fields(self, dispatcher):
        response = call(dispatcher, "fetch_graph", id="abc", x="nope")

        assert response["status"] == 0

    def test_reflects_latest_state(self, dispatcher, make_node):
        a, b, c = make_node(), make_node(), make_node()
        call(dispatcher, "create_edge", a=str(a), b=str(b))
        call(dispatcher, "create_edge", a=str(b), b=str(c))
        call(dispatcher, "edit_node", id=str(b), name="Renamed")
        call(dispatcher, "move_node", id=str(c), x="1", y="2")
        call(dispatcher, "delete_edge", a=str(a), b=str(b))
        call(dispatcher, "delete_node", id=str(a))

        data = call(dispatcher, "fetch_graph")["data"]

        assert set(data["nodes"]) == {b, c}
        assert data["nodes"][b]["name"] == "Renamed"
        assert (data["nodes"][c]["x"], data["nodes"][c]["y"]) == (1, 2)
        assert set(data["edges"]) == {f"{b}_{c}"}
