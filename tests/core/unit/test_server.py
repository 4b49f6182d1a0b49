"""
Unit tests for the Server boundary
"""

import datetime
import json

import pytest

from idlrpc_core.config import RuntimeConfig
from idlrpc_core.constants import IDL_METHOD
from idlrpc_core.exceptions import ErrorKind, RpcError, SchemaError
from idlrpc_core.model.contract import Contract
from idlrpc_core.model.message import RpcRequest
from idlrpc_core.runtime.converters import default_registry
from idlrpc_core.runtime.server import Server


class Calculator:
    """Calculator implementation used by the tests"""

    def __init__(self):
        self.calls = 0

    def add(self, a, b):
        self.calls += 1
        return a + b

    def sum_grid(self, grid):
        return float(sum(sum(row) for row in grid))


@pytest.fixture
def calculator():
    return Calculator()


@pytest.fixture
def server(contract, calculator):
    server = Server(contract)
    server.add_handler("Calculator", calculator)
    return server


class TestServerCall:
    """Tests for Server.call"""

    def test_success(self, server):
        """Test a valid call"""
        resp = server.call(RpcRequest("Calculator.add", [3, 4], id=1))
        assert resp.ok
        assert resp.id == 1
        assert resp.result == 7

    def test_invalid_params(self, server, calculator):
        """Test the handler is not invoked for bad params"""
        resp = server.call(RpcRequest("Calculator.add", ["x", 4], id=2))
        assert resp.error.kind is ErrorKind.INVALID_PARAMS
        assert resp.id == 2
        assert calculator.calls == 0

    def test_invalid_response(self, contract):
        """Test a handler breaking its return type"""
        server = Server(contract)
        server.register("Calculator", "add", lambda a, b: str(a + b))
        resp = server.call(RpcRequest("Calculator.add", [3, 4], id=3))
        assert resp.error.kind is ErrorKind.INVALID_RESPONSE

    def test_unknown_method(self, server):
        """Test a function missing from the contract"""
        resp = server.call(RpcRequest("Calculator.mul", [3, 4], id=4))
        assert resp.error.kind is ErrorKind.METHOD_NOT_FOUND

    def test_malformed_method(self, server):
        """Test a method without an interface part"""
        resp = server.call(RpcRequest("add", [3, 4]))
        assert resp.error.kind is ErrorKind.METHOD_NOT_FOUND

    def test_no_handler(self, server):
        """Test a contract function nobody implements"""
        resp = server.call(RpcRequest("People.ping", []))
        assert resp.error.kind is ErrorKind.METHOD_NOT_FOUND

    def test_handler_rpc_error(self, contract):
        """Test an application error reaches the caller unchanged"""
        def save(person):
            raise RpcError(ErrorKind.UNKNOWN_ERROR, "duplicate person", code=409)

        server = Server(contract)
        server.register("People", "save", save)
        resp = server.call(RpcRequest("People.save", [{"id": "1", "name": "A", "status": "OPEN"}]))
        assert resp.error.code == 409
        assert resp.error.message == "duplicate person"

    def test_handler_crash(self, contract):
        """Test unexpected exceptions become INTERNAL_ERROR"""
        def ping():
            raise KeyError("gone")

        server = Server(contract)
        server.register("People", "ping", ping)
        resp = server.call(RpcRequest("People.ping", [], id=5))
        assert resp.error.kind is ErrorKind.INTERNAL_ERROR
        assert "KeyError" in resp.error.message

    def test_idl_method(self, server, idl):
        """Test the built-in introspection method"""
        resp = server.call(RpcRequest(IDL_METHOD, [], id=6))
        assert resp.result == idl

    def test_validation_disabled(self, contract):
        """Test RuntimeConfig switches"""
        config = RuntimeConfig(validate_requests=False, validate_responses=False)
        server = Server(contract, config=config)
        server.register("Calculator", "add", lambda a, b: a + b)
        resp = server.call(RpcRequest("Calculator.add", ["x", "y"]))
        assert resp.result == "xy"


class TestServerRegistration:
    """Tests for handler registration"""

    def test_register_unknown_function(self, contract):
        """Test registering against a function not in the contract"""
        with pytest.raises(RpcError):
            Server(contract).register("Calculator", "mul", lambda a, b: a * b)

    def test_add_handler_unknown_interface(self, contract):
        """Test registering an object for an unknown interface"""
        with pytest.raises(RpcError):
            Server(contract).add_handler("Nope", object())

    def test_converters_frozen(self, contract):
        """Test the server freezes its converter registry"""
        registry = default_registry()
        Server(contract, converters=registry)
        assert registry.frozen

    def test_from_config(self, idl_file):
        """Test booting from RuntimeConfig"""
        server = Server.from_config(RuntimeConfig(idl_path=str(idl_file)))
        assert "Calculator" in server.contract.interfaces

    def test_from_config_bad_schema(self, tmp_path):
        """Test a broken IDL aborts startup"""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"type": "struct", "name": "A", "extends": "A", "fields": []}]))
        with pytest.raises(SchemaError):
            Server.from_config(RuntimeConfig(idl_path=str(path)))

    def test_from_config_requires_path(self):
        """Test a config without idl_path"""
        with pytest.raises(ValueError):
            Server.from_config(RuntimeConfig())


class TestServerJson:
    """Tests for raw JSON in, JSON out"""

    def test_call_json(self, server):
        """Test a single JSON request"""
        out = json.loads(server.call_json(b'{"jsonrpc": "2.0", "method": "Calculator.add", "params": [1, 2], "id": 1}'))
        assert out == {"jsonrpc": "2.0", "id": 1, "result": 3}

    def test_parse_error(self, server):
        """Test undecodable bytes"""
        out = json.loads(server.call_json(b"{oops"))
        assert out["error"]["code"] == ErrorKind.PARSE_ERROR.code
        assert out["id"] is None

    def test_invalid_request_keeps_id(self, server):
        """Test the id is echoed for invalid requests"""
        out = json.loads(server.call_json('{"id": 7, "params": []}'))
        assert out["error"]["code"] == ErrorKind.INVALID_REQUEST.code
        assert out["id"] == 7

    def test_batch(self, server):
        """Test a batch with mixed outcomes"""
        batch = [
            {"method": "Calculator.add", "params": [1, 2], "id": 1},
            {"method": "Calculator.add", "params": [1, "2"], "id": 2},
            {"method": "Nope.nope", "params": [], "id": 3},
            5,
        ]
        out = json.loads(server.call_json(json.dumps(batch)))
        assert [r.get("result") for r in out[:1]] == [3]
        assert out[1]["error"]["code"] == ErrorKind.INVALID_PARAMS.code
        assert out[2]["error"]["code"] == ErrorKind.METHOD_NOT_FOUND.code
        assert out[3]["error"]["code"] == ErrorKind.INVALID_REQUEST.code

    def test_empty_batch(self, server):
        """Test an empty batch"""
        out = json.loads(server.call_json("[]"))
        assert out["error"]["code"] == ErrorKind.INVALID_REQUEST.code

    def test_unencodable_result(self, contract):
        """Test a result that passes validation but cannot be written as JSON"""
        server = Server(contract)
        server.register(
            "People", "get",
            lambda id: {"id": id, "name": "A", "status": "OPEN", "seen": datetime.date(2020, 1, 1)}
        )
        out = json.loads(server.call_json(b'{"method": "People.get", "params": ["1"], "id": 11}'))
        assert out["id"] == 11
        assert out["error"]["code"] == ErrorKind.INTERNAL_ERROR.code
        assert "not JSON encodable" in out["error"]["message"]

    def test_unencodable_result_in_batch(self, server):
        """Test one bad response does not spoil the rest of a batch"""
        server.register("People", "ping", lambda: {1, 2})
        batch = [
            {"method": "Calculator.add", "params": [1, 2], "id": 1},
            {"method": "People.ping", "params": [], "id": 2},
        ]
        server.config.validate_responses = False
        out = json.loads(server.call_json(json.dumps(batch)))
        assert out[0] == {"jsonrpc": "2.0", "id": 1, "result": 3}
        assert out[1]["id"] == 2
        assert out[1]["error"]["code"] == ErrorKind.INTERNAL_ERROR.code


class TestDeepValues:
    """Tests for values nested beyond the interpreter's recursion limit"""

    @pytest.fixture
    def linked(self):
        contract = Contract([
            {
                "type": "struct", "name": "Node",
                "fields": [
                    {"name": "value", "type": "int"},
                    {"name": "next", "type": "Node", "optional": True},
                ],
            },
            {
                "type": "interface", "name": "List",
                "functions": [{
                    "name": "length",
                    "params": [{"name": "head", "type": "Node"}],
                    "returns": {"type": "int"},
                }],
            },
        ])
        server = Server(contract)
        server.register("List", "length", lambda head: 0)
        return server

    @staticmethod
    def _chain(depth):
        node = {"value": 0}
        for i in range(depth):
            node = {"value": i, "next": node}
        return node

    def test_shallow_chain(self, linked):
        """Test a normal linked value"""
        resp = linked.call(RpcRequest("List.length", [self._chain(10)], id=1))
        assert resp.result == 0

    def test_deep_chain_is_invalid_params(self, linked):
        """Test a too-deep caller value is blamed on the caller"""
        resp = linked.call_object({"method": "List.length", "params": [self._chain(5000)], "id": 2})
        assert resp.id == 2
        assert resp.error.kind is ErrorKind.INVALID_PARAMS
        assert "nested too deeply" in resp.error.message
