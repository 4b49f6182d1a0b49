"""
Unit tests for dispatch and the handler registry
"""

import pytest

from idlrpc_core.exceptions import ErrorKind, RpcError
from idlrpc_core.model.contract import Contract
from idlrpc_core.runtime.dispatcher import HandlerRegistry, dispatch


class Recorder:
    """Handler that records its calls"""

    def __init__(self, result):
        self.result = result
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)
        return self.result


class TestDispatch:
    """Tests for the dispatch pipeline"""

    def test_add(self, contract):
        """Test a valid call end to end"""
        handler = Recorder(7)
        assert dispatch(contract, "Calculator", "add", [3, 4], handler) == 7
        assert handler.calls == [(3, 4)]

    def test_bad_param_skips_handler(self, contract):
        """Test invalid params fail before the handler runs"""
        handler = Recorder(7)
        with pytest.raises(RpcError) as exc_info:
            dispatch(contract, "Calculator", "add", ["x", 4], handler)
        assert exc_info.value.kind is ErrorKind.INVALID_PARAMS
        assert "param 'a'" in exc_info.value.message
        assert handler.calls == []

    def test_bad_result(self, contract):
        """Test a wrongly typed result is a response error"""
        with pytest.raises(RpcError) as exc_info:
            dispatch(contract, "Calculator", "add", [3, 4], Recorder("7"))
        assert exc_info.value.kind is ErrorKind.INVALID_RESPONSE

    def test_method_not_found(self, contract):
        """Test unknown method never reaches a handler"""
        handler = Recorder(7)
        with pytest.raises(RpcError) as exc_info:
            dispatch(contract, "Calculator", "mul", [3, 4], handler)
        assert exc_info.value.kind is ErrorKind.METHOD_NOT_FOUND
        assert handler.calls == []

    @pytest.mark.parametrize("args", [[], [1], [1, 2, 3]])
    def test_arity(self, contract, args):
        """Test wrong number of params"""
        handler = Recorder(0)
        with pytest.raises(RpcError) as exc_info:
            dispatch(contract, "Calculator", "add", args, handler)
        assert exc_info.value.kind is ErrorKind.INVALID_PARAMS
        assert "expects 2 param(s)" in exc_info.value.message
        assert handler.calls == []

    def test_normalized_args(self, contract):
        """Test the handler sees normalized params"""
        handler = Recorder(6.0)
        dispatch(contract, "Calculator", "sum_grid", [[[1, 2], [3]]], handler)
        assert handler.calls == [([[1.0, 2.0], [3.0]],)]
        assert isinstance(handler.calls[0][0][0][0], float)

    def test_optional_result(self, contract):
        """Test a null result on an optional return type"""
        assert dispatch(contract, "People", "get", ["p1"], Recorder(None)) is None

    def test_handler_rpc_error_passes_through(self, contract):
        """Test application errors are not reclassified"""
        def handler(a, b):
            raise RpcError(ErrorKind.UNKNOWN_ERROR, "overflow", code=1001)

        with pytest.raises(RpcError) as exc_info:
            dispatch(contract, "Calculator", "add", [1, 2], handler)
        assert exc_info.value.code == 1001
        assert exc_info.value.message == "overflow"

    def test_handler_exception_passes_through(self, contract):
        """Test arbitrary handler exceptions propagate unchanged"""
        def handler(a, b):
            raise ZeroDivisionError("boom")

        with pytest.raises(ZeroDivisionError):
            dispatch(contract, "Calculator", "add", [1, 2], handler)

    def test_validation_switches(self, contract):
        """Test request/response validation can be turned off"""
        handler = Recorder("not an int")
        result = dispatch(contract, "Calculator", "add", ["x", "y"], handler,
                          validate_request=False, validate_response=False)
        assert result == "not an int"
        assert handler.calls == [("x", "y")]

    def test_deep_result_is_invalid_response(self):
        """Test a handler result nested past the recursion limit"""
        contract = Contract([
            {"type": "struct", "name": "Tree", "fields": [{"name": "child", "type": "Tree", "optional": True}]},
            {"type": "interface", "name": "Forest", "functions": [
                {"name": "grow", "params": [], "returns": {"type": "Tree"}},
            ]},
        ])
        tree = {}
        for _ in range(5000):
            tree = {"child": tree}

        with pytest.raises(RpcError) as exc_info:
            dispatch(contract, "Forest", "grow", [], Recorder(tree))
        assert exc_info.value.kind is ErrorKind.INVALID_RESPONSE
        assert "nested too deeply" in exc_info.value.message


class TestHandlerRegistry:
    """Tests for HandlerRegistry"""

    def test_function_handler(self):
        """Test per-function registration"""
        registry = HandlerRegistry()
        handler = Recorder(1)
        registry.register("Calculator", "add", handler)
        assert registry.resolve("Calculator", "add") is handler
        assert ("Calculator", "add") in registry

    def test_object_handler(self):
        """Test methods looked up by function name"""
        class Calculator:
            def add(self, a, b):
                return a + b

        registry = HandlerRegistry()
        registry.add_handler("Calculator", Calculator())
        assert registry.resolve("Calculator", "add")(2, 3) == 5
        assert ("Calculator", "sub") not in registry

    def test_function_handler_wins(self):
        """Test per-function registration overrides the object"""
        class Calculator:
            def add(self, a, b):
                return a + b

        registry = HandlerRegistry()
        registry.add_handler("Calculator", Calculator())
        registry.register("Calculator", "add", Recorder(42))
        assert registry.resolve("Calculator", "add")(2, 3) == 42

    def test_missing(self):
        """Test resolving an unregistered function"""
        with pytest.raises(RpcError) as exc_info:
            HandlerRegistry().resolve("Calculator", "add")
        assert exc_info.value.kind is ErrorKind.METHOD_NOT_FOUND

    def test_non_callable(self):
        """Test rejecting non-callable handlers"""
        with pytest.raises(ValueError):
            HandlerRegistry().register("Calculator", "add", "nope")
