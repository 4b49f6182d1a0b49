"""
Server - turns decoded requests into responses against one contract

This is the boundary of the core: every call yields an RpcResponse and no
exception escapes call(), call_object() or call_json().
"""

import logging
from typing import Any, List, Optional, Union

from idlrpc_core.config import RuntimeConfig
from idlrpc_core.constants import IDL_METHOD
from idlrpc_core.exceptions import ErrorKind, RpcError
from idlrpc_core.model.contract import Contract
from idlrpc_core.model.message import RpcRequest, RpcResponse
from idlrpc_core.runtime.codec import JsonCodec
from idlrpc_core.runtime.converters import TypeConverterRegistry
from idlrpc_core.runtime.dispatcher import Handler, HandlerRegistry, dispatch
from idlrpc_core.runtime.loader import load_contract
from idlrpc_core.runtime.validator import Validator

logger = logging.getLogger(__name__)


class Server:
    """
    Serves calls for a single Contract.

    Provides:
    - Handler registration (per function or per interface object)
    - Request/response validation around each handler call
    - Single and batch JSON-RPC requests
    - The built-in IDL introspection method
    """

    def __init__(self, contract: Contract, config: Optional[RuntimeConfig] = None,
                 converters: Optional[TypeConverterRegistry] = None, codec: Optional[JsonCodec] = None):
        """
        Args:
            contract: Loaded contract, shared read-only by every call
            config: Runtime options (validation switches)
            converters: Primitive kind registry, frozen here if it is not already
            codec: Wire codec used by call_json
        """
        self.contract = contract
        self.config = config or RuntimeConfig()
        if converters is not None and not converters.frozen:
            converters.freeze()
        self.validator = Validator(contract, converters)
        self.codec = codec or JsonCodec()
        self.handlers = HandlerRegistry()

    @classmethod
    def from_config(cls, config: RuntimeConfig, converters: Optional[TypeConverterRegistry] = None) -> "Server":
        """Load the contract named by config.idl_path. SchemaError aborts startup."""
        if not config.idl_path:
            raise ValueError("RuntimeConfig.idl_path is required")
        return cls(load_contract(config.idl_path), config=config, converters=converters)

    def add_handler(self, interface_name: str, obj: Any) -> None:
        """
        Register an object implementing an interface's functions by name.

        Raises:
            RpcError: METHOD_NOT_FOUND if the interface is not in the contract
        """
        iface = self.contract.interfaces.get(interface_name)
        if iface is None:
            raise ErrorKind.METHOD_NOT_FOUND.exc(f"Interface '{interface_name}' not found")
        for func in iface:
            if not callable(getattr(obj, func.name, None)):
                logger.warning("%s does not implement %s.%s", type(obj).__name__, interface_name, func.name)
        self.handlers.add_handler(interface_name, obj)

    def register(self, interface_name: str, function_name: str, handler: Handler) -> None:
        """Register a callable for one function; the function must exist in the contract."""
        self.contract.get_function(interface_name, function_name)
        self.handlers.register(interface_name, function_name, handler)

    def call(self, request: RpcRequest) -> RpcResponse:
        """Dispatch one decoded request."""
        try:
            if request.method == IDL_METHOD:
                return RpcResponse.success(request.id, list(self.contract.idl))

            interface_name, function_name = request.split_method()
            # Unknown methods fail before any handler lookup
            self.contract.get_function(interface_name, function_name)
            handler = self.handlers.resolve(interface_name, function_name)
            result = dispatch(
                self.contract, interface_name, function_name, request.params, handler,
                validator=self.validator,
                validate_request=self.config.validate_requests,
                validate_response=self.config.validate_responses,
            )
            return RpcResponse.success(request.id, result)

        except RpcError as e:
            logger.debug("Call %s failed: %s %s", request.method, e.kind.name, e.message)
            return RpcResponse.failure(request.id, e)
        except Exception as e:
            logger.exception("Unhandled error in handler for %s", request.method)
            return RpcResponse.failure(request.id, ErrorKind.INTERNAL_ERROR.exc(f"{type(e).__name__}: {e}"))

    def call_object(self, obj: Any) -> Union[RpcResponse, List[RpcResponse]]:
        """Dispatch a decoded JSON value: one request object or a batch list."""
        if isinstance(obj, list):
            if not obj:
                return RpcResponse.failure(None, ErrorKind.INVALID_REQUEST.exc("Empty batch"))
            return [self._call_single(item) for item in obj]
        return self._call_single(obj)

    def _call_single(self, obj: Any) -> RpcResponse:
        request_id = obj.get("id") if isinstance(obj, dict) else None
        try:
            request = self.codec.parse_request(obj)
        except RpcError as e:
            return RpcResponse.failure(request_id, e)
        return self.call(request)

    def call_json(self, data: Union[bytes, str]) -> bytes:
        """Raw request bytes in, raw response bytes out."""
        try:
            obj = self.codec.read_request(data)
        except RpcError as e:
            return self.codec.write_response(RpcResponse.failure(None, e))

        responses = self.call_object(obj)
        try:
            return self.codec.write_response(responses)
        except (TypeError, ValueError, RecursionError):
            if isinstance(responses, list):
                return self.codec.write_response([self._encodable(r) for r in responses])
            return self.codec.write_response(self._encodable(responses))

    def _encodable(self, resp: RpcResponse) -> RpcResponse:
        """resp itself if it encodes, else an INTERNAL_ERROR response with the same id."""
        try:
            self.codec.write_response(resp)
        except (TypeError, ValueError, RecursionError) as e:
            logger.error("Response to request %r is not JSON encodable: %s", resp.id, e)
            return RpcResponse.failure(
                resp.id, ErrorKind.INTERNAL_ERROR.exc(f"Response is not JSON encodable: {type(e).__name__}")
            )
        return resp
