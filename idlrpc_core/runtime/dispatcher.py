"""
Dispatcher - resolve, validate, invoke, validate
"""

import logging
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from idlrpc_core.exceptions import ErrorKind, RpcError
from idlrpc_core.model.contract import Contract
from idlrpc_core.model.types import Function
from idlrpc_core.runtime.validator import Direction, Validator

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


def validate_params(validator: Validator, func: Function, interface_name: str, args: Sequence[Any]) -> list:
    """
    Arity and type check of call arguments.

    Returns:
        Normalized arguments in declaration order

    Raises:
        RpcError: INVALID_PARAMS on arity mismatch or the first bad argument
    """
    if len(args) != func.arity:
        raise ErrorKind.INVALID_PARAMS.exc(
            f"Function '{interface_name}.{func.name}' expects {func.arity} param(s), got {len(args)}"
        )
    return [
        validator.validate(param.type_spec, arg, Direction.REQUEST, path=f"param '{param.name}'")
        for param, arg in zip(func.params, args)
    ]


def validate_result(validator: Validator, func: Function, interface_name: str, result: Any) -> Any:
    """Check a handler's result against the declared return type (INVALID_RESPONSE)."""
    return validator.validate(
        func.returns, result, Direction.RESPONSE, path=f"{interface_name}.{func.name} result"
    )


def dispatch(contract: Contract, interface_name: str, function_name: str, args: Sequence[Any],
             handler: Handler, validator: Optional[Validator] = None,
             validate_request: bool = True, validate_response: bool = True) -> Any:
    """
    Run one call against a contract.

    Steps: resolve the function, check arity and argument types, invoke
    the handler with the normalized arguments, check the result.

    Args:
        contract: Loaded contract
        interface_name: Target interface
        function_name: Target function
        args: Decoded positional arguments
        handler: Callable invoked as handler(*normalized_args)
        validator: Validator to reuse (built from the contract if None)
        validate_request: Check arguments before invoking the handler
        validate_response: Check the handler's result

    Returns:
        Normalized result

    Raises:
        RpcError: METHOD_NOT_FOUND, INVALID_PARAMS or INVALID_RESPONSE.
            Anything the handler raises propagates unchanged.
    """
    func = contract.get_function(interface_name, function_name)
    if validator is None:
        validator = Validator(contract)

    if validate_request:
        normalized_args = validate_params(validator, func, interface_name, args)
    else:
        normalized_args = list(args)

    result = handler(*normalized_args)

    if validate_response:
        try:
            return validate_result(validator, func, interface_name, result)
        except RpcError:
            logger.warning("Handler for %s.%s violated its return type", interface_name, function_name)
            raise
    return result


class HandlerRegistry:
    """
    Maps (interface, function) to handler callables.

    Handlers are registered one function at a time, or as an object whose
    methods are named after the interface's functions.
    """

    def __init__(self):
        self._functions: Dict[Tuple[str, str], Handler] = {}
        self._objects: Dict[str, Any] = {}

    def register(self, interface_name: str, function_name: str, handler: Handler) -> None:
        if not callable(handler):
            raise ValueError(f"Handler must be callable, got {type(handler)}")
        self._functions[(interface_name, function_name)] = handler

    def add_handler(self, interface_name: str, obj: Any) -> None:
        """Register an object implementing every function of an interface."""
        self._objects[interface_name] = obj

    def resolve(self, interface_name: str, function_name: str) -> Handler:
        """
        Raises:
            RpcError: METHOD_NOT_FOUND if nothing implements the function
        """
        handler = self._functions.get((interface_name, function_name))
        if handler is not None:
            return handler

        obj = self._objects.get(interface_name)
        if obj is not None:
            method = getattr(obj, function_name, None)
            if callable(method):
                return method

        raise ErrorKind.METHOD_NOT_FOUND.exc(
            f"No handler registered for '{interface_name}.{function_name}'"
        )

    def __contains__(self, key: Tuple[str, str]) -> bool:
        try:
            self.resolve(*key)
            return True
        except RpcError:
            return False
