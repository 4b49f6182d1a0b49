"""
Request and response envelopes exchanged at the system boundary
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from idlrpc_core.exceptions import ErrorKind, RpcError


@dataclass
class RpcRequest:
    """Decoded call: method name, ordered arguments, correlation id."""
    method: str
    params: List[Any] = field(default_factory=list)
    id: Any = None

    def split_method(self) -> Tuple[str, str]:
        """
        Split 'interface.function' into its two names.

        Raises:
            RpcError: METHOD_NOT_FOUND if the name has no interface part
        """
        interface_name, sep, function_name = self.method.partition(".")
        if not sep or not interface_name or not function_name:
            raise ErrorKind.METHOD_NOT_FOUND.exc(
                f"Method '{self.method}' is not of the form interface.function"
            )
        return interface_name, function_name


@dataclass
class RpcResponse:
    """Correlation id plus either a result or an error."""
    id: Any = None
    result: Any = None
    error: Optional[RpcError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, request_id: Any, result: Any) -> "RpcResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: Any, error: RpcError) -> "RpcResponse":
        return cls(id=request_id, error=error)
