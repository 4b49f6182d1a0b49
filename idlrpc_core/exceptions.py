"""
IdlRpc exception types and the RPC error taxonomy
"""

from enum import Enum
from typing import Any, Optional


class IdlRpcError(Exception):
    """Base exception for all IdlRpc errors"""
    pass


class SchemaError(IdlRpcError):
    """Contract could not be built from the IDL (fatal at boot)"""
    def __init__(self, message: str, entity: str = None):
        super().__init__(message)
        self.entity = entity


class ErrorKind(Enum):
    """Stable error kinds. Values are the JSON-RPC error codes."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    UNKNOWN_ERROR = -32000
    INVALID_RESPONSE = -32001

    @property
    def code(self) -> int:
        return self.value

    def exc(self, message: str, data: Any = None) -> "RpcError":
        """Build an RpcError of this kind"""
        return RpcError(self, message, data)

    @classmethod
    def from_code(cls, code: int) -> "ErrorKind":
        for kind in cls:
            if kind.value == code:
                return kind
        return cls.UNKNOWN_ERROR


class RpcError(IdlRpcError):
    """
    Coded failure attached to a response.

    Raised by validation and dispatch; handlers may raise it too, in which
    case it is passed to the caller unchanged.
    """
    def __init__(self, kind: ErrorKind, message: str, data: Any = None, code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.data = data
        # Application errors may carry their own code
        self.code = code if code is not None else kind.code

    def to_dict(self) -> dict:
        error = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error

    @classmethod
    def from_dict(cls, error: dict) -> "RpcError":
        code = error.get("code", ErrorKind.UNKNOWN_ERROR.code)
        return cls(ErrorKind.from_code(code), error.get("message", ""), error.get("data"), code=code)

    def __repr__(self) -> str:
        return f"RpcError({self.kind.name}, {self.message!r})"
