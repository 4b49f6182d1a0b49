"""
IdlRpc Core - IDL contract validation for RPC services

Load an IDL once at boot, then validate every call's params before the
handler runs and its result before the response leaves the server.
"""

from idlrpc_core.exceptions import ErrorKind, RpcError, SchemaError
from idlrpc_core.model import Contract, TypeSpec
from idlrpc_core.runtime import Direction, Server, dispatch, load_contract, validate
from idlrpc_core.config import RuntimeConfig

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "RpcError",
    "SchemaError",
    "Contract",
    "TypeSpec",
    "Direction",
    "Server",
    "dispatch",
    "load_contract",
    "validate",
    "RuntimeConfig",
]
