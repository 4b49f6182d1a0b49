"""
Model primitives for IdlRpc Core
"""

from idlrpc_core.model.types import TypeSpec, Field, Enum, Struct, Function, Interface
from idlrpc_core.model.contract import Contract
from idlrpc_core.model.message import RpcRequest, RpcResponse

__all__ = [
    "TypeSpec",
    "Field",
    "Enum",
    "Struct",
    "Function",
    "Interface",
    "Contract",
    "RpcRequest",
    "RpcResponse",
]
