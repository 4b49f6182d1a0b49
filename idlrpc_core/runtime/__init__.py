"""
IdlRpc Core - Runtime

Validates calls against a loaded contract:
- Type converters for primitive kinds
- Recursive value validation (arrays, structs, enums, optionals)
- Dispatch: resolve, validate params, invoke handler, validate result
- JSON codec and the Server boundary
"""

from .converters import TypeConverter, TypeConverterRegistry, default_registry
from .validator import Direction, Validator, validate
from .dispatcher import HandlerRegistry, dispatch
from .codec import JsonCodec
from .loader import ContractLoader, load_contract, load_contract_text
from .server import Server

__all__ = [
    "TypeConverter",
    "TypeConverterRegistry",
    "default_registry",
    "Direction",
    "Validator",
    "validate",
    "HandlerRegistry",
    "dispatch",
    "JsonCodec",
    "ContractLoader",
    "load_contract",
    "load_contract_text",
    "Server",
]
