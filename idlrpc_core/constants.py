"""
Centralized constants and defaults for IdlRpc
"""

# Built-in primitive kinds
STRING = "string"
INT = "int"
FLOAT = "float"
BOOL = "bool"
PRIMITIVE_KINDS = (STRING, INT, FLOAT, BOOL)

# Schema entry discriminators
ENTRY_INTERFACE = "interface"
ENTRY_STRUCT = "struct"
ENTRY_ENUM = "enum"
ENTRY_META = "meta"

# Built-in method that returns the raw IDL
IDL_METHOD = "idlrpc-idl"

JSONRPC_VERSION = "2.0"
