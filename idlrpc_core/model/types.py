"""
IDL entity primitives: type specs, enums, structs, functions and interfaces

All entities are frozen once built so a contract can be shared by every
request worker without locking.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple
from types import MappingProxyType

from idlrpc_core.exceptions import SchemaError


def _as_dict(raw: Any, what: str, entity: str = "") -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise SchemaError(f"{what} must be an object, got {type(raw).__name__}", entity=entity)
    return raw


def _as_list(data: Dict[str, Any], key: str, what: str, entity: str = "") -> list:
    items = data.get(key, [])
    if not isinstance(items, list):
        raise SchemaError(f"{what}: '{key}' must be a list, got {type(items).__name__}", entity=entity)
    return items


def _name_of(data: Dict[str, Any], what: str) -> str:
    name = data.get("name", "")
    if not isinstance(name, str):
        raise SchemaError(f"{what} name must be a string, got {type(name).__name__}")
    return name


@dataclass(frozen=True)
class TypeSpec:
    """
    Declared type of a field, parameter or return value.
    """
    type: str  # primitive kind or user-defined struct/enum name
    optional: bool = False
    array_depth: int = 0  # 0 = scalar, N = N nested sequences

    def element(self) -> "TypeSpec":
        """Type of one element of an array type."""
        if self.array_depth == 0:
            raise ValueError(f"{self} is not an array type")
        # Elements of an optional array are not themselves optional
        return TypeSpec(self.type, optional=False, array_depth=self.array_depth - 1)

    @property
    def is_array(self) -> bool:
        return self.array_depth > 0

    def describe(self) -> str:
        """Human readable form, e.g. '[][]int' or 'Person (optional)'."""
        text = "[]" * self.array_depth + self.type
        if self.optional:
            text += " (optional)"
        return text

    def to_dict(self) -> dict:
        return {"type": self.type, "optional": self.optional, "array_depth": self.array_depth}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], context: str = "") -> "TypeSpec":
        type_name = data.get("type")
        if not isinstance(type_name, str) or not type_name:
            raise SchemaError(f"{context}: missing type name", entity=context)

        if "array_depth" in data:
            depth = data["array_depth"]
            if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
                raise SchemaError(f"{context}: array_depth must be a non-negative integer", entity=context)
        else:
            depth = 1 if data.get("is_array") else 0

        optional = data.get("optional", False)
        if not isinstance(optional, bool):
            raise SchemaError(f"{context}: optional must be true or false", entity=context)

        return cls(type=type_name, optional=optional, array_depth=depth)


@dataclass(frozen=True)
class Field:
    """Named, typed member of a struct or function parameter list."""
    name: str
    type_spec: TypeSpec
    comment: str = ""

    @classmethod
    def from_dict(cls, data: Any, context: str = "") -> "Field":
        where = f"'{context}': field" if context else "Field"
        data = _as_dict(data, f"{where} entry", entity=context)
        name = _name_of(data, where)
        return cls(
            name=name,
            type_spec=TypeSpec.from_dict(data, context=f"{context}.{name}" if context else name),
            comment=data.get("comment", "")
        )


@dataclass(frozen=True)
class Enum:
    """Named set of permitted string values."""
    name: str
    values: Tuple[str, ...]
    comment: str = ""

    def __contains__(self, value: Any) -> bool:
        return isinstance(value, str) and value in self.values

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Enum":
        name = _name_of(data, "Enum")
        values = []
        for raw in _as_list(data, "values", f"Enum '{name}'", entity=name):
            # IDL emits {"value": ..., "comment": ...}; bare strings are also accepted
            value = raw.get("value") if isinstance(raw, dict) else raw
            if not isinstance(value, str):
                raise SchemaError(f"Enum '{name}': value {raw!r} is not a string", entity=name)
            if value in values:
                raise SchemaError(f"Enum '{name}': duplicate value '{value}'", entity=name)
            values.append(value)
        return cls(name=name, values=tuple(values), comment=data.get("comment", ""))


@dataclass(frozen=True)
class Struct:
    """
    Named field set, optionally extending one parent struct.

    Only the struct's own fields are held here; the inherited field set is
    resolved by the owning Contract.
    """
    name: str
    fields: Tuple[Field, ...]
    extends: Optional[str] = None
    comment: str = ""

    def get_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Struct":
        name = _name_of(data, "Struct")
        extends = data.get("extends") or None
        if extends is not None and not isinstance(extends, str):
            raise SchemaError(
                f"Struct '{name}': extends must be a struct name, got {type(extends).__name__}", entity=name
            )
        fields = []
        seen = set()
        for raw in _as_list(data, "fields", f"Struct '{name}'", entity=name):
            f = Field.from_dict(raw, context=name)
            if f.name in seen:
                raise SchemaError(f"Struct '{name}': duplicate field '{f.name}'", entity=name)
            seen.add(f.name)
            fields.append(f)
        return cls(
            name=name,
            fields=tuple(fields),
            extends=extends,
            comment=data.get("comment", "")
        )


@dataclass(frozen=True)
class Function:
    """Function with ordered parameters and a single return type."""
    name: str
    params: Tuple[Field, ...]
    returns: TypeSpec
    comment: str = ""

    @property
    def arity(self) -> int:
        return len(self.params)

    def signature(self) -> str:
        params = ", ".join(f"{p.name}: {p.type_spec.describe()}" for p in self.params)
        return f"{self.name}({params}) -> {self.returns.describe()}"

    @classmethod
    def from_dict(cls, data: Any, interface_name: str = "") -> "Function":
        data = _as_dict(data, f"Interface '{interface_name}': function entry", entity=interface_name)
        name = _name_of(data, f"Interface '{interface_name}': function")
        context = f"{interface_name}.{name}"
        params = tuple(
            Field.from_dict(p, context=context)
            for p in _as_list(data, "params", f"Function '{context}'", entity=context)
        )
        returns = data.get("returns")
        if not isinstance(returns, dict):
            raise SchemaError(f"Function '{context}': missing return type", entity=context)
        return cls(
            name=name,
            params=params,
            returns=TypeSpec.from_dict(returns, context=f"{context} returns"),
            comment=data.get("comment", "")
        )


@dataclass(frozen=True)
class Interface:
    """Named group of functions."""
    name: str
    functions: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    comment: str = ""

    def get_function(self, name: str) -> Optional[Function]:
        return self.functions.get(name)

    def __iter__(self) -> Iterator[Function]:
        return iter(self.functions.values())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Interface":
        name = _name_of(data, "Interface")
        functions: Dict[str, Function] = {}
        for raw in _as_list(data, "functions", f"Interface '{name}'", entity=name):
            func = Function.from_dict(raw, interface_name=name)
            if func.name in functions:
                raise SchemaError(f"Interface '{name}': duplicate function '{func.name}'", entity=name)
            functions[func.name] = func
        return cls(name=name, functions=MappingProxyType(functions), comment=data.get("comment", ""))
