"""
Validator - recursive checking of decoded values against declared types

validate() walks a value alongside its TypeSpec: arrays element by
element, structs field by field over the resolved (inherited) field set,
enums by membership, primitives through the converter registry. The first
violation raises; nothing is aggregated.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from idlrpc_core.exceptions import ErrorKind, RpcError
from idlrpc_core.model.contract import Contract
from idlrpc_core.model.types import TypeSpec
from idlrpc_core.runtime.converters import (
    DEFAULT_CONVERTERS, TypeConverterRegistry, ValueKind, describe_kind, kind_of
)

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Which side of a call a value belongs to"""
    REQUEST = "request"
    RESPONSE = "response"

    @property
    def error_kind(self) -> ErrorKind:
        if self is Direction.REQUEST:
            return ErrorKind.INVALID_PARAMS
        return ErrorKind.INVALID_RESPONSE


class Validator:
    """
    Validates values against a contract's types.

    Holds no mutable state, so one instance can serve any number of
    concurrent calls.
    """

    def __init__(self, contract: Contract, converters: Optional[TypeConverterRegistry] = None):
        """
        Args:
            contract: Contract whose structs and enums resolve type names
            converters: Primitive kind registry (built-in kinds by default)
        """
        self.contract = contract
        self.converters = converters if converters is not None else DEFAULT_CONVERTERS

    def validate(self, type_spec: TypeSpec, value: Any, direction: Direction, path: str = "value") -> Any:
        """
        Check a value against a type and return its normalized form.

        Args:
            type_spec: Declared type
            value: Decoded value
            direction: REQUEST or RESPONSE, selects the error kind
            path: Location of the value, used in error messages

        Returns:
            Normalized value (same structure as the input)

        Raises:
            RpcError: INVALID_PARAMS or INVALID_RESPONSE on the first violation,
                or when the value is nested deeper than the interpreter can walk
        """
        try:
            return self._validate(type_spec, value, direction, path)
        except RecursionError:
            logger.warning("Value at %s is nested too deeply to validate", path)
            raise self._fail(direction, path, "Value is nested too deeply") from None

    def _validate(self, type_spec: TypeSpec, value: Any, direction: Direction, path: str) -> Any:
        if value is None:
            if type_spec.optional:
                return None
            raise self._fail(direction, path, f"Expected {type_spec.describe()}, got: null")

        if type_spec.array_depth > 0:
            return self._validate_array(type_spec, value, direction, path)

        converter = self.converters.get(type_spec.type)
        if converter is not None:
            try:
                if direction is Direction.REQUEST:
                    return converter.from_request(value)
                return converter.to_response(value)
            except RpcError as e:
                raise self._fail(direction, path, e.message)

        if type_spec.type in self.contract.structs:
            return self._validate_struct(type_spec.type, value, direction, path)

        if type_spec.type in self.contract.enums:
            return self._validate_enum(type_spec.type, value, direction, path)

        logger.error("Schema inconsistency: unknown type '%s' at %s", type_spec.type, path)
        raise self._fail(direction, path, f"Unknown type '{type_spec.type}'")

    def _validate_array(self, type_spec: TypeSpec, value: Any, direction: Direction, path: str) -> List[Any]:
        if kind_of(value) is not ValueKind.SEQUENCE:
            raise self._fail(
                direction, path, f"Expected {type_spec.describe()}, got: {describe_kind(value)}"
            )
        element = type_spec.element()
        return [
            self._validate(element, item, direction, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    def _validate_struct(self, name: str, value: Any, direction: Direction, path: str) -> Dict[str, Any]:
        if kind_of(value) is not ValueKind.KEYED:
            raise self._fail(direction, path, f"Expected {name}, got: {describe_kind(value)}")

        # Keys outside the resolved field set pass through untouched
        result = dict(value)
        for f in self.contract.resolved_fields(name):
            field_path = f"{path}.{f.name}"
            if f.name not in value:
                if not f.type_spec.optional:
                    raise self._fail(direction, field_path, f"Missing required field '{f.name}' of {name}")
                continue
            result[f.name] = self._validate(f.type_spec, value[f.name], direction, field_path)
        return result

    def _validate_enum(self, name: str, value: Any, direction: Direction, path: str) -> str:
        enum = self.contract.enums[name]
        if kind_of(value) is not ValueKind.STRING:
            raise self._fail(direction, path, f"Expected {name}, got: {describe_kind(value)}")
        if value not in enum:
            allowed = ", ".join(enum.values)
            raise self._fail(direction, path, f"Value '{value}' is not in enum {name} [{allowed}]")
        return value

    @staticmethod
    def _fail(direction: Direction, path: str, message: str) -> RpcError:
        return RpcError(direction.error_kind, f"{path}: {message}", data={"path": path})


def validate(type_spec: TypeSpec, value: Any, contract: Contract, direction: Direction,
             converters: Optional[TypeConverterRegistry] = None) -> Any:
    """Validate a single value. See Validator.validate."""
    return Validator(contract, converters).validate(type_spec, value, direction)


def find_unknown_types(contract: Contract, converters: Optional[TypeConverterRegistry] = None) -> List[str]:
    """
    List type references that resolve to no primitive, struct or enum.

    Such references only fail when a value reaches them at call time, so
    this lets tooling report them up front.

    Returns:
        Messages of the form "<location>: unknown type '<name>'"
    """
    converters = converters if converters is not None else DEFAULT_CONVERTERS

    def known(type_name: str) -> bool:
        return type_name in converters or type_name in contract.structs or type_name in contract.enums

    problems = []
    for struct in contract.structs.values():
        for f in struct.fields:
            if not known(f.type_spec.type):
                problems.append(f"struct {struct.name}.{f.name}: unknown type '{f.type_spec.type}'")
    for iface in contract.interfaces.values():
        for func in iface:
            for param in func.params:
                if not known(param.type_spec.type):
                    problems.append(
                        f"{iface.name}.{func.name} param '{param.name}': unknown type '{param.type_spec.type}'"
                    )
            if not known(func.returns.type):
                problems.append(f"{iface.name}.{func.name} returns: unknown type '{func.returns.type}'")
    return problems
