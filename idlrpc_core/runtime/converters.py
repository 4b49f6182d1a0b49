"""
Type Converters - per-primitive validators for decoded values

A converter checks one raw decoded value against one primitive kind. The
same check backs both directions; only the error kind differs:
INVALID_PARAMS for inbound values, INVALID_RESPONSE for outbound ones.
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterator, Optional, Union

from idlrpc_core.constants import BOOL, FLOAT, INT, STRING
from idlrpc_core.exceptions import ErrorKind, RpcError


class ValueKind(Enum):
    """Closed set of shapes a decoded value can take"""
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "array"
    KEYED = "object"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    """Classify a decoded value. bool is checked before int on purpose."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.KEYED
    return ValueKind.OTHER


def describe_kind(value: Any) -> str:
    """Name of a value's kind for error messages."""
    kind = kind_of(value)
    if kind is ValueKind.OTHER:
        return type(value).__name__
    return kind.value


class ConversionError(ValueError):
    """Raised by TypeConverter.convert when a value has the wrong kind"""
    pass


class TypeConverter:
    """
    Validator for one primitive kind.

    Subclasses implement convert(), which returns the normalized value or
    raises ConversionError. from_request/to_response wrap it with the
    direction's error kind.
    """

    kind: str = ""

    def convert(self, value: Any) -> Any:
        raise NotImplementedError

    def _apply(self, value: Any, error_kind: ErrorKind) -> Any:
        try:
            return self.convert(value)
        except ConversionError as e:
            raise RpcError(error_kind, str(e))

    def from_request(self, value: Any) -> Any:
        """Validate an inbound value (INVALID_PARAMS on failure)."""
        return self._apply(value, ErrorKind.INVALID_PARAMS)

    def to_response(self, value: Any) -> Any:
        """Validate an outbound value (INVALID_RESPONSE on failure)."""
        return self._apply(value, ErrorKind.INVALID_RESPONSE)

    def _expected(self, value: Any) -> ConversionError:
        return ConversionError(f"Expected {self.kind}, got: {describe_kind(value)}")


class StringConverter(TypeConverter):
    kind = STRING

    def convert(self, value: Any) -> Any:
        if kind_of(value) is not ValueKind.STRING:
            raise self._expected(value)
        return value


class IntConverter(TypeConverter):
    kind = INT

    def convert(self, value: Any) -> Any:
        kind = kind_of(value)
        if kind is ValueKind.INT:
            return value
        # Some decoders yield 3.0 for 3
        if kind is ValueKind.FLOAT and value.is_integer():
            return int(value)
        raise self._expected(value)


class FloatConverter(TypeConverter):
    kind = FLOAT

    def convert(self, value: Any) -> Any:
        if kind_of(value) not in (ValueKind.INT, ValueKind.FLOAT):
            raise self._expected(value)
        try:
            return float(value)
        except OverflowError:
            raise ConversionError(f"Integer {value} is too large for float")


class BoolConverter(TypeConverter):
    kind = BOOL

    def convert(self, value: Any) -> Any:
        if kind_of(value) is not ValueKind.BOOL:
            raise self._expected(value)
        return value


class CallableConverter(TypeConverter):
    """
    Adapts a plain function into a converter for a custom kind.

    The function returns the normalized value and raises ValueError or
    TypeError to reject it.
    """

    def __init__(self, kind: str, func: Callable[[Any], Any]):
        self.kind = kind
        self.func = func

    def convert(self, value: Any) -> Any:
        try:
            return self.func(value)
        except ConversionError:
            raise
        except (ValueError, TypeError) as e:
            raise ConversionError(f"Invalid {self.kind}: {e}")


class TypeConverterRegistry:
    """
    Mapping from primitive kind name to converter.

    Configured at process start, then frozen; lookups after that are
    read-only and safe from any thread.
    """

    def __init__(self, converters: Optional[Dict[str, TypeConverter]] = None):
        self._converters: Dict[str, TypeConverter] = dict(converters or {})
        self._frozen = False

    def register(self, kind: str, converter: Union[TypeConverter, Callable[[Any], Any]]) -> None:
        """
        Register a converter for a primitive kind.

        Args:
            kind: Kind name as used in the IDL (e.g. "timestamp")
            converter: TypeConverter instance or a plain callable

        Raises:
            RuntimeError: If the registry is frozen
        """
        if self._frozen:
            raise RuntimeError("TypeConverterRegistry is frozen")
        if not isinstance(converter, TypeConverter):
            if not callable(converter):
                raise ValueError(f"Converter must be callable, got {type(converter)}")
            converter = CallableConverter(kind, converter)
        self._converters[kind] = converter

    def freeze(self) -> "TypeConverterRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, kind: str) -> Optional[TypeConverter]:
        return self._converters.get(kind)

    def __contains__(self, kind: str) -> bool:
        return kind in self._converters

    def __iter__(self) -> Iterator[str]:
        return iter(self._converters)

    def copy(self) -> "TypeConverterRegistry":
        """Unfrozen copy, for adding custom kinds to the defaults."""
        return TypeConverterRegistry(self._converters)


def default_registry() -> TypeConverterRegistry:
    """Fresh, unfrozen registry holding the built-in kinds."""
    return TypeConverterRegistry({
        STRING: StringConverter(),
        INT: IntConverter(),
        FLOAT: FloatConverter(),
        BOOL: BoolConverter(),
    })


DEFAULT_CONVERTERS = default_registry().freeze()
