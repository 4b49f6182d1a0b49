"""
Contract - the schema root built from a decoded IDL

A Contract owns every Interface, Struct and Enum declared in one IDL
document. It is built once at boot and never mutated afterwards.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple, Union

import networkx as nx

from idlrpc_core.constants import ENTRY_ENUM, ENTRY_INTERFACE, ENTRY_META, ENTRY_STRUCT
from idlrpc_core.exceptions import ErrorKind, SchemaError
from idlrpc_core.model.types import Enum, Field, Function, Interface, Struct

logger = logging.getLogger(__name__)


class Contract:
    """
    In-memory catalog of a single IDL document.

    Responsibilities:
    - Build interfaces, structs and enums from decoded schema entries
    - Resolve struct parents and reject cycles or missing parents
    - Resolve and cache each struct's full (inherited) field set
    - Look up functions by interface and function name
    """

    def __init__(self, idl: List[Dict[str, Any]]):
        """
        Build a contract from decoded IDL entries.

        Args:
            idl: Ordered list of entries, each a dict with a "type" key

        Raises:
            SchemaError: If a struct parent is missing, the extends chain has
                a cycle, or a field name clashes with an ancestor's field
        """
        if not isinstance(idl, list):
            raise SchemaError(f"IDL must be a list of entries, got {type(idl).__name__}")

        self._idl = tuple(idl)
        interfaces: Dict[str, Interface] = {}
        structs: Dict[str, Struct] = {}
        enums: Dict[str, Enum] = {}
        meta: Dict[str, Any] = {}

        for entry in idl:
            if not isinstance(entry, dict):
                raise SchemaError(f"IDL entry must be an object, got {type(entry).__name__}")
            entry_type = entry.get("type")
            if entry_type == ENTRY_INTERFACE:
                self._register(interfaces, Interface.from_dict(entry), "interface")
            elif entry_type == ENTRY_STRUCT:
                self._register(structs, Struct.from_dict(entry), "struct")
            elif entry_type == ENTRY_ENUM:
                self._register(enums, Enum.from_dict(entry), "enum")
            elif entry_type == ENTRY_META:
                meta.update({k: v for k, v in entry.items() if k != "type"})
            else:
                # Unknown entry kinds come from newer IDL generators
                logger.debug("Ignoring IDL entry of type %r", entry_type)

        self._interfaces = MappingProxyType(interfaces)
        self._structs = MappingProxyType(structs)
        self._enums = MappingProxyType(enums)
        self._meta = MappingProxyType(meta)
        self._resolved_fields = MappingProxyType(self._resolve_all_fields())

        logger.info(
            "Contract loaded: %d interface(s), %d struct(s), %d enum(s)",
            len(interfaces), len(structs), len(enums)
        )

    @staticmethod
    def _register(registry: Dict[str, Any], entity: Any, kind: str) -> None:
        if not entity.name:
            raise SchemaError(f"{kind} entry is missing a name")
        if entity.name in registry:
            raise SchemaError(f"Duplicate {kind} '{entity.name}'", entity=entity.name)
        registry[entity.name] = entity

    # -- struct inheritance -------------------------------------------------

    def _build_inheritance_graph(self) -> nx.DiGraph:
        """Directed graph with an edge child -> parent for every extends."""
        graph = nx.DiGraph()
        for struct in self._structs.values():
            graph.add_node(struct.name)
            if struct.extends is None:
                continue
            if struct.extends not in self._structs:
                raise SchemaError(
                    f"Struct '{struct.name}' extends unknown struct '{struct.extends}'",
                    entity=struct.name
                )
            graph.add_edge(struct.name, struct.extends)
        return graph

    def _resolve_all_fields(self) -> Dict[str, Tuple[Field, ...]]:
        graph = self._build_inheritance_graph()
        try:
            cycle = nx.find_cycle(graph)
        except nx.NetworkXNoCycle:
            cycle = None
        if cycle:
            chain = " -> ".join([edge[0] for edge in cycle] + [cycle[0][0]])
            raise SchemaError(f"Cyclic struct inheritance: {chain}", entity=cycle[0][0])

        resolved: Dict[str, Tuple[Field, ...]] = {}
        # Parents sort after children, so walk the reversed order to build roots first
        for name in reversed(list(nx.topological_sort(graph))):
            resolved[name] = self._merge_fields(self._structs[name], resolved)
        return resolved

    def _merge_fields(self, struct: Struct, resolved: Dict[str, Tuple[Field, ...]]) -> Tuple[Field, ...]:
        if struct.extends is None:
            return struct.fields

        parent = self._structs[struct.extends]
        merged: List[Field] = list(resolved[parent.name])
        positions = {f.name: i for i, f in enumerate(merged)}

        for own in struct.fields:
            if own.name not in positions:
                positions[own.name] = len(merged)
                merged.append(own)
            elif parent.get_field(own.name) is not None:
                merged[positions[own.name]] = own
            else:
                declared_by = self._declaring_ancestor(parent, own.name)
                raise SchemaError(
                    f"Struct '{struct.name}': field '{own.name}' clashes with "
                    f"field inherited from '{declared_by}'",
                    entity=struct.name
                )
        return tuple(merged)

    def _declaring_ancestor(self, struct: Struct, field_name: str) -> str:
        current = struct
        while current is not None:
            if current.get_field(field_name) is not None:
                return current.name
            current = self._structs.get(current.extends) if current.extends else None
        return struct.name

    def resolved_fields(self, struct: Union[Struct, str]) -> Tuple[Field, ...]:
        """
        Full field set of a struct: ancestors' fields first, then its own.

        Args:
            struct: Struct or struct name

        Returns:
            Tuple of Fields, stable across calls
        """
        name = struct.name if isinstance(struct, Struct) else struct
        if name not in self._resolved_fields:
            raise KeyError(f"Struct '{name}' not found")
        return self._resolved_fields[name]

    def ancestors(self, struct: Union[Struct, str]) -> List[str]:
        """Names of a struct's ancestors, nearest first."""
        name = struct.name if isinstance(struct, Struct) else struct
        chain = []
        current = self._structs[name].extends
        while current is not None:
            chain.append(current)
            current = self._structs[current].extends
        return chain

    # -- lookups ------------------------------------------------------------

    @property
    def idl(self) -> Tuple[Dict[str, Any], ...]:
        """Decoded IDL entries exactly as passed to the constructor."""
        return self._idl

    @property
    def interfaces(self) -> Mapping[str, Interface]:
        return self._interfaces

    @property
    def structs(self) -> Mapping[str, Struct]:
        return self._structs

    @property
    def enums(self) -> Mapping[str, Enum]:
        return self._enums

    @property
    def meta(self) -> Mapping[str, Any]:
        """Generator metadata (checksum, version, date) if the IDL has any."""
        return self._meta

    def get_function(self, interface_name: str, function_name: str) -> Function:
        """
        Find a function by interface and function name.

        Raises:
            RpcError: METHOD_NOT_FOUND if either name is unknown
        """
        iface = self._interfaces.get(interface_name)
        if iface is None:
            raise ErrorKind.METHOD_NOT_FOUND.exc(f"Interface '{interface_name}' not found")

        func = iface.get_function(function_name)
        if func is None:
            raise ErrorKind.METHOD_NOT_FOUND.exc(
                f"Function '{interface_name}.{function_name}' not found"
            )
        return func

    def __repr__(self) -> str:
        return (
            f"Contract(interfaces={list(self._interfaces)}, "
            f"structs={list(self._structs)}, enums={list(self._enums)})"
        )
