"""
Root conftest.py - shared IDL fixtures for the whole suite.
"""

import json

import pytest

from idlrpc_core.model.contract import Contract


def sample_idl():
    """A small but complete IDL: inheritance, enums, arrays, optionals."""
    return [
        {
            "type": "struct", "name": "Entity", "extends": "",
            "fields": [
                {"name": "id", "type": "string", "optional": False, "is_array": False},
            ],
        },
        {
            "type": "struct", "name": "Person", "extends": "Entity",
            "fields": [
                {"name": "name", "type": "string"},
                {"name": "age", "type": "int", "optional": True},
                {"name": "status", "type": "Status"},
                {"name": "tags", "type": "string", "is_array": True, "optional": True},
            ],
        },
        {
            "type": "struct", "name": "Employee", "extends": "Person",
            "fields": [
                {"name": "salary", "type": "float"},
            ],
        },
        {
            "type": "enum", "name": "Status",
            "values": [{"value": "OPEN", "comment": ""}, {"value": "CLOSED", "comment": ""}],
        },
        {
            "type": "interface", "name": "Calculator",
            "functions": [
                {
                    "name": "add",
                    "params": [{"name": "a", "type": "int"}, {"name": "b", "type": "int"}],
                    "returns": {"type": "int"},
                },
                {
                    "name": "sum_grid",
                    "params": [{"name": "grid", "type": "float", "array_depth": 2}],
                    "returns": {"type": "float"},
                },
            ],
        },
        {
            "type": "interface", "name": "People",
            "functions": [
                {
                    "name": "get",
                    "params": [{"name": "id", "type": "string"}],
                    "returns": {"type": "Person", "optional": True},
                },
                {
                    "name": "save",
                    "params": [{"name": "person", "type": "Person"}],
                    "returns": {"type": "Status"},
                },
                {
                    "name": "ping",
                    "params": [],
                    "returns": {"type": "bool"},
                },
            ],
        },
        {"type": "meta", "checksum": "abc123", "date_generated": 1700000000000},
    ]


@pytest.fixture
def idl():
    return sample_idl()


@pytest.fixture
def contract(idl):
    return Contract(idl)


@pytest.fixture
def idl_file(tmp_path, idl):
    path = tmp_path / "service.json"
    path.write_text(json.dumps(idl))
    return path
