"""Tests for schema IR loading."""

import json

import pytest
from pydantic import ValidationError

from molgen.codes import GenerationCode
from molgen.kernel.errors import EmptySchemaError, MissingInputError, SchemaStructureError
from molgen.kernel.loader import load_schema, load_schema_from_dict
from molgen.kernel.schema import Kind


def test_load_schema(tmp_path):
    path = tmp_path / "s.json"
    path.write_text(json.dumps({
        "namespace": "demo",
        "imports": [],
        "declarations": [
            {"type": "array", "name": "Hash", "item": "byte", "item_count": 32},
            {"type": "table", "name": "Pair", "fields": [
                {"name": "left", "type": "Hash"},
                {"name": "right", "type": "Hash"},
            ]},
        ],
    }), encoding="utf-8")

    schema = load_schema(path)
    assert schema.namespace == "demo"
    assert schema.names() == ["Hash", "Pair"]
    pair = schema.get_declaration("Pair")
    assert pair.kind == Kind.TABLE
    assert pair.references() == ("Hash", "Hash")
    assert schema.get_declaration("Hash").item_count == 32
    assert schema.position() == {"Hash": 0, "Pair": 1}


def test_missing_file(tmp_path):
    path = tmp_path / "nope.json"
    with pytest.raises(MissingInputError) as exc_info:
        load_schema(path)
    assert exc_info.value.code == GenerationCode.MISSING_INPUT
    assert exc_info.value.path == path
    assert str(path) in str(exc_info.value)


def test_directory_is_missing_input(tmp_path):
    with pytest.raises(MissingInputError):
        load_schema(tmp_path)


@pytest.mark.parametrize("content", ["", "   \n\t  "])
def test_empty_file(tmp_path, content):
    path = tmp_path / "s.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(EmptySchemaError) as exc_info:
        load_schema(path)
    assert exc_info.value.code == GenerationCode.EMPTY_SCHEMA


def test_invalid_utf8_is_structure_error(tmp_path):
    path = tmp_path / "s.json"
    path.write_bytes(b'{"namespace": "\xff\xfe", "declarations": []}')
    with pytest.raises(SchemaStructureError, match="not valid UTF-8") as exc_info:
        load_schema(path)
    assert exc_info.value.code == GenerationCode.INVALID_STRUCTURE


def test_no_declarations_is_empty(tmp_path):
    path = tmp_path / "s.json"
    path.write_text('{"namespace": "x", "declarations": []}', encoding="utf-8")
    with pytest.raises(EmptySchemaError):
        load_schema(path)


@pytest.mark.parametrize("content", [
    "{not json",
    "[]",
    '{"namespace": "x"}',
    '{"declarations": [{"type": "union", "name": "U", "items": []}]}',
    '{"declarations": [{"type": "table", "name": "T", "fields": [], "extra": 1}]}',
    '{"declarations": [{"type": "array", "name": "A", "item": "byte", "item_count": 0}]}',
])
def test_malformed_schema(tmp_path, content):
    path = tmp_path / "s.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(SchemaStructureError) as exc_info:
        load_schema(path)
    assert exc_info.value.code == GenerationCode.INVALID_STRUCTURE


def test_loader_does_not_check_references():
    schema = load_schema_from_dict({
        "declarations": [{"type": "option", "name": "MaybeThing", "item": "Thing"}],
    })
    assert schema.get_declaration("MaybeThing").item == "Thing"


def test_schema_is_immutable():
    schema = load_schema_from_dict({"declarations": [{"type": "fixvec", "name": "V", "item": "byte"}]})
    with pytest.raises(ValidationError):
        schema.namespace = "changed"
