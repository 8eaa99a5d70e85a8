"""Tests for parsing, serializing, and accessing document trees."""

import json
from pathlib import Path

import pytest

from diagram_migrator.document import (
    dump_document,
    is_type,
    load_document,
    parse_document,
    records,
    replace_records,
    save_document,
)
from diagram_migrator.errors import DocumentParseError
from diagram_migrator.version import Version


def test_parse_document_keeps_field_order():
    doc = parse_document('{"version": "2.0", "nodes": [], "edges": [], "diagram": "ClassDiagram"}')
    assert list(doc) == ["version", "nodes", "edges", "diagram"]


def test_parse_invalid_json():
    with pytest.raises(DocumentParseError, match="Invalid JSON"):
        parse_document('{"version": ')


def test_parse_non_object_root():
    with pytest.raises(DocumentParseError, match="must be an object"):
        parse_document("[1, 2, 3]")


def test_load_document(legacy_path: Path):
    doc = load_document(legacy_path)
    assert doc["version"] == "2.0"
    assert len(doc["nodes"]) == 5


def test_save_document_stamps_version(temp_dir: Path):
    target = temp_dir / "out.json"
    save_document({"version": "2.0", "nodes": [{"type": "InterfaceNode", "name": "«x»"}], "edges": []}, target, Version(3, 8))

    text = target.read_text(encoding="utf-8")
    assert "«x»" in text
    assert json.loads(text)["version"] == "3.8"


def test_dump_document_does_not_mutate_input():
    doc = {"version": "2.0", "nodes": [], "edges": []}
    dump_document(doc, "3.8")
    assert doc["version"] == "2.0"


def test_records_missing_or_wrong_shape():
    assert records({"edges": {"not": "a list"}}, "edges") == []
    assert records({}, "nodes") == []


def test_replace_records_is_shallow_copy():
    doc = {"version": "2.0", "edges": [{"type": "X"}]}
    updated = replace_records(doc, "edges", [])
    assert updated["edges"] == []
    assert doc["edges"] == [{"type": "X"}]


def test_is_type():
    assert is_type({"type": "ClassNode"}, "ClassNode")
    assert not is_type({"type": "ClassNode"}, "NoteNode")
    assert not is_type("ClassNode", "ClassNode")
