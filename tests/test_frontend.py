from pathlib import Path

import pytest

from conftest import class_decl, root_class
from headertranslator.frontend.dump import (
    JsonDumpFrontend,
    YamlDumpFrontend,
    format_for,
    frontend_for,
)
from headertranslator.models.entity import EntityKind
from headertranslator.translator.service import build_registry


def test_format_by_suffix():
    assert format_for(Path("NSObject.json")) == "json"
    assert format_for(Path("NSObject.YAML")) == "yaml"
    assert format_for(Path("NSObject.yml")) == "yaml"
    assert isinstance(frontend_for(Path("a.json")), JsonDumpFrontend)
    assert isinstance(frontend_for(Path("a.yaml")), YamlDumpFrontend)
    with pytest.raises(ValueError, match="Unsupported dump format"):
        format_for(Path("NSObject.h"))


def test_registry_lookup():
    registry = build_registry()

    assert registry.formats() == ["json", "yaml"]
    assert isinstance(registry.get("json"), JsonDumpFrontend)
    with pytest.raises(ValueError, match="No front end registered for xml"):
        registry.get("xml")


@pytest.mark.parametrize("name", ["NSView.json", "NSView.yaml"])
def test_dump_round_trips_entity_tree(dump_factory, name):
    decl = class_decl("NSView", class_decl("NSResponder", root_class()))
    path = dump_factory(name, [decl], pointer_width=32)

    unit = frontend_for(path).load(path.read_text(), path)

    assert unit.name == "NSView"
    assert unit.pointer_width == 32
    assert unit.entities == [decl]
    superclass = unit.entities[0].children[0]
    assert superclass.kind == EntityKind.OBJC_SUPER_CLASS_REF
    assert superclass.reference.name == "NSResponder"


def test_yaml_dump_written_by_hand(tmp_path):
    path = tmp_path / "NSZone.yaml"
    path.write_text(
        """
entities:
  - kind: TypedefDecl
    name: NSZone
    underlying_type: {kind: record, name: _NSZone}
"""
    )

    unit = YamlDumpFrontend().load(path.read_text(), path)

    assert unit.name == "NSZone"
    assert unit.entities[0].underlying_type.name == "_NSZone"


def test_invalid_dump_raises_value_error_with_path(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"entities": [{"kind": "NotAKind"}]}')

    with pytest.raises(ValueError, match="broken.json: invalid AST dump"):
        JsonDumpFrontend().load(path.read_text(), path)


def test_unparseable_dumps(tmp_path):
    json_path = tmp_path / "broken.json"
    yaml_path = tmp_path / "broken.yaml"

    with pytest.raises(ValueError, match="not valid JSON"):
        JsonDumpFrontend().load("{", json_path)
    with pytest.raises(ValueError, match="not valid YAML"):
        YamlDumpFrontend().load("entities: [", yaml_path)
    with pytest.raises(ValueError, match="expected a mapping"):
        YamlDumpFrontend().load("- 1\n", yaml_path)


def test_unknown_entity_kind_value_is_rejected(tmp_path):
    path = tmp_path / "x.yaml"

    with pytest.raises(ValueError):
        YamlDumpFrontend().load("entities:\n  - {kind: ObjCImplementationDecl}\n", path)
