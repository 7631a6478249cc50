import logging

import pytest

from conftest import (
    accessors,
    attr,
    class_chain,
    class_decl,
    entity,
    method_decl,
    obj,
    param,
    property_decl,
    root_class,
    ty,
)
from headertranslator.config import ClassData, MethodData
from headertranslator.models.entity import EntityKind, TypeKind
from headertranslator.models.statements import ClassDefReference
from headertranslator.translator.declarations import (
    DeclMode,
    parse_objc_decl,
    parse_struct,
    parse_superclass,
    superclass_chain,
)
from headertranslator.translator.errors import (
    DuplicatePropertyError,
    MalformedEntityError,
    UnsoundBitfieldError,
)


def _selectors(parsed):
    return [method.selector for method in parsed.methods]


def test_property_accessors_replace_synthesized_methods():
    decl = class_decl(
        "Widget",
        root_class(),
        children=[
            *accessors("title", obj("NSString")),
            *accessors("count", ty(TypeKind.INT), readonly=True),
            method_decl("reload"),
        ],
    )

    parsed = parse_objc_decl(decl, DeclMode.CLASS, None)

    assert _selectors(parsed) == ["title", "setTitle:", "count", "reload"]
    setter = parsed.methods[1]
    assert setter.arguments[0][0] == "title"
    assert setter.result_type.is_void


def test_unrelated_method_with_similar_name_is_kept():
    decl = class_decl(
        "Widget",
        root_class(),
        children=[
            property_decl("title", obj("NSString"), readonly=True),
            method_decl("title", result=obj("NSString")),
            # same selector, but a class method
            method_decl("title", result=obj("NSString"), class_method=True),
        ],
    )

    parsed = parse_objc_decl(decl, DeclMode.CLASS, None)

    assert [(m.selector, m.is_class) for m in parsed.methods] == [
        ("title", False),
        ("title", True),
    ]


def test_duplicate_property_accessor_is_fatal():
    decl = class_decl(
        "Widget",
        root_class(),
        children=[
            property_decl("title", obj("NSString"), readonly=True),
            property_decl("heading", obj("NSString"), readonly=True, getter_name="title"),
        ],
    )

    with pytest.raises(DuplicatePropertyError, match="title"):
        parse_objc_decl(decl, DeclMode.CLASS, None)


def test_unmatched_property_is_logged(caplog):
    decl = class_decl(
        "Widget",
        root_class(),
        children=[property_decl("title", obj("NSString"), readonly=True)],
    )

    with caplog.at_level(logging.ERROR):
        parsed = parse_objc_decl(decl, DeclMode.CLASS, None)

    assert _selectors(parsed) == ["title"]
    assert "did not properly add methods to properties in Widget" in caplog.text


def test_tolerated_unmatched_setter_is_not_logged(caplog):
    decl = class_decl(
        "NSWindowTab",
        root_class(),
        children=[
            property_decl("displayName", obj("NSString")),
            method_decl("displayName", result=obj("NSString")),
        ],
    )

    with caplog.at_level(logging.ERROR):
        parsed = parse_objc_decl(decl, DeclMode.CLASS, None)

    assert _selectors(parsed) == ["displayName", "setDisplayName:"]
    assert caplog.text == ""


def test_skipped_methods_and_accessors():
    data = ClassData(
        methods={
            "reload": MethodData(skipped=True),
            "setTitle": MethodData(skipped=True),
        }
    )
    decl = class_decl(
        "Widget",
        root_class(),
        children=[*accessors("title", obj("NSString")), method_decl("reload")],
    )

    parsed = parse_objc_decl(decl, DeclMode.CLASS, data)

    assert _selectors(parsed) == ["title"]


def test_designated_initializers_are_recorded():
    decl = class_decl(
        "Widget",
        root_class(),
        children=[
            method_decl(
                "initWithFrame:",
                result=ty(TypeKind.TYPEDEF, "instancetype"),
                params=[param("frame", ty(TypeKind.RECORD, "CGRect"))],
                children=[attr("NS_DESIGNATED_INITIALIZER")],
            ),
            method_decl("init", result=ty(TypeKind.TYPEDEF, "instancetype")),
        ],
    )

    parsed = parse_objc_decl(decl, DeclMode.CLASS, None)

    assert parsed.designated_initializers == ["initWithFrame"]
    assert all(method.is_init for method in parsed.methods)


def test_class_generics_and_protocols():
    decl = class_decl(
        "NSArray",
        root_class(),
        children=[
            entity(EntityKind.TEMPLATE_TYPE_PARAMETER, "ObjectType"),
            entity(EntityKind.OBJC_PROTOCOL_REF, "NSCopying"),
            entity(EntityKind.OBJC_PROTOCOL_REF, "NSFastEnumeration"),
        ],
    )

    parsed = parse_objc_decl(decl, DeclMode.CLASS, None)

    assert parsed.generics == ["ObjectType"]
    assert parsed.protocols == ["NSCopying", "NSFastEnumeration"]


def test_generic_parameter_in_protocol_is_logged(caplog):
    decl = entity(
        EntityKind.OBJC_PROTOCOL_DECL,
        "NSFoo",
        children=[entity(EntityKind.TEMPLATE_TYPE_PARAMETER, "T")],
    )

    with caplog.at_level(logging.ERROR):
        parsed = parse_objc_decl(decl, DeclMode.PROTOCOL, None)

    assert parsed.generics == []
    assert "unsupported generics in NSFoo" in caplog.text


def test_parse_superclass_collects_use_site_generics():
    base = root_class("NSArray")
    decl = class_decl("NSMutableArray", base, superclass_generics=["ObjectType"])

    resolved = parse_superclass(decl)

    assert resolved is not None
    superclass, reference = resolved
    assert superclass == base
    assert reference == ClassDefReference("NSArray", ("ObjectType",))
    assert parse_superclass(base) is None


def test_superclass_chain_follows_references_to_root():
    decl = class_decl("Widget", class_chain("A", "B", "Root"))

    chain = superclass_chain(decl)

    assert [reference.name for reference in chain] == ["A", "B", "Root"]


def test_superclass_chain_rejects_cycles():
    decl = class_decl("A", class_decl("B", root_class("A")))

    with pytest.raises(MalformedEntityError, match="cyclic"):
        superclass_chain(decl)


def test_superclass_without_declaration_is_malformed():
    decl = entity(
        EntityKind.OBJC_INTERFACE_DECL,
        "Widget",
        children=[entity(EntityKind.OBJC_SUPER_CLASS_REF, "Missing")],
    )

    with pytest.raises(MalformedEntityError, match="Missing"):
        parse_superclass(decl)


def test_parse_struct_fields_and_boxable():
    decl = entity(
        EntityKind.STRUCT_DECL,
        "CGPoint",
        children=[
            entity(EntityKind.OBJC_BOXABLE),
            entity(EntityKind.FIELD_DECL, "x", type=ty(TypeKind.DOUBLE)),
            entity(EntityKind.FIELD_DECL, "_reserved", type=ty(TypeKind.INT)),
        ],
    )

    boxable, fields = parse_struct(decl, "CGPoint")

    assert boxable is True
    assert [(name, str(field)) for name, field in fields] == [
        ("x", "c_double"),
        ("_reserved", "c_int"),
    ]


def test_bit_field_is_fatal():
    decl = entity(
        EntityKind.STRUCT_DECL,
        "NSFlags",
        children=[entity(EntityKind.FIELD_DECL, "flag", type=ty(TypeKind.UINT), is_bit_field=True)],
    )

    with pytest.raises(UnsoundBitfieldError, match="flag"):
        parse_struct(decl, "NSFlags")
