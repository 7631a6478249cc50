"""Shared test fixtures for header-translator tests.

The builders create entity trees shaped like what the clang front end dumps.
"""
import json
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest
import yaml

from headertranslator.config import TranslationConfig
from headertranslator.models.entity import Entity, EntityKind, Nullability, TypeKind, TypeRef
from headertranslator.translator.context import Context


def ty(kind: TypeKind, name: Optional[str] = None, **kwargs) -> TypeRef:
    return TypeRef(kind=kind, name=name, **kwargs)


def obj(name: Optional[str] = None, nullable: bool = False, **kwargs) -> TypeRef:
    """Object pointer such as ``NSString *``."""
    nullability = Nullability.NULLABLE if nullable else Nullability.NONNULL
    return TypeRef(kind=TypeKind.OBJC_OBJECT_POINTER, name=name, nullability=nullability, **kwargs)


def typedef(name: str, canonical: Optional[TypeRef] = None) -> TypeRef:
    return TypeRef(kind=TypeKind.TYPEDEF, name=name, canonical=canonical)


NSUINTEGER = typedef("NSUInteger", canonical=ty(TypeKind.ULONG))
NSINTEGER = typedef("NSInteger", canonical=ty(TypeKind.LONG))


def entity(kind: EntityKind, name: Optional[str] = None, children: Sequence[Entity] = (), **kwargs) -> Entity:
    return Entity(kind=kind, name=name, children=list(children), **kwargs)


def attr(macro: str) -> Entity:
    return entity(EntityKind.UNEXPOSED_ATTR, macro=macro)


def param(name: str, type_: TypeRef) -> Entity:
    return entity(EntityKind.PARM_DECL, name, type=type_)


def method_decl(
    selector: str,
    result: Optional[TypeRef] = None,
    params: Sequence[Entity] = (),
    class_method: bool = False,
    children: Sequence[Entity] = (),
    **kwargs,
) -> Entity:
    kind = EntityKind.OBJC_CLASS_METHOD_DECL if class_method else EntityKind.OBJC_INSTANCE_METHOD_DECL
    return entity(
        kind,
        selector,
        children=[*params, *children],
        result_type=result or ty(TypeKind.VOID),
        **kwargs,
    )


def property_decl(name: str, type_: TypeRef, readonly: bool = False, **kwargs) -> Entity:
    return entity(EntityKind.OBJC_PROPERTY_DECL, name, type=type_, is_readonly=readonly, **kwargs)


def accessors(name: str, type_: TypeRef, readonly: bool = False) -> list:
    """The property plus the accessor methods clang synthesizes after it."""
    setter = f"set{name[:1].upper()}{name[1:]}:"
    children = [
        property_decl(name, type_, readonly=readonly),
        method_decl(name, result=type_),
    ]
    if not readonly:
        children.append(method_decl(setter, params=[param(name, type_)]))
    return children


def root_class(name: str = "NSObject") -> Entity:
    return entity(EntityKind.OBJC_INTERFACE_DECL, name, children=[entity(EntityKind.OBJC_ROOT_CLASS)])


def class_decl(
    name: str,
    superclass: Optional[Entity] = None,
    children: Sequence[Entity] = (),
    superclass_generics: Sequence[str] = (),
) -> Entity:
    header = []
    if superclass is not None:
        header.append(
            entity(EntityKind.OBJC_SUPER_CLASS_REF, superclass.name, reference=superclass)
        )
        header.extend(entity(EntityKind.TYPE_REF, generic) for generic in superclass_generics)
    return entity(EntityKind.OBJC_INTERFACE_DECL, name, children=[*header, *children])


def class_chain(*names: str) -> Entity:
    """``class_chain("A", "B", "Root")`` builds A : B : Root and returns A."""
    current = root_class(names[-1])
    for name in reversed(names[:-1]):
        current = class_decl(name, current)
    return current


def enum_constant(name: str, value: int, source: Optional[str] = None) -> Entity:
    children = []
    if source is not None:
        children.append(entity(EntityKind.BINARY_OPERATOR, source=source))
    return entity(EntityKind.ENUM_CONSTANT_DECL, name, enum_value=value, children=children)


@pytest.fixture
def context() -> Context:
    return Context()


@pytest.fixture
def context_factory() -> Callable[[dict], Context]:
    """Factory fixture building a context from an override mapping."""
    def _create(overrides: dict, pointer_width: int = 64) -> Context:
        return Context(config=TranslationConfig.model_validate(overrides), pointer_width=pointer_width)
    return _create


@pytest.fixture
def dump_factory(tmp_path: Path) -> Callable[[str, list], Path]:
    """Write a translation unit dump to disk."""
    def _create(name: str, entities: Sequence[Entity], **unit) -> Path:
        path = tmp_path / name
        data = {
            "name": Path(name).stem,
            "entities": [item.model_dump(mode="json", exclude_defaults=True) for item in entities],
            **unit,
        }
        if path.suffix == ".json":
            path.write_text(json.dumps(data, indent=2))
        else:
            path.write_text(yaml.safe_dump(data, sort_keys=False))
        return path
    return _create
