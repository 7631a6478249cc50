"""Entity tree handed to the translator by the clang front end.

The front end itself lives outside this package; it dumps each header as a
``TranslationUnit`` whose entities mirror clang cursors one to one. Only the
facts the translator reads are modelled here.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..translator.errors import MalformedEntityError


class EntityKind(str, Enum):
    OBJC_INTERFACE_DECL = "ObjCInterfaceDecl"
    OBJC_CATEGORY_DECL = "ObjCCategoryDecl"
    OBJC_PROTOCOL_DECL = "ObjCProtocolDecl"
    OBJC_CLASS_REF = "ObjCClassRef"
    OBJC_PROTOCOL_REF = "ObjCProtocolRef"
    OBJC_SUPER_CLASS_REF = "ObjCSuperClassRef"
    TYPE_REF = "TypeRef"
    TEMPLATE_TYPE_PARAMETER = "TemplateTypeParameter"
    OBJC_INSTANCE_METHOD_DECL = "ObjCInstanceMethodDecl"
    OBJC_CLASS_METHOD_DECL = "ObjCClassMethodDecl"
    OBJC_PROPERTY_DECL = "ObjCPropertyDecl"
    OBJC_IVAR_DECL = "ObjCIvarDecl"
    OBJC_ROOT_CLASS = "ObjCRootClass"
    OBJC_EXPLICIT_PROTOCOL_IMPL = "ObjCExplicitProtocolImpl"
    OBJC_EXCEPTION = "ObjCException"
    OBJC_BOXABLE = "ObjCBoxable"
    OBJC_DESIGNATED_INITIALIZER = "ObjCDesignatedInitializer"
    VISIBILITY_ATTR = "VisibilityAttr"
    UNEXPOSED_ATTR = "UnexposedAttr"
    FLAG_ENUM = "FlagEnum"
    TYPEDEF_DECL = "TypedefDecl"
    STRUCT_DECL = "StructDecl"
    UNION_DECL = "UnionDecl"
    ENUM_DECL = "EnumDecl"
    ENUM_CONSTANT_DECL = "EnumConstantDecl"
    FIELD_DECL = "FieldDecl"
    VAR_DECL = "VarDecl"
    FUNCTION_DECL = "FunctionDecl"
    PARM_DECL = "ParmDecl"
    COMPOUND_STMT = "CompoundStmt"
    MACRO_EXPANSION = "MacroExpansion"
    INCLUSION_DIRECTIVE = "InclusionDirective"
    # expressions
    INTEGER_LITERAL = "IntegerLiteral"
    FLOATING_LITERAL = "FloatingLiteral"
    CHARACTER_LITERAL = "CharacterLiteral"
    STRING_LITERAL = "StringLiteral"
    OBJC_STRING_LITERAL = "ObjCStringLiteral"
    OBJC_BOOL_LITERAL_EXPR = "ObjCBoolLiteralExpr"
    UNARY_OPERATOR = "UnaryOperator"
    BINARY_OPERATOR = "BinaryOperator"
    PAREN_EXPR = "ParenExpr"
    CSTYLE_CAST_EXPR = "CStyleCastExpr"
    DECL_REF_EXPR = "DeclRefExpr"
    CALL_EXPR = "CallExpr"
    UNEXPOSED_EXPR = "UnexposedExpr"

    @property
    def is_expression(self) -> bool:
        return self in EXPRESSION_KINDS


EXPRESSION_KINDS = frozenset(
    {
        EntityKind.INTEGER_LITERAL,
        EntityKind.FLOATING_LITERAL,
        EntityKind.CHARACTER_LITERAL,
        EntityKind.STRING_LITERAL,
        EntityKind.OBJC_STRING_LITERAL,
        EntityKind.OBJC_BOOL_LITERAL_EXPR,
        EntityKind.UNARY_OPERATOR,
        EntityKind.BINARY_OPERATOR,
        EntityKind.PAREN_EXPR,
        EntityKind.CSTYLE_CAST_EXPR,
        EntityKind.DECL_REF_EXPR,
        EntityKind.CALL_EXPR,
        EntityKind.UNEXPOSED_EXPR,
    }
)


class TypeKind(str, Enum):
    VOID = "void"
    BOOL = "bool"
    CHAR = "char"
    SCHAR = "signed char"
    UCHAR = "unsigned char"
    SHORT = "short"
    USHORT = "unsigned short"
    INT = "int"
    UINT = "unsigned int"
    LONG = "long"
    ULONG = "unsigned long"
    LONGLONG = "long long"
    ULONGLONG = "unsigned long long"
    FLOAT = "float"
    DOUBLE = "double"
    POINTER = "pointer"
    OBJC_OBJECT_POINTER = "objc_object_pointer"
    OBJC_CLASS = "objc_class"
    OBJC_SEL = "objc_sel"
    TYPEDEF = "typedef"
    RECORD = "record"
    ENUM = "enum"
    BLOCK_POINTER = "block_pointer"
    FUNCTION_PROTO = "function_proto"
    CONSTANT_ARRAY = "constant_array"
    INCOMPLETE_ARRAY = "incomplete_array"


SIGNED_INTEGER_KINDS = frozenset(
    {
        TypeKind.CHAR,
        TypeKind.SCHAR,
        TypeKind.SHORT,
        TypeKind.INT,
        TypeKind.LONG,
        TypeKind.LONGLONG,
    }
)


class Nullability(str, Enum):
    NONNULL = "nonnull"
    NULLABLE = "nullable"
    UNSPECIFIED = "unspecified"


class TypeRef(BaseModel):
    """A foreign type as reported by the front end."""

    model_config = ConfigDict(frozen=True)

    kind: TypeKind
    name: Optional[str] = None
    pointee: Optional[TypeRef] = None
    element: Optional[TypeRef] = None
    size: Optional[int] = None
    is_const: bool = False
    nullability: Nullability = Nullability.UNSPECIFIED
    generics: List[TypeRef] = Field(default_factory=list)
    protocols: List[str] = Field(default_factory=list)
    canonical: Optional[TypeRef] = None

    @property
    def is_signed_integer(self) -> bool:
        if self.kind == TypeKind.TYPEDEF and self.canonical is not None:
            return self.canonical.is_signed_integer
        return self.kind in SIGNED_INTEGER_KINDS


class PlatformAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    platform: str
    introduced: Optional[str] = None
    deprecated: Optional[str] = None
    obsoleted: Optional[str] = None
    unavailable: bool = False
    message: Optional[str] = None


class Entity(BaseModel):
    """One AST node plus its immediate children."""

    model_config = ConfigDict(frozen=True)

    kind: EntityKind
    name: Optional[str] = None
    display_name: Optional[str] = None
    type: Optional[TypeRef] = None
    result_type: Optional[TypeRef] = None
    underlying_type: Optional[TypeRef] = None
    availability: List[PlatformAvailability] = Field(default_factory=list)
    is_definition: bool = True
    is_bit_field: bool = False
    is_variadic: bool = False
    is_inline: bool = False
    is_static_method: bool = False
    is_optional: bool = False
    # ObjCPropertyDecl
    getter_name: Optional[str] = None
    setter_name: Optional[str] = None
    is_readonly: bool = False
    is_class_property: bool = False
    # EnumConstantDecl
    enum_value: Optional[int] = None
    # expression source text, e.g. "1 << 3"
    source: Optional[str] = None
    # macro an UnexposedAttr was expanded from
    macro: Optional[str] = None
    reference: Optional[Entity] = None
    children: List[Entity] = Field(default_factory=list)

    def require_name(self, what: str) -> str:
        if not self.name:
            raise MalformedEntityError(f"{self.kind.value} is missing its {what}")
        return self.name

    def describe(self) -> str:
        return f"{self.kind.value} {self.name or '<anonymous>'}"


class TranslationUnit(BaseModel):
    """Top-level entities of one header, in source order."""

    name: str
    pointer_width: int = 64
    entities: List[Entity] = Field(default_factory=list)
