"""Configuration for header-translator.

Two layers:
- Settings: how a run is performed (override table location, output directory,
  log level), read from config.yaml
- TranslationConfig: per-declaration overrides (skip flags, derives, ownership,
  enum constant handling), read from the override YAML once before translating
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DERIVES = "Debug, PartialEq, Eq, Hash"


class Settings(BaseModel):
    """header-translator settings."""

    overrides_path: Optional[Path] = Field(
        default=None,
        description="Path to the per-declaration override YAML"
    )
    output_dir: Path = Field(
        default_factory=lambda: Path("generated").resolve(),
        description="Directory generated binding files are written to"
    )
    pointer_width: int = Field(
        default=64,
        description="Target pointer width used when a dump does not state one"
    )
    log_level: str = "WARNING"

    @field_validator("overrides_path", "output_dir", mode="before")
    def _coerce_path(cls, value: str | Path | None) -> Optional[Path]:
        if value is None:
            return None
        return Path(value).expanduser().resolve()


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load configuration from YAML if provided, otherwise use defaults."""
    path = config_path or Path(__file__).resolve().parent.parent.parent / "config.yaml"
    if path.exists():
        data = yaml.safe_load(path.read_text()) or {}
    else:
        data = {}
    return Settings(**data)


class Ownership(str, Enum):
    SHARED = "Shared"
    OWNED = "Owned"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class MethodData(_Frozen):
    skipped: bool = False
    unsafe: bool = True


class ClassData(_Frozen):
    skipped: bool = False
    definition_skipped: bool = False
    derives: str = DEFAULT_DERIVES
    ownership: Ownership = Ownership.SHARED
    methods: Dict[str, MethodData] = Field(default_factory=dict)

    def method(self, name: str) -> MethodData:
        return self.methods.get(name, DEFAULT_METHOD)


class StructData(_Frozen):
    skipped: bool = False


class EnumConstantData(_Frozen):
    skipped: bool = False


class EnumData(_Frozen):
    skipped: bool = False
    use_value: bool = False
    constants: Dict[str, EnumConstantData] = Field(default_factory=dict)

    def constant(self, name: str) -> EnumConstantData:
        return self.constants.get(name, DEFAULT_ENUM_CONSTANT)


class FnData(_Frozen):
    skipped: bool = False


class StaticData(_Frozen):
    skipped: bool = False


class TypedefData(_Frozen):
    skipped: bool = False


DEFAULT_METHOD = MethodData()
DEFAULT_CLASS = ClassData()
DEFAULT_STRUCT = StructData()
DEFAULT_ENUM = EnumData()
DEFAULT_ENUM_CONSTANT = EnumConstantData()
DEFAULT_FN = FnData()
DEFAULT_STATIC = StaticData()
DEFAULT_TYPEDEF = TypedefData()


class TranslationConfig(_Frozen):
    """Read-only override table keyed by declaration name."""

    class_data: Dict[str, ClassData] = Field(default_factory=dict, alias="class")
    protocol_data: Dict[str, ClassData] = Field(default_factory=dict, alias="protocol")
    struct_data: Dict[str, StructData] = Field(default_factory=dict, alias="struct")
    enum_data: Dict[str, EnumData] = Field(default_factory=dict, alias="enum")
    fns: Dict[str, FnData] = Field(default_factory=dict, alias="fn")
    statics: Dict[str, StaticData] = Field(default_factory=dict, alias="static")
    typedef_data: Dict[str, TypedefData] = Field(default_factory=dict, alias="typedef")

    def class_(self, name: str) -> ClassData:
        return self.class_data.get(name, DEFAULT_CLASS)

    def protocol(self, name: str) -> ClassData:
        return self.protocol_data.get(name, DEFAULT_CLASS)

    def struct(self, name: str) -> StructData:
        return self.struct_data.get(name, DEFAULT_STRUCT)

    def enum(self, name: Optional[str]) -> EnumData:
        return self.enum_data.get(name or "anonymous", DEFAULT_ENUM)

    def fn(self, name: str) -> FnData:
        return self.fns.get(name, DEFAULT_FN)

    def static(self, name: str) -> StaticData:
        return self.statics.get(name, DEFAULT_STATIC)

    def typedef(self, name: str) -> TypedefData:
        return self.typedef_data.get(name, DEFAULT_TYPEDEF)


def load_translation_config(path: Optional[Path] = None) -> TranslationConfig:
    """Load the override table; a missing path yields an empty table."""
    if path is None or not path.exists():
        return TranslationConfig()
    data = yaml.safe_load(path.read_text()) or {}
    return TranslationConfig.model_validate(data)
