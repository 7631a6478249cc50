from pathlib import Path

import pytest
from pydantic import ValidationError

from headertranslator.config import (
    DEFAULT_DERIVES,
    Ownership,
    Settings,
    load_settings,
    load_translation_config,
)


def test_load_settings_from_yaml(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "overrides_path: overrides.yaml\n"
        f"output_dir: {tmp_path / 'out'}\n"
        "pointer_width: 32\n"
        "log_level: DEBUG\n"
    )

    settings = load_settings(config_path)

    assert settings.overrides_path == Path("overrides.yaml").resolve()
    assert settings.output_dir == (tmp_path / "out").resolve()
    assert settings.pointer_width == 32
    assert settings.log_level == "DEBUG"


def test_settings_defaults():
    settings = Settings()

    assert settings.overrides_path is None
    assert settings.output_dir.name == "generated"
    assert settings.pointer_width == 64


def test_missing_override_table_is_empty(tmp_path):
    config = load_translation_config(tmp_path / "missing.yaml")

    assert config.class_("NSString").skipped is False
    assert config.enum(None).use_value is False
    assert load_translation_config(None).fn("NSLog").skipped is False


def test_override_table_lookups(tmp_path):
    path = tmp_path / "overrides.yaml"
    path.write_text(
        """
class:
  NSObject: {definition_skipped: true}
  NSString:
    derives: "Debug, PartialEq"
    ownership: Owned
    methods:
      init: {skipped: true}
      length: {unsafe: false}
protocol:
  NSCopying: {skipped: true}
struct: {CGRect: {skipped: true}}
enum:
  anonymous: {skipped: true}
  NSComparisonResult:
    use_value: true
    constants: {NSOrderedSame: {skipped: true}}
fn: {NSLog: {skipped: true}}
static: {NSFoo: {skipped: true}}
typedef: {NSZone: {skipped: true}}
"""
    )

    config = load_translation_config(path)

    assert config.class_("NSObject").definition_skipped is True
    string = config.class_("NSString")
    assert string.derives == "Debug, PartialEq"
    assert string.ownership == Ownership.OWNED
    assert string.method("init").skipped is True
    assert string.method("length").unsafe is False
    assert string.method("other").unsafe is True
    assert config.class_("NSArray").derives == DEFAULT_DERIVES
    assert config.protocol("NSCopying").skipped is True
    assert config.struct("CGRect").skipped is True
    assert config.enum(None).skipped is True
    enum = config.enum("NSComparisonResult")
    assert enum.use_value is True
    assert enum.constant("NSOrderedSame").skipped is True
    assert enum.constant("NSOrderedAscending").skipped is False
    assert config.fn("NSLog").skipped is True
    assert config.static("NSFoo").skipped is True
    assert config.typedef("NSZone").skipped is True


def test_override_table_rejects_unknown_keys(tmp_path):
    path = tmp_path / "overrides.yaml"
    path.write_text("class:\n  NSString: {skiped: true}\n")

    with pytest.raises(ValidationError):
        load_translation_config(path)
