import logging

from conftest import attr
from headertranslator.translator.macros import UnexposedMacro


def test_macro_kinds():
    assert UnexposedMacro.parse(attr("NS_ENUM")) == UnexposedMacro.ENUM
    assert UnexposedMacro.parse(attr("CF_OPTIONS")) == UnexposedMacro.OPTIONS
    assert UnexposedMacro.parse(attr("NS_CLOSED_ENUM")) == UnexposedMacro.CLOSED_ENUM
    assert UnexposedMacro.parse(attr("NS_ERROR_ENUM")) == UnexposedMacro.ERROR_ENUM
    assert UnexposedMacro.parse(attr("NS_STRING_ENUM")) == UnexposedMacro.TYPED_ENUM
    assert UnexposedMacro.parse(attr("NS_EXTENSIBLE_STRING_ENUM")) == UnexposedMacro.TYPED_EXTENSIBLE_ENUM
    assert UnexposedMacro.parse(attr("NS_SWIFT_BRIDGED_TYPEDEF")) == UnexposedMacro.BRIDGED_TYPEDEF


def test_decorative_macros_are_ignored_quietly(caplog):
    with caplog.at_level(logging.WARNING):
        assert UnexposedMacro.parse(attr("NS_SWIFT_NAME")) is None
        assert UnexposedMacro.parse(attr("")) is None

    assert caplog.text == ""


def test_unknown_macro_is_a_warning(caplog):
    with caplog.at_level(logging.WARNING):
        assert UnexposedMacro.parse(attr("NS_SOMETHING_NEW")) is None

    assert "unknown macro NS_SOMETHING_NEW" in caplog.text
