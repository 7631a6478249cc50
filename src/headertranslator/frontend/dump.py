"""Loaders for AST dumps produced by an external C-family front end.

A dump is one JSON or YAML document shaped like ``TranslationUnit``::

    name: Foundation/NSObject.h
    pointer_width: 64
    entities:
      - kind: ObjCInterfaceDecl
        name: NSObject
        children: [...]
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from ..models.entity import TranslationUnit
from .base import FrontendAdapter

logger = logging.getLogger(__name__)

SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def _validate(data: Any, path: Path) -> TranslationUnit:
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level of the dump")
    data.setdefault("name", path.stem)
    try:
        unit = TranslationUnit.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"{path}: invalid AST dump\n{exc}") from exc
    logger.debug("loaded %d entities from %s", len(unit.entities), path)
    return unit


class JsonDumpFrontend(FrontendAdapter):
    format = "json"

    def load(self, source: str, path: Path) -> TranslationUnit:
        try:
            data: Dict[str, Any] = json.loads(source)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}: not valid JSON: {exc}") from exc
        return _validate(data, path)


class YamlDumpFrontend(FrontendAdapter):
    format = "yaml"

    def load(self, source: str, path: Path) -> TranslationUnit:
        try:
            data = yaml.safe_load(source)
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: not valid YAML: {exc}") from exc
        return _validate(data or {}, path)


def format_for(path: Path) -> str:
    try:
        return SUFFIX_FORMATS[path.suffix.lower()]
    except KeyError as exc:
        raise ValueError(f"Unsupported dump format for {path}") from exc


def frontend_for(path: Path) -> FrontendAdapter:
    """Pick a loader for ``path`` by its file suffix."""
    frontends = {"json": JsonDumpFrontend, "yaml": YamlDumpFrontend}
    return frontends[format_for(path)]()
