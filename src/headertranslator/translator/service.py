from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..config import Settings, TranslationConfig, load_translation_config
from ..frontend.base import FrontendRegistry
from ..frontend.dump import JsonDumpFrontend, YamlDumpFrontend, format_for
from ..models.entity import TranslationUnit
from ..models.statements import EnumDecl, Stmt
from .compare import compare_statement_lists
from .context import Context
from .dispatcher import parse_statements
from .errors import ConflictingMacroError
from .macros import UnexposedMacro
from .render import render_statements

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TranslationResult:
    unit: TranslationUnit
    statements: List[Stmt] = field(default_factory=list)
    text: str = ""


class TranslationService:
    def __init__(
        self,
        settings: Settings,
        registry: FrontendRegistry | None = None,
        config: TranslationConfig | None = None,
    ) -> None:
        self.settings = settings
        self.registry = registry or build_registry()
        self.config = config or load_translation_config(settings.overrides_path)

    # --- public API ---
    def load(self, path: Path) -> TranslationUnit:
        adapter = self.registry.get(format_for(path))
        return adapter.load(path.read_text(), path)

    def translate_unit(self, unit: TranslationUnit) -> List[Stmt]:
        context = self._context(unit)
        statements: List[Stmt] = []
        for entity in unit.entities:
            statements.extend(parse_statements(entity, context))
        _check_enum_kinds(statements)
        logger.info("%s: %d statements", unit.name, len(statements))
        return statements

    def render(self, statements: List[Stmt]) -> str:
        return render_statements(statements)

    def translate_file(self, path: Path) -> TranslationResult:
        unit = self.load(path)
        statements = self.translate_unit(unit)
        return TranslationResult(unit=unit, statements=statements, text=self.render(statements))

    def write(self, result: TranslationResult, name: Optional[str] = None) -> Path:
        output_dir = self.settings.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / f"{name or Path(result.unit.name).stem}.rs"
        target.write_text(result.text)
        logger.info("wrote %s", target)
        return target

    def verify(self, unit: TranslationUnit) -> List[Stmt]:
        """Translate twice and require structurally equal output."""
        first = self.translate_unit(unit)
        second = self.translate_unit(unit)
        compare_statement_lists(first, second)
        return first

    # --- helpers ---
    def _context(self, unit: TranslationUnit) -> Context:
        pointer_width = unit.pointer_width
        if "pointer_width" not in unit.model_fields_set:
            pointer_width = self.settings.pointer_width
        return Context(config=self.config, pointer_width=pointer_width)


def _check_enum_kinds(statements: List[Stmt]) -> None:
    """Every definition of one named enum must agree on its macro kind."""
    kinds: Dict[str, Optional[UnexposedMacro]] = {}
    for stmt in statements:
        if not isinstance(stmt, EnumDecl) or stmt.name is None:
            continue
        if stmt.name in kinds and kinds[stmt.name] != stmt.kind:
            previous = kinds[stmt.name]
            raise ConflictingMacroError(
                f"got differing macro kinds in enum {stmt.name}: "
                f"{previous.value if previous else 'none'} and "
                f"{stmt.kind.value if stmt.kind else 'none'}"
            )
        kinds[stmt.name] = stmt.kind


def build_registry() -> FrontendRegistry:
    registry = FrontendRegistry()
    registry.register(JsonDumpFrontend())
    registry.register(YamlDumpFrontend())
    return registry
