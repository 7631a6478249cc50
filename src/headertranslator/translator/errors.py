"""Fatal translation errors.

Each of these means the header and the translator disagree about what the
AST can look like; the run stops so that a human can look at it.
"""


class TranslationError(Exception):
    """Base class for conditions that abort a translation run."""


class UnknownEntityError(TranslationError):
    """A top-level declaration kind the dispatcher has no rule for."""


class MalformedEntityError(TranslationError):
    """An entity is missing a fact the front end always provides."""


class DuplicatePropertyError(TranslationError):
    """Two properties claim the same accessor selector."""


class UnsoundBitfieldError(TranslationError):
    """A struct field is declared as a bit-field."""


class DuplicateInitializerError(TranslationError):
    """A variable declaration carries more than one initializer expression."""


class ConflictingMacroError(TranslationError):
    """Differing macro-kind tags were seen on one declaration."""


class InvalidMacroKindError(TranslationError):
    """A statement carries a macro-kind tag its rendering does not accept."""


class StatementMismatchError(TranslationError):
    """Two statements expected to be equal differ."""
