"""Declaration nodes: the syntactic input of variable analysis.

A ``Declaration`` describes one ``let``/``var`` statement as a structure
extractor sees it.  It carries raw text only; nothing here is inferred.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .expressions import Expression
from .types import AccessLevel


class BindingKind(str, Enum):
    LET = "let"
    VAR = "var"


class AccessorShape(str, Enum):
    """Which accessor blocks follow the declaration."""

    NONE = "none"
    GETTER_ONLY = "getter_only"
    GETTER_AND_SETTER = "getter_and_setter"
    OBSERVERS_ONLY = "observers_only"


class Declaration(BaseModel):
    """One variable or property declaration.

    ``preceding_comments`` holds the raw source lines above the declaration,
    in source order (nearest line last).  ``initializer`` is the structured
    shape of ``initializer_text`` when the producer already parsed it.
    """

    name: str
    declaration_text: str
    binding: BindingKind = BindingKind.VAR
    visibility: AccessLevel = AccessLevel.INTERNAL
    setter_visibility: AccessLevel | None = None
    explicit_type: str | None = None
    initializer_text: str | None = None
    initializer: Expression | None = None
    accessors: AccessorShape = AccessorShape.NONE
    preceding_comments: list[str] = []
