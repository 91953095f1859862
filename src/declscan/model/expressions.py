"""Initializer expression shapes.

An initializer is reduced to one of a closed set of shapes before type
inference runs.  Anything outside the supported literal grammar is kept as
an ``OpaqueExpr`` carrying its raw text.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class IntLiteral(BaseModel):
    """Integer literal (``42``, ``-3``, ``0xFF``, ``1_000``)."""

    kind: Literal["int"] = "int"
    text: str


class FloatLiteral(BaseModel):
    """Floating-point literal (``1.0``, ``2e10``)."""

    kind: Literal["float"] = "float"
    text: str


class StringLiteral(BaseModel):
    kind: Literal["string"] = "string"
    text: str


class BoolLiteral(BaseModel):
    kind: Literal["bool"] = "bool"
    value: bool


class NilLiteral(BaseModel):
    kind: Literal["nil"] = "nil"


class InitializerCall(BaseModel):
    """``Type()``, ``Module.Type(x: 1)`` or ``Type.init()``.

    *type_path* is the dotted type path with any trailing ``.init`` removed.
    """

    kind: Literal["initializer_call"] = "initializer_call"
    type_path: str


class ArrayLiteral(BaseModel):
    """``[e0, e1, ...]``, or the typed empty form ``[T]()``.

    *element_type* is set only when the literal spells its element type.
    """

    kind: Literal["array"] = "array"
    elements: list[Expression] = []
    element_type: str | None = None


class DictionaryEntry(BaseModel):
    key: Expression
    value: Expression


class DictionaryLiteral(BaseModel):
    """``[k0: v0, ...]``, or the typed empty form ``[K: V]()``."""

    kind: Literal["dictionary"] = "dictionary"
    entries: list[DictionaryEntry] = []
    key_type: str | None = None
    value_type: str | None = None


class TupleElement(BaseModel):
    """A tuple element.  *label* is None for unlabeled elements."""

    label: str | None = None
    value: Expression


class TupleLiteral(BaseModel):
    kind: Literal["tuple"] = "tuple"
    elements: list[TupleElement]


class CastMode(str, Enum):
    PLAIN = "as"
    OPTIONAL = "as?"
    FORCED = "as!"


class CastExpr(BaseModel):
    """``expr as T``, ``expr as? T`` or ``expr as! T``."""

    kind: Literal["cast"] = "cast"
    operand: Expression
    target_type: str
    mode: CastMode = CastMode.PLAIN


class OpaqueExpr(BaseModel):
    """Any expression outside the literal grammar (member access, calls...)."""

    kind: Literal["opaque"] = "opaque"
    text: str


Expression = Annotated[
    Union[
        IntLiteral,
        FloatLiteral,
        StringLiteral,
        BoolLiteral,
        NilLiteral,
        InitializerCall,
        ArrayLiteral,
        DictionaryLiteral,
        TupleLiteral,
        CastExpr,
        OpaqueExpr,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
ArrayLiteral.model_rebuild()
DictionaryEntry.model_rebuild()
DictionaryLiteral.model_rebuild()
TupleElement.model_rebuild()
TupleLiteral.model_rebuild()
CastExpr.model_rebuild()
