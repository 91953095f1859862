"""Literal type inference for declarations without an explicit type.

Inference is deliberately conservative: only the literal grammar below is
understood, and anything else yields a visible placeholder type name that
embeds the declaration text instead of a guess.

=========================  ==========================================
Initializer                Inferred type
=========================  ==========================================
``1``                      ``Int``
``1.0``                    ``Double``
``"1"``                    ``String``
``true`` / ``false``       ``Bool``
``nil``                    ``Optional``
``Foo.Bar()``              ``Foo.Bar`` (also ``Foo.Bar.init()``)
``[1, nil]``               ``[Int?]``
``[1: "a", 2: 3]``         ``[Int: Any]``
``(1, b: "x")``            ``(Int, b: String)``
``x as? Foo``              ``Foo?``
=========================  ==========================================
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from declscan.model.expressions import (
    ArrayLiteral,
    BoolLiteral,
    CastExpr,
    CastMode,
    DictionaryLiteral,
    Expression,
    FloatLiteral,
    InitializerCall,
    IntLiteral,
    NilLiteral,
    StringLiteral,
    TupleLiteral,
)
from declscan.model.types import TypeName

from ._config import AnalysisConfig, get_config
from ._initializers import parse_initializer

logger = logging.getLogger(__name__)


def infer(
    initializer_text: str,
    declaration_text: str,
    config: AnalysisConfig | None = None,
) -> TypeName:
    """Infer the type of a raw initializer expression."""
    return infer_type_name(parse_initializer(initializer_text), declaration_text, config)


def infer_type_name(
    expression: Expression,
    declaration_text: str,
    config: AnalysisConfig | None = None,
) -> TypeName:
    """Infer the type of an initializer shape.

    Returns the unresolved placeholder (see ``unknown_type_name``) when the
    shape falls outside the literal grammar.
    """
    name = _infer(expression)
    if name is None:
        logger.warning(
            "Cannot infer type of %r; add an explicit type annotation",
            declaration_text,
        )
        return unknown_type_name(declaration_text, config)
    return TypeName(name=name)


def unknown_type_name(declaration_text: str, config: AnalysisConfig | None = None) -> TypeName:
    """Placeholder type name embedding the verbatim declaration."""
    config = config or get_config()
    return TypeName(
        name=config.unknown_type_template.replace("{declaration}", declaration_text)
    )


# ---------------------------------------------------------------------------
# Recursive inference
# ---------------------------------------------------------------------------

_SCALARS: dict[type, str] = {
    IntLiteral: "Int",
    FloatLiteral: "Double",
    StringLiteral: "String",
    BoolLiteral: "Bool",
    NilLiteral: "Optional",
}


def _infer(expr: Expression) -> str | None:
    """Type name of *expr*, or None when unresolved."""
    scalar = _SCALARS.get(type(expr))
    if scalar is not None:
        return scalar

    if isinstance(expr, InitializerCall):
        return expr.type_path

    if isinstance(expr, ArrayLiteral):
        if expr.element_type is not None:
            return f"[{expr.element_type}]"
        element = _merge(expr.elements)
        return None if element is None else f"[{element}]"

    if isinstance(expr, DictionaryLiteral):
        if expr.key_type is not None and expr.value_type is not None:
            return f"[{expr.key_type}: {expr.value_type}]"
        key = _merge(e.key for e in expr.entries)
        value = _merge(e.value for e in expr.entries)
        if key is None or value is None:
            return None
        return f"[{key}: {value}]"

    if isinstance(expr, TupleLiteral):
        parts: list[str] = []
        for element in expr.elements:
            inner = _infer(element.value)
            if inner is None:
                return None
            if element.label is None or element.label == "_":
                parts.append(inner)
            else:
                parts.append(f"{element.label}: {inner}")
        return f"({', '.join(parts)})"

    if isinstance(expr, CastExpr):
        if expr.mode == CastMode.OPTIONAL:
            return _optional(expr.target_type)
        return expr.target_type

    # OpaqueExpr
    return None


def _merge(elements: Iterable[Expression]) -> str | None:
    """Merge element types of a collection literal.

    All elements the same type ``T`` -> ``T``; same type plus ``nil`` ->
    ``T?``; two or more distinct types -> ``Any``.  An empty collection or
    an unresolved element gives None.
    """
    distinct: list[str] = []
    saw_nil = False
    for element in elements:
        if isinstance(element, NilLiteral):
            saw_nil = True
            continue
        name = _infer(element)
        if name is None:
            return None
        if name not in distinct:
            distinct.append(name)

    if not distinct:
        return "Optional" if saw_nil else None
    if len(distinct) > 1:
        return "Any"
    return _optional(distinct[0]) if saw_nil else distinct[0]


def _optional(name: str) -> str:
    if TypeName(name=name).is_optional:
        return name
    return f"{name}?"
