"""Initializer reader: raw initializer text -> expression shape.

The text is parsed with a small ``lark`` grammar (``initializer.lark``)
covering literals, collection and tuple literals, type initializer calls
and casts.  The parse tree is then reduced by a dispatch table into the
closed ``Expression`` variant from ``declscan.model.expressions``.

Text outside the grammar is not an error: it becomes an ``OpaqueExpr``
holding the raw text, which type inference reports as unresolved.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from lark import Lark, Token, Tree
from lark.exceptions import LarkError

from declscan.model.expressions import (
    ArrayLiteral,
    BoolLiteral,
    CastExpr,
    CastMode,
    DictionaryEntry,
    DictionaryLiteral,
    Expression,
    FloatLiteral,
    InitializerCall,
    IntLiteral,
    NilLiteral,
    OpaqueExpr,
    StringLiteral,
    TupleElement,
    TupleLiteral,
)

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("initializer.lark")

_PARSER = Lark(
    _GRAMMAR_PATH.read_text(),
    parser="earley",
    lexer="basic",
    start="start",
    propagate_positions=True,
    maybe_placeholders=False,
)


def parse_initializer(text: str) -> Expression:
    """Parse an initializer expression into its shape."""
    source = text.strip()
    if not source:
        return OpaqueExpr(text=text)
    try:
        tree = _PARSER.parse(source)
    except LarkError as e:
        logger.debug("Initializer %r is outside the literal grammar: %s", source, e)
        return OpaqueExpr(text=source)
    return _ShapeBuilder(source).build(tree)


def _children(tree: Tree) -> list[Tree | Token]:
    return list(tree.children)


def _trees(tree: Tree) -> list[Tree]:
    return [c for c in tree.children if isinstance(c, Tree)]


class _ShapeBuilder:
    """Dispatch-table reducer from lark parse trees to expression shapes."""

    def __init__(self, source: str) -> None:
        self.source = source
        self._dispatch: dict[str, Callable[[Tree], Expression]] = {
            "int_literal": self._int_literal,
            "float_literal": self._float_literal,
            "string_literal": self._string_literal,
            "bool_literal": self._bool_literal,
            "nil_literal": self._nil_literal,
            "empty_array": self._empty_array,
            "empty_dictionary": self._empty_dictionary,
            "array": self._array,
            "dictionary": self._dictionary,
            "tuple": self._tuple,
            "call": self._call,
            "cast": self._cast,
        }

    def build(self, tree: Tree) -> Expression:
        handler = self._dispatch.get(str(tree.data))
        if handler is None:
            return OpaqueExpr(text=self._text(tree))
        return handler(tree)

    def _text(self, tree: Tree) -> str:
        meta = tree.meta
        if meta.empty:
            return self.source
        return self.source[meta.start_pos:meta.end_pos]

    # -- Scalars -------------------------------------------------------------

    def _int_literal(self, tree: Tree) -> Expression:
        return IntLiteral(text=str(tree.children[0]))

    def _float_literal(self, tree: Tree) -> Expression:
        return FloatLiteral(text=str(tree.children[0]))

    def _string_literal(self, tree: Tree) -> Expression:
        return StringLiteral(text=str(tree.children[0]))

    def _bool_literal(self, tree: Tree) -> Expression:
        token = tree.children[0]
        return BoolLiteral(value=token.type == "TRUE")

    def _nil_literal(self, tree: Tree) -> Expression:
        return NilLiteral()

    # -- Collections ---------------------------------------------------------

    def _empty_array(self, tree: Tree) -> Expression:
        return ArrayLiteral()

    def _empty_dictionary(self, tree: Tree) -> Expression:
        return DictionaryLiteral()

    def _array(self, tree: Tree) -> Expression:
        return ArrayLiteral(elements=[self.build(c) for c in _trees(tree)])

    def _dictionary(self, tree: Tree) -> Expression:
        entries = []
        for entry in _trees(tree):
            key, value = _trees(entry)
            entries.append(DictionaryEntry(key=self.build(key), value=self.build(value)))
        return DictionaryLiteral(entries=entries)

    def _tuple(self, tree: Tree) -> Expression:
        elements = [self._element(e) for e in _trees(tree)]
        if len(elements) == 1 and elements[0].label is None:
            # Parenthesized expression, not a tuple
            return elements[0].value
        return TupleLiteral(elements=elements)

    def _element(self, tree: Tree) -> TupleElement:
        children = _children(tree)
        if len(children) == 2:
            return TupleElement(label=str(children[0]), value=self.build(children[1]))
        return TupleElement(value=self.build(children[0]))

    # -- Calls and casts -----------------------------------------------------

    def _call(self, tree: Tree) -> Expression:
        callee = tree.children[0]

        # [T]() and [K: V]()
        if callee.data == "array" and len(_trees(callee)) == 1:
            element_type = _type_text(_trees(callee)[0])
            if element_type is not None:
                return ArrayLiteral(element_type=element_type)
        if callee.data == "dictionary" and len(_trees(callee)) == 1:
            key, value = _trees(_trees(callee)[0])
            key_type, value_type = _type_text(key), _type_text(value)
            if key_type is not None and value_type is not None:
                return DictionaryLiteral(key_type=key_type, value_type=value_type)

        # Type(...) and Type.init(...)
        if callee.data == "member" and str(callee.children[1]) == "init":
            callee = callee.children[0]
        if _is_type_reference(callee):
            type_path = _type_text(callee)
            if type_path is not None:
                return InitializerCall(type_path=type_path)

        return OpaqueExpr(text=self._text(tree))

    def _cast(self, tree: Tree) -> Expression:
        operand, op, target = tree.children
        target_type = _type_text(target)
        if target_type is None:
            target_type = self._text(target)
        return CastExpr(
            operand=self.build(operand),
            target_type=target_type,
            mode=CastMode(str(op)),
        )


# ---------------------------------------------------------------------------
# Type spelling
# ---------------------------------------------------------------------------

def _is_type_reference(tree: Tree) -> bool:
    """``Foo``, ``Foo.Bar``, ``Foo<Int>``: every component capitalised."""
    if tree.data == "name":
        return str(tree.children[0])[:1].isupper()
    if tree.data == "member":
        base, name = tree.children
        return _is_type_reference(base) and str(name)[:1].isupper()
    if tree.data == "specialize":
        return _is_type_reference(tree.children[0])
    return False


def _type_text(tree: Tree) -> str | None:
    """Canonical spelling of a type written in expression position.

    Returns None when the subtree cannot be read as a type.
    """
    kind = tree.data
    if kind == "name":
        return str(tree.children[0])
    if kind == "member":
        base = _type_text(tree.children[0])
        return None if base is None else f"{base}.{tree.children[1]}"
    if kind == "specialize":
        base = _type_text(tree.children[0])
        args = [_type_text(t) for t in _trees(tree.children[1])]
        if base is None or None in args:
            return None
        return f"{base}<{', '.join(args)}>"
    if kind in ("optional", "forced"):
        base = _type_text(tree.children[0])
        suffix = "?" if kind == "optional" else "!"
        return None if base is None else base + suffix
    if kind == "array":
        elements = _trees(tree)
        if len(elements) != 1:
            return None
        element = _type_text(elements[0])
        return None if element is None else f"[{element}]"
    if kind == "dictionary":
        entries = _trees(tree)
        if len(entries) != 1:
            return None
        key, value = (_type_text(t) for t in _trees(entries[0]))
        if key is None or value is None:
            return None
        return f"[{key}: {value}]"
    if kind == "tuple":
        parts = []
        for element in _trees(tree):
            children = _children(element)
            inner = _type_text(children[-1])
            if inner is None:
                return None
            label = str(children[0]) if len(children) == 2 else None
            parts.append(inner if label in (None, "_") else f"{label}: {inner}")
        if len(parts) == 1 and len(_children(_trees(tree)[0])) == 1:
            return parts[0]
        return f"({', '.join(parts)})"
    return None
