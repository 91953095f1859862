"""Declaration reader: Swift property declarations -> ``Declaration`` nodes.

Source is parsed with the tree-sitter Swift grammar; every
``property_declaration`` at file level or directly inside a type body is
read, for example::

    // sourcery: skipEquality
    public private(set) var count: Int = 0 {
        didSet { log(count) }
    }

A declaration with several bindings (``var a = 1, b = 2``) yields one
``Declaration`` per binding.  Destructuring patterns and declarations inside
function bodies are not read.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from functools import lru_cache

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from declscan.model.declarations import AccessorShape, BindingKind, Declaration
from declscan.model.types import AccessLevel

from ._initializers import parse_initializer

logger = logging.getLogger(__name__)


class DeclarationError(Exception):
    """A declaration is missing information the analysis requires."""

    def __init__(self, message: str, declaration_text: str | None = None):
        self.declaration_text = declaration_text
        loc = ""
        if declaration_text is not None:
            loc = f" (in {declaration_text!r})"
        super().__init__(f"{message}{loc}")


_VISIBILITY: dict[str, AccessLevel] = {
    "open": AccessLevel.OPEN,
    "public": AccessLevel.PUBLIC,
    "internal": AccessLevel.INTERNAL,
    "fileprivate": AccessLevel.FILEPRIVATE,
    "private": AccessLevel.PRIVATE,
}

_COMMENTS = frozenset({"comment", "multiline_comment"})

# Nodes whose children may hold member declarations.
_CONTAINERS = frozenset({"class_declaration", "class_body", "enum_class_body"})

# Accessors that give a computed property a write side.
_SETTERS = frozenset({"computed_setter", "computed_modify"})

# Named children of a binding that are not its initializer.
_NOT_VALUES = frozenset({"type_constraints"}) | _COMMENTS


@lru_cache(maxsize=1)
def _parser() -> Parser:
    return Parser(get_language("swift"))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def read_declaration(source: str) -> Declaration:
    """Read the first variable declaration in *source*."""
    declarations = read_declarations(source)
    if not declarations:
        raise DeclarationError("No variable declaration found", source.strip())
    return declarations[0]


def read_declarations(source: str) -> list[Declaration]:
    """Read every variable declaration in *source*, in source order."""
    data = source.encode("utf-8")
    tree = _parser().parse(data)
    if tree.root_node.has_error:
        logger.debug("Swift source has syntax errors; reading what parsed")

    lines = source.splitlines()
    declarations: list[Declaration] = []
    for node in _property_nodes(tree.root_node):
        declarations.extend(_read_property(node, _preceding_lines(node, lines)))
    return declarations


# ---------------------------------------------------------------------------
# Tree walking
# ---------------------------------------------------------------------------

def _property_nodes(node: Node) -> Iterator[Node]:
    for child in node.named_children:
        if child.type == "property_declaration":
            yield child
        elif child.type in _CONTAINERS:
            yield from _property_nodes(child)
        elif child.type not in _COMMENTS:
            logger.debug("Skipping %s at line %d", child.type, child.start_point[0] + 1)


def _preceding_lines(node: Node, lines: list[str]) -> list[str]:
    """Source lines between the previous code node and *node*.

    Comment siblings are passed over, so the result holds the comment and
    blank lines directly above the declaration.
    """
    first = 0
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in _COMMENTS:
        sibling = sibling.prev_sibling
    if sibling is not None:
        first = sibling.end_point[0] + 1
    elif node.parent is not None:
        first = node.parent.start_point[0]
    return lines[first:node.start_point[0]]


# ---------------------------------------------------------------------------
# Property declarations
# ---------------------------------------------------------------------------

class _Binding:
    """One ``name: Type = value { accessors }`` entry of a declaration."""

    def __init__(self, pattern: Node):
        self.pattern = pattern
        self.type_annotation: Node | None = None
        self.value: Node | None = None
        self.accessors: Node | None = None


def _read_property(node: Node, comments: list[str]) -> list[Declaration]:
    declaration_text = _text(node)
    binding_kind = BindingKind.VAR
    visibility = AccessLevel.INTERNAL
    setter_visibility: AccessLevel | None = None
    bindings: list[_Binding] = []

    for child in node.children:
        if child.type in _COMMENTS:
            continue
        if child.type == "modifiers":
            visibility, setter_visibility = _read_modifiers(child)
        elif child.type == "value_binding_pattern":
            if "let" in _text(child).split():
                binding_kind = BindingKind.LET
        elif child.type == "pattern":
            bindings.append(_Binding(child))
        elif not bindings:
            continue
        elif child.type == "type_annotation":
            bindings[-1].type_annotation = child
        elif child.type in ("computed_property", "willset_didset_block"):
            bindings[-1].accessors = child
        elif child.is_named and child.type not in _NOT_VALUES and bindings[-1].value is None:
            bindings[-1].value = child

    declarations: list[Declaration] = []
    for binding in bindings:
        name = _text(binding.pattern)
        if not _is_identifier(name):
            logger.debug("Skipping destructuring pattern %r", name)
            continue
        initializer_text = _text(binding.value) if binding.value is not None else None
        declarations.append(Declaration(
            name=name.strip("`"),
            declaration_text=declaration_text,
            binding=binding_kind,
            visibility=visibility,
            setter_visibility=setter_visibility,
            explicit_type=_explicit_type(binding.type_annotation),
            initializer_text=initializer_text,
            initializer=parse_initializer(initializer_text) if initializer_text else None,
            accessors=_accessor_shape(binding.accessors),
            preceding_comments=comments if not declarations else [],
        ))
    return declarations


def _read_modifiers(node: Node) -> tuple[AccessLevel, AccessLevel | None]:
    visibility = AccessLevel.INTERNAL
    setter_visibility: AccessLevel | None = None
    for child in node.named_children:
        if child.type != "visibility_modifier":
            logger.debug("Ignoring modifier %r", _text(child))
            continue
        text = "".join(_text(child).split())
        word, _, argument = text.partition("(")
        if word not in _VISIBILITY:
            logger.debug("Ignoring unknown visibility %r", text)
        elif argument == "set)":
            setter_visibility = _VISIBILITY[word]
        else:
            visibility = _VISIBILITY[word]
    return visibility, setter_visibility


def _explicit_type(node: Node | None) -> str | None:
    if node is None:
        return None
    return _text(node).removeprefix(":").strip() or None


def _accessor_shape(node: Node | None) -> AccessorShape:
    if node is None:
        return AccessorShape.NONE
    if node.type == "willset_didset_block":
        return AccessorShape.OBSERVERS_ONLY
    if any(child.type in _SETTERS for child in node.named_children):
        return AccessorShape.GETTER_AND_SETTER
    return AccessorShape.GETTER_ONLY


def _is_identifier(text: str) -> bool:
    return text.strip("`").replace("_", "a").isalnum()


def _text(node: Node) -> str:
    return node.text.decode("utf-8")
