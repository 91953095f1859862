"""Variable model builder: ``Declaration`` -> ``Variable``.

Decision table:

====================================  ===============  ===========
Declaration                           access (r, w)    is_computed
====================================  ===============  ===========
``let``                               (vis, none)      False
``var`` with getter only              (vis, none)      True
``var`` with getter and setter        (vis, vis)       True
``var`` stored, with/without observers (vis, vis)       False
====================================  ===============  ===========

``private``/``fileprivate`` declarations are filtered out (``None``).  A
``private(set)``-style modifier replaces the level of a present write side.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from declscan.model.declarations import AccessorShape, BindingKind, Declaration
from declscan.model.types import AccessLevel, AccessPair, TypeName
from declscan.model.variables import Variable

from ._annotations import parse_annotations
from ._config import AnalysisConfig, get_config
from ._declarations import DeclarationError
from ._inference import infer_type_name
from ._initializers import parse_initializer

logger = logging.getLogger(__name__)


def build_variable(
    declaration: Declaration,
    config: AnalysisConfig | None = None,
) -> Variable | None:
    """Build the Variable for *declaration*, or None if it is filtered out.

    Raises ``DeclarationError`` if the declaration has neither an explicit
    type nor an initializer.
    """
    config = config or get_config()

    if declaration.visibility in config.excluded_access_levels:
        logger.debug(
            "Skipping %s declaration %r",
            declaration.visibility.value, declaration.name,
        )
        return None

    access_level, is_computed = _classify(declaration)
    return Variable(
        name=declaration.name,
        type_name=_resolve_type(declaration, config),
        access_level=access_level,
        is_computed=is_computed,
        annotations=parse_annotations(declaration.preceding_comments, config),
        default_value=declaration.initializer_text,
    )


def build_variables(
    declarations: Iterable[Declaration],
    config: AnalysisConfig | None = None,
) -> list[Variable]:
    """Build Variables for *declarations*, dropping filtered ones."""
    variables: list[Variable] = []
    for declaration in declarations:
        variable = build_variable(declaration, config)
        if variable is not None:
            variables.append(variable)
    return variables


def _classify(declaration: Declaration) -> tuple[AccessPair, bool]:
    """Access pair and computed flag."""
    read = declaration.visibility
    write = declaration.setter_visibility or read

    if declaration.binding == BindingKind.LET:
        return AccessPair(read=read, write=AccessLevel.NONE), False
    if declaration.accessors == AccessorShape.GETTER_ONLY:
        return AccessPair(read=read, write=AccessLevel.NONE), True
    if declaration.accessors == AccessorShape.GETTER_AND_SETTER:
        return AccessPair(read=read, write=write), True
    return AccessPair(read=read, write=write), False


def _resolve_type(declaration: Declaration, config: AnalysisConfig) -> TypeName:
    if declaration.explicit_type:
        return TypeName(name=declaration.explicit_type)

    initializer = declaration.initializer
    if initializer is None and declaration.initializer_text:
        initializer = parse_initializer(declaration.initializer_text)
    if initializer is None:
        raise DeclarationError(
            f"Variable '{declaration.name}' has neither a type annotation "
            f"nor an initializer",
            declaration.declaration_text,
        )
    return infer_type_name(initializer, declaration.declaration_text, config)
