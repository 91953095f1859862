"""Shared test helpers for the declscan test suite."""

import textwrap

from declscan.analysis import build_variable, infer, read_declaration
from declscan.model.types import AccessLevel, AccessPair, TypeName
from declscan.model.variables import Variable


def parse(source: str) -> Variable | None:
    """Read and build the first declaration in *source*."""
    return build_variable(read_declaration(textwrap.dedent(source)))


def infer_name(initializer: str) -> str:
    """Inferred type name of ``var name = <initializer>``."""
    return infer(initializer, f"var name = {initializer}").name


def unknown(declaration: str) -> str:
    """The placeholder type name for an unresolvable declaration."""
    return (
        "<<unknown type, please add type attribution to variable "
        f"'{declaration}'>>"
    )


def tname(name: str) -> TypeName:
    """Shorthand for TypeName(name=name)."""
    return TypeName(name=name)


def access(read: AccessLevel = AccessLevel.INTERNAL, write: AccessLevel = AccessLevel.INTERNAL) -> AccessPair:
    """Shorthand for AccessPair(read=read, write=write)."""
    return AccessPair(read=read, write=write)
