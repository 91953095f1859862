"""Type names and access levels for analysed declarations.

Two small concepts:
- TypeName: the canonical, rendered type of a variable (``Int``,
  ``[String: Int?]``, ``(Int, b: String)``).  Type names are plain strings
  wrapped in a model; no generic structure is resolved.
- AccessLevel / AccessPair: the read and write visibility of a variable.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


UNKNOWN_TYPE_PREFIX = "<<unknown type"


# ---------------------------------------------------------------------------
# Type names
# ---------------------------------------------------------------------------

class TypeName(BaseModel):
    """A canonical type-name string (e.g. ``[Int: String]``)."""

    model_config = ConfigDict(frozen=True)

    name: str

    @field_validator("name")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("type name must not be empty")
        return value

    def __str__(self) -> str:
        return self.name

    @property
    def is_implicitly_unwrapped_optional(self) -> bool:
        return self.name.endswith("!")

    @property
    def is_optional(self) -> bool:
        """``T?``, ``T!`` or ``Optional<T>``."""
        return (
            self.name.endswith("?")
            or self.is_implicitly_unwrapped_optional
            or (self.name.startswith("Optional<") and self.name.endswith(">"))
        )

    @property
    def unwrapped_type_name(self) -> str:
        """The type name with one level of optionality removed."""
        if self.name.endswith(("?", "!")):
            return self.name[:-1]
        if self.name.startswith("Optional<") and self.name.endswith(">"):
            return self.name[len("Optional<"):-1]
        return self.name

    @property
    def is_array(self) -> bool:
        name = self.unwrapped_type_name
        return _is_bracketed(name) and _top_level_colon(name[1:-1]) < 0

    @property
    def is_dictionary(self) -> bool:
        name = self.unwrapped_type_name
        return _is_bracketed(name) and _top_level_colon(name[1:-1]) >= 0

    @property
    def is_tuple(self) -> bool:
        name = self.unwrapped_type_name
        return name.startswith("(") and name.endswith(")")

    @property
    def is_unknown(self) -> bool:
        """True for the placeholder emitted when inference gave up."""
        return self.name.startswith(UNKNOWN_TYPE_PREFIX)


def _is_bracketed(name: str) -> bool:
    if not (name.startswith("[") and name.endswith("]")):
        return False
    depth = 0
    for i, ch in enumerate(name):
        if ch in "[(<":
            depth += 1
        elif ch in "])>" and not _is_arrow(name, i):
            depth -= 1
            if depth == 0 and i != len(name) - 1:
                # e.g. "[Int]?[...]": the opening bracket closes early
                return False
    return True


def _is_arrow(text: str, i: int) -> bool:
    return text[i] == ">" and i > 0 and text[i - 1] == "-"


def _top_level_colon(inner: str) -> int:
    """Index of the first ``:`` outside nested brackets, or -1."""
    depth = 0
    for i, ch in enumerate(inner):
        if ch in "[(<":
            depth += 1
        elif ch in "])>" and not _is_arrow(inner, i):
            depth -= 1
        elif ch == ":" and depth == 0:
            return i
    return -1


# ---------------------------------------------------------------------------
# Access levels
# ---------------------------------------------------------------------------

class AccessLevel(str, Enum):
    """Swift access modifiers, plus NONE for an absent accessor."""

    NONE = "none"
    PRIVATE = "private"
    FILEPRIVATE = "fileprivate"
    INTERNAL = "internal"
    PUBLIC = "public"
    OPEN = "open"


class AccessPair(BaseModel):
    """Read and write access of a variable.

    ``write`` is ``AccessLevel.NONE`` for immutable bindings and read-only
    computed properties.
    """

    model_config = ConfigDict(frozen=True)

    read: AccessLevel
    write: AccessLevel

    @property
    def readable(self) -> bool:
        return self.read != AccessLevel.NONE

    @property
    def writable(self) -> bool:
        return self.write != AccessLevel.NONE
