"""Variable entities produced by declaration analysis.

A Variable is built once per declaration and frozen afterwards; templates
consume it read-only.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from .annotations import Annotations
from .types import AccessPair, TypeName


class Variable(BaseModel):
    """A named, typed variable with its access levels and annotations."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: TypeName
    access_level: AccessPair
    is_computed: bool = False
    annotations: Annotations = {}
    default_value: str | None = None

    @field_validator("name")
    @classmethod
    def _non_empty_name(cls, value: str) -> str:
        if not value:
            raise ValueError("variable name must not be empty")
        return value

    @property
    def is_mutable(self) -> bool:
        return self.access_level.writable

    @property
    def annotation_values(self) -> dict[str, bool | int | str]:
        """Annotations as plain Python values, for template rendering."""
        return {key: value.value for key, value in self.annotations.items()}
