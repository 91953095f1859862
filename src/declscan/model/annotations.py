"""Annotation values attached to variables.

Annotations come from ``// sourcery: key = value`` comments.  A value is
one of three tagged kinds so consumers can dispatch on ``kind`` instead of
probing Python types.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class BoolValue(BaseModel):
    """A bare ``key`` (always ``True``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bool"] = "bool"
    value: bool = True


class NumberValue(BaseModel):
    """A signed integer (``key = -3``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: int


class StringValue(BaseModel):
    """A quoted string with quotes stripped, or any other raw token."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str


AnnotationValue = Annotated[
    Union[BoolValue, NumberValue, StringValue],
    Field(discriminator="kind"),
]

Annotations = dict[str, AnnotationValue]
