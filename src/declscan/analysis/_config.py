"""Analysis configuration.

Defaults match the ``// sourcery:`` annotation convention.  Values can be
overridden per call (``build_variable(decl, config=AnalysisConfig(...))``)
or through the environment::

    DECLSCAN_ANNOTATION_PREFIX="codegen:"
    DECLSCAN_EXCLUDED_ACCESS_LEVELS='["private"]'
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from declscan.model.types import AccessLevel


UNKNOWN_TYPE_TEMPLATE = (
    "<<unknown type, please add type attribution to variable '{declaration}'>>"
)


class AnalysisConfig(BaseSettings):
    """Settings for declaration analysis."""

    model_config = SettingsConfigDict(
        env_prefix="DECLSCAN_",
        case_sensitive=False,
        frozen=True,
    )

    annotation_prefix: str = "sourcery:"
    """Marker that turns a ``//`` comment into an annotation line"""

    unknown_type_template: str = UNKNOWN_TYPE_TEMPLATE
    """Placeholder type name for initializers that cannot be inferred"""

    excluded_access_levels: list[AccessLevel] = Field(
        default_factory=lambda: [AccessLevel.PRIVATE, AccessLevel.FILEPRIVATE],
    )
    """Declarations with these visibilities produce no Variable"""

    @field_validator("annotation_prefix")
    @classmethod
    def _prefix_non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("annotation_prefix must not be empty")
        return value.strip()

    @field_validator("unknown_type_template")
    @classmethod
    def _template_has_placeholder(cls, value: str) -> str:
        if "{declaration}" not in value:
            raise ValueError(
                "unknown_type_template must contain a '{declaration}' placeholder"
            )
        return value


@lru_cache(maxsize=1)
def get_config() -> AnalysisConfig:
    """Process-wide default configuration.

    Cached after the first call; call ``get_config.cache_clear()`` to
    re-read the environment.
    """
    return AnalysisConfig()
