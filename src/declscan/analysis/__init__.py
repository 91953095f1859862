"""declscan analysis: public API.

Everything needed to turn Swift variable declarations into ``Variable``
entities is importable from this namespace::

    from declscan.analysis import read_declaration, build_variable

    variable = build_variable(read_declaration("var count = [1, nil]"))
    variable.type_name.name  # "[Int?]"
"""

from ._config import (
    UNKNOWN_TYPE_TEMPLATE,
    AnalysisConfig,
    get_config,
)

from ._initializers import (
    parse_initializer,
)

from ._inference import (
    infer,
    infer_type_name,
    unknown_type_name,
)

from ._annotations import (
    parse_annotations,
    parse_annotation_line,
)

from ._declarations import (
    DeclarationError,
    read_declaration,
    read_declarations,
)

from ._builder import (
    build_variable,
    build_variables,
)

__all__ = [
    # Configuration
    "UNKNOWN_TYPE_TEMPLATE",
    "AnalysisConfig",
    "get_config",
    # Initializer shapes
    "parse_initializer",
    # Type inference
    "infer",
    "infer_type_name",
    "unknown_type_name",
    # Annotations
    "parse_annotations",
    "parse_annotation_line",
    # Declarations
    "DeclarationError",
    "read_declaration",
    "read_declarations",
    # Variables
    "build_variable",
    "build_variables",
]
