"""Tests for building Variables from declarations (end to end)."""

import logging

import pytest

from conftest import access, parse, tname, unknown

from declscan.analysis import (
    AnalysisConfig,
    DeclarationError,
    build_variable,
    build_variables,
    read_declarations,
)
from declscan.model.annotations import BoolValue, NumberValue, StringValue
from declscan.model.declarations import AccessorShape, BindingKind, Declaration
from declscan.model.expressions import IntLiteral
from declscan.model.types import AccessLevel
from declscan.model.variables import Variable

NONE = AccessLevel.NONE


# ---------------------------------------------------------------------------
# Visibility filter
# ---------------------------------------------------------------------------

class TestVisibilityFilter:
    def test_private_ignored(self):
        assert parse("private var name: String") is None

    def test_fileprivate_ignored(self):
        assert parse("fileprivate var name: String") is None

    def test_filter_wins_over_missing_type(self):
        # Filtered before type resolution, so no contract error
        decl = Declaration(name="x", declaration_text="private var x", visibility=AccessLevel.PRIVATE)
        assert build_variable(decl) is None

    def test_filtered_declaration_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="declscan.analysis._builder"):
            parse("private let secret = 1")
        assert "secret" in caplog.text

    def test_custom_excluded_levels(self):
        config = AnalysisConfig(excluded_access_levels=[AccessLevel.PRIVATE])
        decl = Declaration(
            name="name",
            declaration_text="fileprivate var name: Int",
            visibility=AccessLevel.FILEPRIVATE,
            explicit_type="Int",
        )
        assert build_variable(decl, config).access_level.read == AccessLevel.FILEPRIVATE

    def test_public_kept(self):
        assert parse("public var name: String").access_level == access(AccessLevel.PUBLIC, AccessLevel.PUBLIC)


# ---------------------------------------------------------------------------
# Mutability and computed properties
# ---------------------------------------------------------------------------

class TestClassification:
    def test_standard_property(self):
        assert parse("var name: String") == Variable(
            name="name",
            type_name=tname("String"),
            access_level=access(),
            is_computed=False,
        )

    def test_let_property(self):
        assert parse("let name: String") == Variable(
            name="name",
            type_name=tname("String"),
            access_level=access(write=NONE),
            is_computed=False,
        )

    def test_computed_property(self):
        assert parse("var name: Int { return 2 }") == Variable(
            name="name",
            type_name=tname("Int"),
            access_level=access(write=NONE),
            is_computed=True,
        )

    def test_generic_property(self):
        assert parse("let name: Observable<Int>") == Variable(
            name="name",
            type_name=tname("Observable<Int>"),
            access_level=access(write=NONE),
            is_computed=False,
        )

    def test_property_with_observers(self):
        source = "var name: Int? {\ndidSet { _ = 2 }\nwillSet { _ = 4 }\n}"
        assert parse(source) == Variable(
            name="name",
            type_name=tname("Int?"),
            access_level=access(),
            is_computed=False,
        )

    def test_computed_with_setter(self):
        var = parse("var name: Int { get { return 1 } set { } }")
        assert var.access_level == access()
        assert var.is_computed is True
        assert var.is_mutable

    def test_private_setter(self):
        var = parse("public private(set) var name: Int = 0")
        assert var.access_level == access(AccessLevel.PUBLIC, AccessLevel.PRIVATE)
        assert var.is_mutable

    def test_private_setter_on_let_has_no_write(self):
        var = parse("private(set) let name: Int")
        assert var.access_level.write == NONE

    def test_private_setter_on_read_only_computed_has_no_write(self):
        var = parse("public private(set) var name: Int { return 1 }")
        assert var.access_level == access(AccessLevel.PUBLIC, NONE)

    def test_let_is_immutable(self):
        assert not parse("let name = 1").is_mutable


# ---------------------------------------------------------------------------
# Type resolution
# ---------------------------------------------------------------------------

class TestTypeResolution:
    def test_default_initializer(self):
        assert parse("var name = String()").type_name == tname("String")
        assert parse("var name = Parent.Children.init()").type_name == tname("Parent.Children")

    def test_explicit_type_wins(self):
        assert parse("var name: String? = String()").type_name == tname("String?")
        assert parse("var name: Double = 1").type_name == tname("Double")

    def test_literals(self):
        assert parse("var name = 1").type_name == tname("Int")
        assert parse("var name = 1.0").type_name == tname("Double")
        assert parse('var name = "1"').type_name == tname("String")
        assert parse("var name = true").type_name == tname("Bool")
        assert parse("var name = nil").type_name == tname("Optional")

    def test_unknown_types(self):
        assert parse("var name = Optional.none").type_name == tname(unknown("var name = Optional.none"))
        assert parse("var name = Optional.some(1)").type_name == tname(unknown("var name = Optional.some(1)"))

    def test_collections(self):
        assert parse("var name = [1, nil]").type_name == tname("[Int?]")
        assert parse("var name = [1: 1, 2: nil]").type_name == tname("[Int: Int?]")
        assert parse('var name = (1, b: "x", c: 1)').type_name == tname("(Int, b: String, c: Int)")

    def test_default_value_recorded(self):
        assert parse("var name = [1, 2]").default_value == "[1, 2]"
        assert parse("var name: Int").default_value is None

    def test_initializer_text_without_shape(self):
        decl = Declaration(name="n", declaration_text="var n = [1]", initializer_text="[1]")
        assert build_variable(decl).type_name == tname("[Int]")

    def test_shape_without_text(self):
        decl = Declaration(name="n", declaration_text="var n = 1", initializer=IntLiteral(text="1"))
        assert build_variable(decl).type_name == tname("Int")

    def test_missing_type_and_initializer_raises(self):
        decl = Declaration(name="name", declaration_text="var name")
        with pytest.raises(DeclarationError, match="neither a type annotation nor an initializer"):
            build_variable(decl)

    def test_error_carries_declaration_text(self):
        decl = Declaration(name="name", declaration_text="var name")
        with pytest.raises(DeclarationError) as info:
            build_variable(decl)
        assert info.value.declaration_text == "var name"


# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------

class TestAnnotations:
    def test_single_annotation(self):
        var = parse("// sourcery: skipEquability\nvar name: Int { return 2 }")
        assert var == Variable(
            name="name",
            type_name=tname("Int"),
            access_level=access(write=NONE),
            is_computed=True,
            annotations={"skipEquability": BoolValue(value=True)},
        )

    def test_multiple_annotations_on_same_line(self):
        var = parse('// sourcery: skipEquability, jsonKey = "json_key"\nvar name: Int { return 2 }')
        assert var.annotations == {
            "skipEquability": BoolValue(value=True),
            "jsonKey": StringValue(value="json_key"),
        }

    def test_multi_line_annotations_including_numbers(self):
        var = parse(
            '// sourcery: skipEquability, jsonKey = "json_key"\n'
            "// sourcery: thirdProperty = -3\n"
            "var name: Int { return 2 }"
        )
        assert var.annotations == {
            "skipEquability": BoolValue(value=True),
            "jsonKey": StringValue(value="json_key"),
            "thirdProperty": NumberValue(value=-3),
        }

    def test_annotations_interleaved_with_comments(self):
        var = parse(
            "// sourcery: isSet\n"
            "/// isSet is used for something useful\n"
            "// sourcery: numberOfIterations = 2\n"
            "var name: Int { return 2 }"
        )
        assert var.annotations == {
            "isSet": BoolValue(value=True),
            "numberOfIterations": NumberValue(value=2),
        }

    def test_stops_at_blank_line(self):
        var = parse(
            "// sourcery: isSet\n"
            "\n"
            "// sourcery: numberOfIterations = 2\n"
            "var name: Int { return 2 }"
        )
        assert var.annotations == {"numberOfIterations": NumberValue(value=2)}

    def test_annotation_values(self):
        var = parse('// sourcery: a, b = 2, c = "x"\nvar name: Int')
        assert var.annotation_values == {"a": True, "b": 2, "c": "x"}


# ---------------------------------------------------------------------------
# Batch building
# ---------------------------------------------------------------------------

class TestBuildVariables:
    def test_filtered_dropped_and_order_kept(self):
        source = (
            "let a = 1\n"
            "private var hidden = 2\n"
            "// sourcery: flag\n"
            "public var b: [String] = []\n"
        )
        variables = build_variables(read_declarations(source))
        assert [v.name for v in variables] == ["a", "b"]
        assert variables[1].annotations == {"flag": BoolValue(value=True)}
        assert variables[1].type_name == tname("[String]")

    def test_unresolved_does_not_stop_batch(self):
        source = "var a = foo()\nvar b = 2\n"
        variables = build_variables(read_declarations(source))
        assert variables[0].type_name.is_unknown
        assert variables[1].type_name == tname("Int")

    def test_one_line_declarations_each_inferred(self):
        variables = build_variables(read_declarations("var a = 1; var b = 2"))
        assert [(v.name, v.type_name) for v in variables] == [("a", tname("Int")), ("b", tname("Int"))]

    def test_getter_on_next_line_is_computed(self):
        var = parse("var x: Int\n{\n  return 1\n}")
        assert var.is_computed
        assert var.access_level == access(write=AccessLevel.NONE)


class TestVariableModel:
    def test_frozen(self):
        var = parse("var name: Int")
        with pytest.raises(Exception):
            var.name = "other"

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="must not be empty"):
            Variable(name="", type_name=tname("Int"), access_level=access())

    def test_declaration_defaults(self):
        decl = Declaration(name="x", declaration_text="var x: Int", explicit_type="Int")
        assert decl.binding == BindingKind.VAR
        assert decl.accessors == AccessorShape.NONE
        assert decl.visibility == AccessLevel.INTERNAL
