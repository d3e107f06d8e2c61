# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Go printer."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from kmdgen.codegen.go import GoOptions, GoPrinter, GoSource, enum_constant_name
from kmdgen.compiler.errors import TemplateError, UnresolvedTypeError
from kmdgen.compiler.loader import parse_schema
from kmdgen.compiler.normalizer import lower_document
from kmdgen.compiler.registry import build_registry
from kmdgen.model.ir import ClassSpec, ErrorReturnPolicy, FieldSpec, SchemaUnit
from kmdgen.model.types import NamedTypeRef, PrimitiveType, PrimitiveTypeRef

# ###############
# Helpers
# ###############

SHAPES = """{
  "remoteClasses": [
    {"name": "Shape", "extends": "", "doc": "A shape",
     "methods": [{"name": "move", "params": [{"name": "to", "type": "Point"}], "return": null}]}
  ],
  "complexTypes": [
    {"typeFormat": "REGISTER", "name": "Point", "properties": [{"name": "x", "type": "int"}, {"name": "y", "type": "int"}]},
    {"typeFormat": "ENUM", "name": "Color", "doc": "A color", "values": ["RED", "GREEN"]}
  ]
}"""

MEDIA = """{
  "remoteClasses": [
    {"name": "MediaObject",
     "properties": [{"name": "id", "type": "String"}, {"name": "parent", "type": "MediaObject"},
                    {"name": "tags", "type": "Tag[]"}, {"name": "state", "type": "State"}],
     "methods": [
       {"name": "getTag", "params": [{"name": "key", "type": "String"}],
        "return": {"type": "String", "doc": "The value."}},
       {"name": "getTags", "params": [], "return": {"type": "Tag[]"}},
       {"name": "getInfo", "params": [], "return": {"type": "Tag"}},
       {"name": "getPipeline", "params": [], "return": {"type": "MediaPipeline"}}
     ]},
    {"name": "MediaPipeline", "extends": "MediaObject"},
    {"name": "MediaElement", "extends": "MediaObject",
     "methods": [
       {"name": "connect", "params": [{"name": "sink", "type": "MediaElement"}, {"name": "type", "type": "State<>"},
                                      {"name": "label", "type": "String<>"}]},
       {"name": "release", "params": []}
     ]},
    {"name": "PlayerEndpoint", "extends": "MediaElement",
     "constructor": {"params": [
       {"name": "mediaPipeline", "type": "MediaPipeline"},
       {"name": "uri", "type": "String"},
       {"name": "useEncodedMedia", "type": "boolean", "defaultValue": false},
       {"name": "networkCache", "type": "int", "defaultValue": 2000},
       {"name": "info", "type": "Tag"}
     ]},
     "methods": [{"name": "play", "params": []}]}
  ],
  "complexTypes": [
    {"typeFormat": "REGISTER", "name": "Tag",
     "properties": [{"name": "key", "type": "String", "doc": "Tag key"}, {"name": "owner", "type": "MediaElement"},
                    {"name": "state", "type": "State"}]},
    {"typeFormat": "ENUM", "name": "State", "values": ["ON", "OFF"]}
  ]
}"""


def _printer(source: str, **options: object) -> tuple[SchemaUnit, GoPrinter]:
    unit = lower_document(parse_schema(source), Path("test.kmd.json"))
    return unit, GoPrinter(build_registry([unit]), GoOptions(**options))  # type: ignore[arg-type]


def _squash(text: str) -> str:
    """Collapse alignment padding so assertions do not depend on column widths."""
    return re.sub(r" +", " ", text)


def _class(unit: SchemaUnit, name: str) -> ClassSpec:
    return next(c for c in unit.classes if c.name == name)


def _single_default(type_name: str, default: object) -> str:
    """A one-class document whose constructor takes a single defaulted param ``n``."""
    param = {"name": "n", "type": type_name, "defaultValue": default}
    return json.dumps({"remoteClasses": [{"name": "A", "constructor": {"params": [param]}}]})


def _interface_members(text: str, name: str) -> list[str]:
    match = re.search(rf"type {name} interface {{\n(.*?)\n}}", text, re.DOTALL)
    assert match, f"interface {name} not found"
    return [line.strip() for line in match.group(1).splitlines() if line.strip()]


# ###############
# End-to-end scenario
# ###############


class TestShapeScenario:
    def test_point_value_type(self) -> None:
        unit, printer = _printer(SHAPES)
        text = printer.render_complex_type(unit.complex_types[0]).text
        assert text == "type Point struct {\n\tX int\n\tY int\n}"
        assert [f.default for f in unit.complex_types[0].fields] == [0, 0]  # type: ignore[union-attr]

    def test_shape_capability_interface(self) -> None:
        unit, printer = _printer(SHAPES)
        text = printer.render_remote_class(unit.classes[0]).text
        assert _interface_members(text, "IShape") == ["Move(to Point) error"]

    def test_shape_struct_has_connection_handle(self) -> None:
        unit, printer = _printer(SHAPES)
        text = _squash(printer.render_remote_class(unit.classes[0]).text)
        assert "/*A shape*/\ntype Shape struct {\n\tconnection *Connection\n\tId string\n}" in text

    def test_shape_move_stub(self) -> None:
        unit, printer = _printer(SHAPES)
        text = _squash(printer.render_remote_class(unit.classes[0]).text)
        assert "func (elem *Shape) Move(to Point) error {" in text
        assert '\tsetIfNotEmpty(params, "to", to)' in text
        assert '\t\t"operation": "move",\n\t\t"object": elem.Id,\n\t\t"operationParams": params,\n' in text
        assert "\tresponse := <-elem.connection.Request(req)" in text
        assert text.rstrip().endswith("\treturn response.Error\n}")

    def test_method_without_params_omits_operation_params(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "PlayerEndpoint")).text
        play = text[text.index("func (elem *PlayerEndpoint) Play()") :]
        assert "operationParams" not in play
        assert "params := make" not in play


# ###############
# Complex types
# ###############


class TestComplexTypes:
    def test_enum_constants_keep_values(self) -> None:
        unit, printer = _printer(SHAPES)
        text = printer.render_complex_type(unit.complex_types[1]).text
        assert text.startswith("/*A color*/\ntype Color string\n")
        assert "func (t Color) String() string {\n\treturn string(t)\n}" in text
        assert 'COLOR_RED   Color = "RED"' in text
        assert 'COLOR_GREEN Color = "GREEN"' in text

    def test_enum_constant_name_casing(self) -> None:
        assert enum_constant_name("Color", "RED") == "COLOR_RED"
        assert enum_constant_name("UriEndpointState", "start") == "URIENDPOINTSTATE_START"

    def test_enum_constant_name_sanitizes_identifier_only(self) -> None:
        assert enum_constant_name("Codec", "video/H264") == "CODEC_VIDEO_H264"

    def test_enum_value_literal_is_untouched(self) -> None:
        unit, printer = _printer(
            '{"complexTypes": [{"typeFormat": "ENUM", "name": "Codec", "values": ["video/H264"]}]}'
        )
        text = printer.render_complex_type(unit.complex_types[0]).text
        assert 'CODEC_VIDEO_H264 Codec = "video/H264"' in text

    def test_struct_fields_use_plain_values_and_capabilities(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_complex_type(unit.complex_types[0]).text
        assert "\t/*Tag key*/\n\tKey string" in text
        assert "\tOwner IMediaElement" in text
        assert "\tState State" in text


# ###############
# Remote classes
# ###############


class TestRemoteClasses:
    def test_root_class_has_no_interface(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "MediaObject")).text
        assert "type IMediaObject interface" not in text
        assert "type MediaObject struct {\n\tconnection *Connection\n" in text

    def test_root_declaring_id_gets_no_extra_id(self) -> None:
        unit, printer = _printer(MEDIA)
        text = _squash(printer.render_remote_class(_class(unit, "MediaObject")).text)
        assert text.count("\tId string") == 1

    def test_capitalized_id_property_gets_no_extra_id(self) -> None:
        unit, printer = _printer(
            '{"remoteClasses": [{"name": "Camera", "properties": [{"name": "Id", "type": "String"}]}]}'
        )
        text = _squash(printer.render_remote_class(unit.classes[0]).text)
        assert re.findall(r"^\tId ", text, re.MULTILINE) == ["\tId "]

    def test_property_types(self) -> None:
        unit, printer = _printer(MEDIA)
        text = _squash(printer.render_remote_class(_class(unit, "MediaObject")).text)
        assert "\tParent IMediaObject" in text
        assert "\tTags []*Tag" in text
        assert "\tState *State" in text

    def test_derived_struct_embeds_base(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "PlayerEndpoint")).text
        assert "type PlayerEndpoint struct {\n\tMediaElement\n}" in text

    def test_base_methods_are_satisfiable_through_base_capability(self) -> None:
        unit, printer = _printer(MEDIA)
        element = printer.render_remote_class(_class(unit, "MediaElement")).text
        player = printer.render_remote_class(_class(unit, "PlayerEndpoint")).text

        base_capability = _interface_members(element, "IMediaElement")
        derived_capability = _interface_members(player, "IPlayerEndpoint")
        # The derived capability embeds the base capability ...
        assert derived_capability[0] == "IMediaElement"
        # ... and every base method is implemented on the embedded base struct.
        for signature in base_capability:
            assert f"func (elem *MediaElement) {signature} {{" in element
        assert "\tMediaElement\n" in player

    def test_base_root_capability_is_not_embedded(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "MediaElement")).text
        assert "IMediaObject" not in _interface_members(text, "IMediaElement")

    def test_remote_parameters_use_capabilities(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "MediaElement")).text
        assert "Connect(sink IMediaElement, type_ State, label string) error" in text

    def test_every_argument_goes_through_sparse_setter(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "MediaElement")).text
        connect = text[text.index("func (elem *MediaElement) Connect") :]
        connect = connect[: connect.index("\n}")]
        assert '\tsetIfNotEmpty(params, "sink", sink)' in connect
        assert '\tsetIfNotEmpty(params, "type", type_)' in connect
        assert '\tsetIfNotEmpty(params, "label", label)' in connect
        assert "params[" not in connect

    def test_method_docs_and_return_docs(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "MediaObject")).text
        assert "// Returns\n/*The value.*/\nfunc (elem *MediaObject) GetTag(key string) (string, error) {" in text


# ###############
# Constructor params
# ###############


class TestConstructorParams:
    def test_no_params_returns_options(self) -> None:
        unit, printer = _printer(MEDIA)
        source = printer.render_remote_class(_class(unit, "MediaElement"))
        assert (
            "func (elem *MediaElement) getConstructorParams(from IMediaObject, options map[string]interface{}) "
            "map[string]interface{} {\n\treturn options\n}"
        ) in source.text
        assert source.imports == frozenset()

    def test_seeds_defaults_and_back_reference(self) -> None:
        unit, printer = _printer(MEDIA)
        source = printer.render_remote_class(_class(unit, "PlayerEndpoint"))
        text = _squash(source.text)
        assert '\t\t"mediaPipeline": fmt.Sprintf("%s", from),' in text
        assert '\t\t"uri": "",' in text
        assert '\t\t"useEncodedMedia": false,' in text
        assert '\t\t"networkCache": 2000,' in text
        assert '"info"' not in text
        assert "\tmergeOptions(ret, options)\n\treturn ret" in text
        assert source.imports == frozenset({"fmt"})

    def test_root_class_name_is_configurable(self) -> None:
        unit, printer = _printer(SHAPES, root_class="Shape")
        text = printer.render_remote_class(unit.classes[0]).text
        assert "type IShape interface" not in text
        assert "getConstructorParams(from IShape," in text

    @pytest.mark.parametrize(
        ("type_name", "default", "literal"),
        [
            ("int", 2000.0, "2000"),
            ("int64", "-7", "-7"),
            ("double", 2.5, "2.5"),
            ("float", "1e3", "1e3"),
        ],
    )
    def test_numeric_default_literals(self, type_name: str, default: object, literal: str) -> None:
        unit, printer = _printer(_single_default(type_name, default))
        text = _squash(printer.render_remote_class(unit.classes[0]).text)
        assert f'\t\t"n": {literal},' in text

    @pytest.mark.parametrize(("type_name", "default"), [("int", 2.5), ("int64", "2.5"), ("int", "abc"), ("int", True)])
    def test_integer_default_must_be_integral(self, type_name: str, default: object) -> None:
        unit, printer = _printer(_single_default(type_name, default))
        with pytest.raises(TemplateError, match="A.n"):
            printer.render_remote_class(unit.classes[0])


# ###############
# Return policies
# ###############


class TestReturns:
    def test_primitive_return_reads_value(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "MediaObject")).text
        assert '\treturn response.Result["value"], response.Error' in text

    def test_absent_policy_returns_nil(self) -> None:
        unit, printer = _printer(MEDIA)
        text = printer.render_remote_class(_class(unit, "MediaObject")).text
        assert "GetTags() ([]*Tag, error) {" in text
        assert "GetInfo() (*Tag, error) {" in text
        assert "GetPipeline() (IMediaPipeline, error) {" in text
        assert "\treturn nil, response.Error" in text
        assert "var ret" not in text

    def test_placeholder_policy_returns_zero_value(self) -> None:
        unit, printer = _printer(MEDIA, error_return=ErrorReturnPolicy.PLACEHOLDER)
        text = printer.render_remote_class(_class(unit, "MediaObject")).text
        assert "GetTags() ([]Tag, error) {" in text
        assert "\tvar ret []Tag\n\treturn ret, response.Error" in text
        assert "\tvar ret Tag\n\treturn ret, response.Error" in text
        assert "\tvar ret IMediaPipeline\n\treturn ret, response.Error" in text


# ###############
# Files and failures
# ###############


class TestFiles:
    def test_package_envelope_without_imports(self) -> None:
        _, printer = _printer(SHAPES, package_name="media")
        assert printer.render_file([GoSource("type A int"), GoSource("type B int")]) == (
            "package media\n\ntype A int\n\ntype B int\n"
        )

    def test_package_envelope_with_import(self) -> None:
        _, printer = _printer(SHAPES)
        text = printer.render_file([GoSource("type A int", frozenset({"fmt"}))])
        assert text == 'package kurento\n\nimport "fmt"\n\ntype A int\n'

    def test_package_envelope_with_import_block(self) -> None:
        _, printer = _printer(SHAPES)
        text = printer.render_file([GoSource("type A int", frozenset({"fmt", "strings"}))])
        assert text == 'package kurento\n\nimport (\n\t"fmt"\n\t"strings"\n)\n\ntype A int\n'

    def test_invalid_package_name(self) -> None:
        with pytest.raises(TemplateError):
            _printer(SHAPES, package_name="not-a-name")

    def test_invalid_property_name(self) -> None:
        unit, printer = _printer(SHAPES)
        bad = ClassSpec(
            name="Shape",
            properties=[FieldSpec(name="bad-name", type=PrimitiveTypeRef(primitive=PrimitiveType.TEXT))],
        )
        with pytest.raises(TemplateError, match="bad-name"):
            printer.render_remote_class(bad)

    def test_default_without_literal_form(self) -> None:
        unit, printer = _printer(
            '{"remoteClasses": [{"name": "A", "constructor": {"params": '
            '[{"name": "n", "type": "int", "defaultValue": "lots"}]}}]}'
        )
        with pytest.raises(TemplateError, match="A.n"):
            printer.render_remote_class(unit.classes[0])

    def test_unregistered_reference(self) -> None:
        _, printer = _printer(SHAPES)
        with pytest.raises(UnresolvedTypeError):
            printer.go_type(NamedTypeRef(name="Missing"))
