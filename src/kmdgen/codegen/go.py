# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Go printer: renders the normalized IR as Go source.

The generated code relies on a hand-written runtime in the same package that
provides ``Connection``, the root capability interface (``IMediaObject`` by
default), ``getInvokeRequest``, ``setIfNotEmpty`` and ``mergeOptions``.

Single inheritance is realized with embedding. A derived struct embeds its
base struct, so it inherits the base's methods, and a derived capability
interface embeds the base's interface. A ``*Derived`` therefore satisfies
``IBase`` wherever the base capability is expected.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from kmdgen.compiler.errors import TemplateError
from kmdgen.compiler.registry import TypeKind, TypeRegistry
from kmdgen.model.ir import (
    ClassSpec,
    ComplexTypeSpec,
    EnumSpec,
    ErrorReturnPolicy,
    FieldSpec,
    MethodSpec,
    StructSpec,
)
from kmdgen.model.types import (
    ListTypeRef,
    NamedTypeRef,
    OptionalTypeRef,
    PrimitiveType,
    PrimitiveTypeRef,
    TypeRef,
    unwrap_optional,
)

# ###############
# Public Interface
# ###############

FILE_EXTENSION = ".go"


@dataclass(frozen=True)
class GoOptions:
    """Settings that shape the generated Go package."""

    package_name: str = "kurento"
    root_class: str = "MediaObject"
    error_return: ErrorReturnPolicy = ErrorReturnPolicy.ABSENT


@dataclass(frozen=True)
class GoSource:
    """A rendered declaration and the imports it needs."""

    text: str
    imports: frozenset[str] = field(default_factory=frozenset)


class GoPrinter:
    """Renders complex types and remote classes against a complete registry."""

    def __init__(self, registry: TypeRegistry, options: GoOptions | None = None) -> None:
        self._registry = registry
        self._options = options or GoOptions()
        if not _IDENT_RE.match(self._options.package_name):
            raise TemplateError(f"Invalid Go package name '{self._options.package_name}'")

    # -------- types --------

    def capability_name(self, class_name: str) -> str:
        """Name of the capability interface extracted from *class_name*."""
        return "I" + _exported(class_name)

    def go_type(self, type_ref: TypeRef, *, pointer_values: bool = False) -> str:
        """Render *type_ref* as a Go type expression.

        Remote classes always render as their capability interface. Value
        types render as pointers when *pointer_values* is set. Optional
        wrappers render as their inner type: the sparse payload already
        treats zero values as absent, and references are nilable anyway.
        """
        if isinstance(type_ref, OptionalTypeRef):
            return self.go_type(type_ref.inner_type, pointer_values=pointer_values)
        if isinstance(type_ref, PrimitiveTypeRef):
            return _GO_PRIMITIVES[type_ref.primitive]
        if isinstance(type_ref, ListTypeRef):
            return "[]" + self.go_type(type_ref.element_type, pointer_values=pointer_values)
        assert isinstance(type_ref, NamedTypeRef)
        if self._registry.kind_of(type_ref.name) is TypeKind.REMOTE_CLASS:
            return self.capability_name(type_ref.name)
        name = _exported(type_ref.name)
        return "*" + name if pointer_values else name

    # -------- complex types --------

    def render_complex_type(self, spec: ComplexTypeSpec) -> GoSource:
        """Render an enumeration or a plain value struct."""
        if isinstance(spec, EnumSpec):
            return GoSource(self._render_enum(spec))
        return GoSource(self._render_value_struct(spec))

    def _render_enum(self, spec: EnumSpec) -> str:
        name = _exported(spec.name)
        lines = _comment_block(spec.doc)
        lines += [
            f"type {name} string",
            "",
            "// Implement fmt.Stringer interface",
            f"func (t {name}) String() string {{",
            "\treturn string(t)",
            "}",
        ]
        if spec.values:
            rows = [(enum_constant_name(spec.name, v), f"{name} = {_go_string(v)}") for v in spec.values]
            lines += ["", "const ("]
            lines += _aligned(rows, "\t")
            lines.append(")")
        return "\n".join(lines)

    def _render_value_struct(self, spec: StructSpec) -> str:
        name = _exported(spec.name)
        rows = [(_exported(f.name), self.go_type(f.type)) for f in spec.fields]
        lines = _comment_block(spec.doc)
        lines.append(f"type {name} struct {{")
        lines += _field_lines(rows, [f.doc for f in spec.fields])
        lines.append("}")
        return "\n".join(lines)

    # -------- remote classes --------

    def render_remote_class(self, spec: ClassSpec) -> GoSource:
        """Render the capability interface, struct, constructor params and method stubs."""
        parts: list[str] = []
        if spec.name != self._options.root_class:
            parts.append(self._render_interface(spec))
        parts.append(self._render_class_struct(spec))
        constructor, imports = self._render_constructor_params(spec)
        parts.append(constructor)
        parts += [self._render_method(spec, m) for m in spec.methods]
        return GoSource("\n\n".join(parts), imports)

    def _render_interface(self, spec: ClassSpec) -> str:
        lines = [f"type {self.capability_name(spec.name)} interface {{"]
        if spec.extends and spec.extends != self._options.root_class:
            lines.append(f"\t{self.capability_name(spec.extends)}")
        lines += [f"\t{self._signature(m)}" for m in spec.methods]
        lines.append("}")
        return "\n".join(lines)

    def _render_class_struct(self, spec: ClassSpec) -> str:
        lines = _comment_block(spec.doc)
        lines.append(f"type {_exported(spec.name)} struct {{")
        if spec.extends:
            lines.append(f"\t{_exported(spec.extends)}")
        else:
            handle = [("connection", "*Connection")]
            if not any(_exported(p.name) == "Id" for p in spec.properties):
                handle.append(("Id", "string"))
            lines += _aligned(handle, "\t")
        if spec.properties:
            rows = [(_exported(p.name), self.go_type(p.type, pointer_values=True)) for p in spec.properties]
            lines.append("")
            lines += _field_lines(rows, [p.doc for p in spec.properties])
        lines.append("}")
        return "\n".join(lines)

    def _render_constructor_params(self, spec: ClassSpec) -> tuple[str, frozenset[str]]:
        root = self.capability_name(self._options.root_class)
        lines = [
            '// Return constructor params to be called by "Create".',
            f"func (elem *{_exported(spec.name)}) getConstructorParams("
            f"from {root}, options map[string]interface{{}}) map[string]interface{{}} {{",
        ]
        if not spec.constructor_params:
            lines += ["\treturn options", "}"]
            return "\n".join(lines), frozenset()

        imports: set[str] = set()
        rows: list[tuple[str, str]] = []
        for param in spec.constructor_params:
            key = _go_string(param.name) + ":"
            if self._is_remote_reference(param.type):
                rows.append((key, 'fmt.Sprintf("%s", from),'))
                imports.add("fmt")
            elif isinstance(unwrap_optional(param.type), PrimitiveTypeRef) and param.default is not None:
                rows.append((key, _go_literal(param.default, param.type, f"{spec.name}.{param.name}") + ","))

        lines += ["\t// Create basic constructor params", "\tret := map[string]interface{}{"]
        lines += _aligned(rows, "\t\t")
        lines += ["\t}", "", "\tmergeOptions(ret, options)", "\treturn ret", "}"]
        return "\n".join(lines), frozenset(imports)

    def _render_method(self, spec: ClassSpec, method: MethodSpec) -> str:
        lines = _comment_block(method.doc)
        if method.returns is not None and method.returns.doc:
            lines.append("// Returns")
            lines += _comment_block(method.returns.doc)
        lines.append(f"func (elem *{_exported(spec.name)}) {self._signature(method)} {{")
        lines += ["\treq := elem.getInvokeRequest()", ""]

        if method.params:
            lines.append("\tparams := make(map[string]interface{})")
            lines += [f"\tsetIfNotEmpty(params, {_go_string(p.name)}, {_local(p.name)})" for p in method.params]
            lines.append("")

        rows = [('"operation":', _go_string(method.name) + ","), ('"object":', "elem.Id,")]
        if method.params:
            rows.append(('"operationParams":', "params,"))
        lines.append('\treq["params"] = map[string]interface{}{')
        lines += _aligned(rows, "\t\t")
        lines += ["\t}", "", "\t// Call server and wait response.", "\tresponse := <-elem.connection.Request(req)", ""]
        lines += self._return_lines(method)
        lines.append("}")
        return "\n".join(lines)

    def _return_lines(self, method: MethodSpec) -> list[str]:
        if method.returns is None:
            return ["\treturn response.Error"]
        if isinstance(unwrap_optional(method.returns.type), PrimitiveTypeRef):
            return ['\treturn response.Result["value"], response.Error']
        if self._options.error_return is ErrorReturnPolicy.ABSENT:
            return ["\treturn nil, response.Error"]
        return [f"\tvar ret {self._return_type(method)}", "\treturn ret, response.Error"]

    def _signature(self, method: MethodSpec) -> str:
        args = ", ".join(f"{_local(p.name)} {self.go_type(p.type)}" for p in method.params)
        results = "error" if method.returns is None else f"({self._return_type(method)}, error)"
        return f"{_exported(method.name)}({args}) {results}"

    def _return_type(self, method: MethodSpec) -> str:
        assert method.returns is not None
        # Absent results need a nilable type, so value types become pointers.
        nilable = self._options.error_return is ErrorReturnPolicy.ABSENT
        return self.go_type(method.returns.type, pointer_values=nilable)

    def _is_remote_reference(self, type_ref: TypeRef) -> bool:
        inner = unwrap_optional(type_ref)
        return isinstance(inner, NamedTypeRef) and self._registry.kind_of(inner.name) is TypeKind.REMOTE_CLASS

    # -------- files --------

    def render_file(self, sources: list[GoSource]) -> str:
        """Wrap rendered declarations in the package envelope."""
        imports = sorted(set().union(*(s.imports for s in sources)))
        lines = [f"package {self._options.package_name}", ""]
        if len(imports) == 1:
            lines += [f'import "{imports[0]}"', ""]
        elif imports:
            lines += ["import ("] + [f'\t"{i}"' for i in imports] + [")", ""]
        body = "\n\n".join(s.text for s in sources)
        return "\n".join(lines) + "\n" + body + "\n"


def enum_constant_name(type_name: str, value: str) -> str:
    """Go identifier of an enum constant, e.g. ``COLOR_RED`` for ``Color``/``RED``."""
    return _NON_IDENT_RE.sub("_", f"{type_name}_{value}".upper())


# ################
# Implementation
# ################

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_NON_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")
_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?([eE][-+]?\d+)?$")
_INTEGER_RE = re.compile(r"^-?\d+$")

_GO_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer", "else",
        "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
        "map", "package", "range", "return", "select", "struct", "switch", "type", "var",
    }
)  # fmt: skip

# Locals used inside generated method bodies.
_RESERVED_LOCALS = frozenset({"elem", "req", "params", "response", "ret", "fmt"})

_GO_PRIMITIVES: dict[PrimitiveType, str] = {
    PrimitiveType.TEXT: "string",
    PrimitiveType.FLOAT64: "float64",
    PrimitiveType.BOOLEAN: "bool",
    PrimitiveType.INT: "int",
    PrimitiveType.INT64: "int64",
}


def _check_ident(name: str) -> str:
    if not _IDENT_RE.match(name):
        raise TemplateError(f"'{name}' cannot be used as a Go identifier")
    return name


def _exported(name: str) -> str:
    _check_ident(name)
    return name[0].upper() + name[1:]


def _local(name: str) -> str:
    _check_ident(name)
    if name in _GO_KEYWORDS or name in _RESERVED_LOCALS:
        return name + "_"
    return name


def _go_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _go_literal(value: Any, type_ref: TypeRef, ctx: str) -> str:
    """Render a default value as a Go literal of the given primitive type."""
    primitive = unwrap_optional(type_ref)
    assert isinstance(primitive, PrimitiveTypeRef)
    kind = primitive.primitive

    if kind is PrimitiveType.TEXT:
        if isinstance(value, (dict, list)):
            raise TemplateError(f"{ctx}: default {value!r} is not a string")
        return _go_string(value if isinstance(value, str) else json.dumps(value))
    if kind is PrimitiveType.BOOLEAN:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower()
        raise TemplateError(f"{ctx}: default {value!r} is not a boolean")

    if isinstance(value, bool):
        raise TemplateError(f"{ctx}: default {value!r} is not a number")
    if kind is PrimitiveType.FLOAT64:
        if isinstance(value, (int, float)):
            return repr(value)
        if isinstance(value, str) and _NUMBER_RE.match(value.strip()):
            return value.strip()
        raise TemplateError(f"{ctx}: default {value!r} is not a number")

    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return value.strip()
    raise TemplateError(f"{ctx}: default {value!r} is not an integer")


def _comment_block(doc: list[str], indent: str = "") -> list[str]:
    """Wrap every documentation line in its own comment delimiters."""
    return [f"{indent}/*{line}*/" for line in doc]


def _aligned(rows: list[tuple[str, str]], indent: str) -> list[str]:
    """Lay out key/value rows with the value column aligned."""
    if not rows:
        return []
    width = max(len(key) for key, _ in rows)
    return [f"{indent}{key.ljust(width)} {value}" for key, value in rows]


def _field_lines(rows: list[tuple[str, str]], docs: list[list[str]]) -> list[str]:
    """Struct field lines; documented fields are separated by blank lines."""
    if not any(docs):
        return _aligned(rows, "\t")
    lines: list[str] = []
    for index, ((name, go_type), doc) in enumerate(zip(rows, docs)):
        if index:
            lines.append("")
        lines += _comment_block(doc, "\t")
        lines.append(f"\t{name} {go_type}")
    return lines
