# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type normalization: raw schema type expressions to the canonical IR.

The normalizer is a pure function of its inputs. Whether a named reference is
a value type or a remote object is deliberately not decided here; that needs
the complete registry and happens at emission time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from kmdgen.compiler.errors import SchemaParseError
from kmdgen.model.ir import (
    ClassSpec,
    ComplexTypeSpec,
    EnumSpec,
    FieldSpec,
    MethodSpec,
    ReturnSpec,
    SchemaUnit,
    StructSpec,
)
from kmdgen.model.schema import ComplexType, Property, RemoteClass, SchemaDocument
from kmdgen.model.types import (
    ListTypeRef,
    NamedTypeRef,
    OptionalTypeRef,
    PrimitiveType,
    PrimitiveTypeRef,
    TypeRef,
)

# ###############
# Public Interface
# ###############

PRIMITIVE_SPELLINGS: dict[str, PrimitiveType] = {
    "String": PrimitiveType.TEXT,
    "float": PrimitiveType.FLOAT64,
    "double": PrimitiveType.FLOAT64,
    "boolean": PrimitiveType.BOOLEAN,
    "int": PrimitiveType.INT,
    "int64": PrimitiveType.INT64,
}

COLLECTION_MARKER = "[]"
OPTIONAL_MARKER = "<>"


@dataclass(frozen=True)
class Normalized:
    """Result of normalizing one typed, documented, defaultable schema item."""

    type: TypeRef
    default: Any = None
    doc: list[str] = field(default_factory=list)

    @property
    def is_collection(self) -> bool:
        return isinstance(self.type, ListTypeRef)

    @property
    def is_optional(self) -> bool:
        return isinstance(self.type, OptionalTypeRef)


def normalize_type(expression: str) -> TypeRef:
    """Normalize a raw type expression such as ``String``, ``Tag[]`` or ``Foo<>``.

    Raises:
        SchemaParseError: If the expression is empty or not a valid type name.
    """
    expr = expression.strip()
    if expr in PRIMITIVE_SPELLINGS:
        return PrimitiveTypeRef(primitive=PRIMITIVE_SPELLINGS[expr])
    if expr.endswith(COLLECTION_MARKER):
        return ListTypeRef(element_type=normalize_type(expr[: -len(COLLECTION_MARKER)]))
    if expr.endswith(OPTIONAL_MARKER):
        return OptionalTypeRef(inner_type=normalize_type(expr[: -len(OPTIONAL_MARKER)]))
    if not _NAME_RE.match(expr):
        raise SchemaParseError(f"Invalid type expression '{expression}'")
    return NamedTypeRef(name=expr)


def zero_value(type_ref: TypeRef) -> Any:
    """Return the zero value of a primitive (or optional primitive), else None."""
    if isinstance(type_ref, OptionalTypeRef):
        return zero_value(type_ref.inner_type)
    if isinstance(type_ref, PrimitiveTypeRef):
        return _ZERO_VALUES[type_ref.primitive]
    return None


def format_doc(doc: str | None) -> list[str]:
    """Clean documentation markup and split it into non-empty lines.

    Cross-reference tokens are removed, double backticks become quotes, and
    comment delimiters are dropped so the text can be safely re-wrapped.
    """
    if not doc:
        return []
    for token in _DOC_STRIP_TOKENS:
        doc = doc.replace(token, "")
    doc = doc.replace("``", '"')
    lines = (line.strip() for line in doc.splitlines())
    return [line for line in lines if line]


def normalize(expression: str, doc: str | None = None, default: Any = None) -> Normalized:
    """Normalize a type expression, its documentation and its default value."""
    type_ref = normalize_type(expression)
    if default is None or default == "":
        default = zero_value(type_ref)
    return Normalized(type=type_ref, default=default, doc=format_doc(doc))


def lower_document(document: SchemaDocument, source: Path) -> SchemaUnit:
    """Convert a raw IDL document into its normalized IR.

    Raises:
        SchemaParseError: If any type expression is invalid; the message names
            the declaration and *source*.
    """
    return SchemaUnit(
        source=source,
        classes=[_lower_class(c, source) for c in document.remote_classes],
        complex_types=[_lower_complex_type(t, source) for t in document.complex_types],
    )


# ################
# Implementation
# ################

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_DOC_STRIP_TOKENS = (":rom:cls:", ":term:", "/*", "*/")

_ZERO_VALUES: dict[PrimitiveType, Any] = {
    PrimitiveType.TEXT: "",
    PrimitiveType.FLOAT64: 0.0,
    PrimitiveType.BOOLEAN: False,
    PrimitiveType.INT: 0,
    PrimitiveType.INT64: 0,
}


def _lower_field(prop: Property, ctx: str, source: Path) -> FieldSpec:
    try:
        normalized = normalize(prop.type, prop.doc, prop.default_value)
    except SchemaParseError as exc:
        raise SchemaParseError(f"{source}: {ctx} '{prop.name}': {exc}") from exc
    return FieldSpec(name=prop.name, type=normalized.type, default=normalized.default, doc=normalized.doc)


def _lower_class(remote_class: RemoteClass, source: Path) -> ClassSpec:
    ctx = f"class '{remote_class.name}'"
    methods: list[MethodSpec] = []
    for method in remote_class.methods:
        method_ctx = f"{ctx} method '{method.name}'"
        returns = None
        if method.return_ is not None and method.return_.type:
            try:
                return_type = normalize_type(method.return_.type)
            except SchemaParseError as exc:
                raise SchemaParseError(f"{source}: {method_ctx} return: {exc}") from exc
            returns = ReturnSpec(type=return_type, doc=format_doc(method.return_.doc))
        methods.append(
            MethodSpec(
                name=method.name,
                doc=format_doc(method.doc),
                params=[_lower_field(p, f"{method_ctx} parameter", source) for p in method.params],
                returns=returns,
            )
        )

    return ClassSpec(
        name=remote_class.name,
        doc=format_doc(remote_class.doc),
        abstract=remote_class.abstract,
        extends=remote_class.extends or None,
        properties=[_lower_field(p, f"{ctx} property", source) for p in remote_class.properties],
        methods=methods,
        events=list(remote_class.events),
        constructor_params=[
            _lower_field(p, f"{ctx} constructor parameter", source) for p in remote_class.constructor.params
        ],
    )


def _lower_complex_type(complex_type: ComplexType, source: Path) -> ComplexTypeSpec:
    if complex_type.is_enum:
        return EnumSpec(name=complex_type.name, doc=format_doc(complex_type.doc), values=list(complex_type.values))
    ctx = f"type '{complex_type.name}' property"
    return StructSpec(
        name=complex_type.name,
        doc=format_doc(complex_type.doc),
        fields=[_lower_field(p, ctx, source) for p in complex_type.properties],
    )
