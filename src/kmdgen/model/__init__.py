# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Raw IDL model, normalized type vocabulary, and the IR built from them."""

from kmdgen.model.ir import (
    ClassSpec,
    ComplexTypeSpec,
    EnumSpec,
    ErrorReturnPolicy,
    FieldSpec,
    MethodSpec,
    ReturnSpec,
    SchemaUnit,
    StructSpec,
)
from kmdgen.model.schema import (
    ComplexType,
    Constructor,
    Method,
    Parameter,
    Property,
    RemoteClass,
    ReturnValue,
    SchemaDocument,
)
from kmdgen.model.types import (
    ListTypeRef,
    NamedTypeRef,
    OptionalTypeRef,
    PrimitiveType,
    PrimitiveTypeRef,
    TypeRef,
)

__all__ = [
    # Raw documents
    "ComplexType",
    "Constructor",
    "Method",
    "Parameter",
    "Property",
    "RemoteClass",
    "ReturnValue",
    "SchemaDocument",
    # Type system
    "PrimitiveType",
    "PrimitiveTypeRef",
    "ListTypeRef",
    "OptionalTypeRef",
    "NamedTypeRef",
    "TypeRef",
    # IR
    "ClassSpec",
    "ComplexTypeSpec",
    "EnumSpec",
    "ErrorReturnPolicy",
    "FieldSpec",
    "MethodSpec",
    "ReturnSpec",
    "SchemaUnit",
    "StructSpec",
]
