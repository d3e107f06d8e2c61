# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Normalized type vocabulary shared by the IR and the code printers."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class PrimitiveType(Enum):
    """Canonical primitives every schema spelling is mapped onto."""

    TEXT = "text"
    FLOAT64 = "float64"
    BOOLEAN = "boolean"
    INT = "int"
    INT64 = "int64"


class PrimitiveTypeRef(BaseModel):
    """Reference to a primitive type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["primitive"] = "primitive"
    primitive: PrimitiveType


class ListTypeRef(BaseModel):
    """Reference to a collection of elements (schema suffix ``[]``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    element_type: TypeRef


class OptionalTypeRef(BaseModel):
    """Reference to a value that may be absent (schema suffix ``<>``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["optional"] = "optional"
    inner_type: TypeRef


class NamedTypeRef(BaseModel):
    """Reference to a declared complex type or remote class."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["named"] = "named"
    name: str


# A normalized type reference. The `kind` discriminator keeps validation unambiguous.
TypeRef = Annotated[
    PrimitiveTypeRef | ListTypeRef | OptionalTypeRef | NamedTypeRef,
    _Field(discriminator="kind"),
]


def unwrap_optional(type_ref: TypeRef) -> TypeRef:
    """Strip any optional wrappers from *type_ref*."""
    while isinstance(type_ref, OptionalTypeRef):
        type_ref = type_ref.inner_type
    return type_ref


def referenced_names(type_ref: TypeRef) -> list[str]:
    """Return every declared type name *type_ref* refers to."""
    if isinstance(type_ref, NamedTypeRef):
        return [type_ref.name]
    if isinstance(type_ref, ListTypeRef):
        return referenced_names(type_ref.element_type)
    if isinstance(type_ref, OptionalTypeRef):
        return referenced_names(type_ref.inner_type)
    return []


# Resolve forward references for models that use TypeRef.
ListTypeRef.model_rebuild()
OptionalTypeRef.model_rebuild()
