# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Normalized intermediate representation consumed by the code printers."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from kmdgen.model.types import TypeRef

# ###############
# Public Interface
# ###############


class ErrorReturnPolicy(Enum):
    """What a generated stub returns for a structured result.

    ``ABSENT`` returns no value next to the transport error. ``PLACEHOLDER``
    returns a zero-valued instance of the declared type.
    """

    ABSENT = "absent"
    PLACEHOLDER = "placeholder"


class FieldSpec(BaseModel):
    """A normalized property, parameter, or struct field."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef
    default: Any = None
    doc: list[str] = _Field(default_factory=list)


class ReturnSpec(BaseModel):
    """A normalized method result."""

    model_config = ConfigDict(frozen=True)

    type: TypeRef
    doc: list[str] = _Field(default_factory=list)


class MethodSpec(BaseModel):
    """A normalized remote operation."""

    model_config = ConfigDict(frozen=True)

    name: str
    doc: list[str] = _Field(default_factory=list)
    params: list[FieldSpec] = _Field(default_factory=list)
    returns: ReturnSpec | None = None


class ClassSpec(BaseModel):
    """A normalized remote class. ``extends`` names at most one base class."""

    model_config = ConfigDict(frozen=True)

    name: str
    doc: list[str] = _Field(default_factory=list)
    abstract: bool = False
    extends: str | None = None
    properties: list[FieldSpec] = _Field(default_factory=list)
    methods: list[MethodSpec] = _Field(default_factory=list)
    events: list[str] = _Field(default_factory=list)
    constructor_params: list[FieldSpec] = _Field(default_factory=list)


class EnumSpec(BaseModel):
    """A normalized enumeration."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    name: str
    doc: list[str] = _Field(default_factory=list)
    values: list[str] = _Field(default_factory=list)


class StructSpec(BaseModel):
    """A normalized plain value type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["struct"] = "struct"
    name: str
    doc: list[str] = _Field(default_factory=list)
    fields: list[FieldSpec] = _Field(default_factory=list)


ComplexTypeSpec = Annotated[EnumSpec | StructSpec, _Field(discriminator="kind")]


class SchemaUnit(BaseModel):
    """Everything declared by one input file, in declaration order."""

    model_config = ConfigDict(frozen=True)

    source: Path
    classes: list[ClassSpec] = _Field(default_factory=list)
    complex_types: list[ComplexTypeSpec] = _Field(default_factory=list)
