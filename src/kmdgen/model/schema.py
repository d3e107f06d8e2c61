# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Raw IDL document model, as read from a ``.kmd.json`` file.

Field names are matched case-insensitively, so both ``remoteClasses`` and
``RemoteClasses`` are accepted. Keys the compiler does not use (``version``,
``imports``, ``readOnly`` and friends) are ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class _SchemaModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _fold_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k.lower() if isinstance(k, str) else k: v for k, v in data.items()}
        return data


class Property(_SchemaModel):
    """A property of a remote class or complex type, or a method parameter."""

    name: str
    type: str
    doc: str = ""
    default_value: Any = _Field(default=None, alias="defaultvalue")


Parameter = Property


class ReturnValue(_SchemaModel):
    """The declared result of a method."""

    type: str
    doc: str = ""


class Constructor(_SchemaModel):
    """Constructor parameters of a remote class."""

    doc: str = ""
    params: list[Parameter] = _Field(default_factory=list)


class Method(_SchemaModel):
    """A remote operation."""

    name: str
    doc: str = ""
    params: list[Parameter] = _Field(default_factory=list)
    return_: ReturnValue | None = _Field(default=None, alias="return")


class RemoteClass(_SchemaModel):
    """A class whose instances live on the media server."""

    name: str
    doc: str = ""
    abstract: bool = False
    extends: str = ""
    properties: list[Property] = _Field(default_factory=list)
    methods: list[Method] = _Field(default_factory=list)
    events: list[str] = _Field(default_factory=list)
    constructor: Constructor = _Field(default_factory=Constructor)

    @field_validator("extends", mode="before")
    @classmethod
    def _none_extends(cls, value: Any) -> Any:
        return "" if value is None else value


class ComplexType(_SchemaModel):
    """An enumeration (``typeFormat: ENUM``) or a plain value struct."""

    name: str
    doc: str = ""
    type_format: str = _Field(default="", alias="typeformat")
    values: list[str] = _Field(default_factory=list)
    properties: list[Property] = _Field(default_factory=list)

    @property
    def is_enum(self) -> bool:
        return self.type_format.upper() == "ENUM"


class SchemaDocument(_SchemaModel):
    """Top-level model representing the contents of a single IDL file."""

    remote_classes: list[RemoteClass] = _Field(default_factory=list, alias="remoteclasses")
    complex_types: list[ComplexType] = _Field(default_factory=list, alias="complextypes")
