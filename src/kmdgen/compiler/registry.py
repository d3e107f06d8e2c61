# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Corpus-wide table of declared type names and their kinds.

The registry is filled by one explicit pass over every schema before any class
is emitted, then passed to whatever needs to tell value types apart from
remote-object references.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from kmdgen.compiler.errors import DuplicateTypeError, UnresolvedTypeError
from kmdgen.model.ir import EnumSpec, SchemaUnit

# ###############
# Public Interface
# ###############


class TypeKind(Enum):
    """What a declared name stands for."""

    ENUM = "enum"
    STRUCT = "struct"
    REMOTE_CLASS = "remote_class"


@dataclass(frozen=True)
class TypeEntry:
    """A registered declaration."""

    name: str
    kind: TypeKind
    source: Path


class TypeRegistry:
    """Write-once-per-name lookup table from type name to :class:`TypeEntry`."""

    def __init__(self) -> None:
        self._entries: dict[str, TypeEntry] = {}

    def register(self, name: str, kind: TypeKind, source: Path) -> None:
        """Register a declaration.

        Raises:
            DuplicateTypeError: If *name* is already registered.
        """
        existing = self._entries.get(name)
        if existing is not None:
            raise DuplicateTypeError(
                f"Type '{name}' declared in '{source}' is already declared in '{existing.source}'"
            )
        self._entries[name] = TypeEntry(name=name, kind=kind, source=source)

    def lookup(self, name: str) -> TypeEntry:
        """Return the entry registered for *name*.

        Raises:
            UnresolvedTypeError: If *name* was never registered.
        """
        try:
            return self._entries[name]
        except KeyError:
            raise UnresolvedTypeError(f"Unresolved type '{name}'") from None

    def kind_of(self, name: str) -> TypeKind:
        return self.lookup(name).kind

    def is_value_type(self, name: str) -> bool:
        """True for enums and structs, false for remote classes."""
        return self.kind_of(name) is not TypeKind.REMOTE_CLASS

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def build_registry(units: list[SchemaUnit]) -> TypeRegistry:
    """Register every complex type and remote class of *units*.

    Registration order is unit order, then complex types before classes,
    then declaration order.
    """
    registry = TypeRegistry()
    for unit in units:
        for complex_type in unit.complex_types:
            kind = TypeKind.ENUM if isinstance(complex_type, EnumSpec) else TypeKind.STRUCT
            registry.register(complex_type.name, kind, unit.source)
        for class_spec in unit.classes:
            registry.register(class_spec.name, TypeKind.REMOTE_CLASS, unit.source)
    return registry
