# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic analysis over the whole normalized corpus.

Checks structural correctness before any code is emitted: base classes must
exist and form acyclic single-inheritance chains, every named type must
resolve, and names inside a declaration must be unique.
"""

from __future__ import annotations

from dataclasses import dataclass

from kmdgen.compiler.registry import TypeKind, TypeRegistry
from kmdgen.model.ir import ClassSpec, EnumSpec, FieldSpec, SchemaUnit, StructSpec
from kmdgen.model.types import TypeRef, referenced_names

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class SemanticError:
    """A structural error detected during semantic analysis.

    Attributes:
        message: Human-readable description of the error.
        unresolved: True when the error is a reference to an undeclared name.
    """

    message: str
    unresolved: bool = False


def analyze(units: list[SchemaUnit], registry: TypeRegistry) -> list[SemanticError]:
    """Check every unit of the corpus against the complete *registry*.

    Checks performed:
    - ``extends`` names a declared remote class, and no chain loops back on itself.
    - Every named type in properties, parameters, return values, constructor
      parameters and struct fields is registered.
    - Property, method and parameter names are unique within their declaration.
    - Enum values are unique within each enum.

    Returns:
        A list of :class:`SemanticError` instances, empty when the corpus is sound.
    """
    errors: list[SemanticError] = []
    classes = {c.name: c for unit in units for c in unit.classes}

    for unit in units:
        for complex_type in unit.complex_types:
            if isinstance(complex_type, EnumSpec):
                errors.extend(
                    _check_duplicate_names(
                        complex_type.values, f"{unit.source}: duplicate value '{{}}' in enum '{complex_type.name}'"
                    )
                )
            else:
                errors.extend(_check_struct(unit, complex_type, registry))

        for class_spec in unit.classes:
            errors.extend(_check_class(unit, class_spec, classes, registry))

    return errors


def inheritance_chain(name: str, classes: dict[str, ClassSpec]) -> list[str]:
    """Return *name* followed by its ancestors, nearest first.

    The walk stops at the first class without a base, at a base that is not in
    *classes*, or when a name repeats (a cycle).
    """
    chain = [name]
    current = classes.get(name)
    while current is not None and current.extends:
        if current.extends in chain:
            chain.append(current.extends)
            break
        chain.append(current.extends)
        current = classes.get(current.extends)
    return chain


# ################
# Implementation
# ################


def _check_duplicate_names(names: list[str], template: str) -> list[SemanticError]:
    seen: set[str] = set()
    errors: list[SemanticError] = []
    for name in names:
        if name in seen:
            errors.append(SemanticError(template.format(name)))
        seen.add(name)
    return errors


def _check_type_ref(ctx: str, type_ref: TypeRef, registry: TypeRegistry) -> list[SemanticError]:
    return [
        SemanticError(f"{ctx} refers to unknown type '{name}'", unresolved=True)
        for name in referenced_names(type_ref)
        if name not in registry
    ]


def _check_fields(ctx: str, fields: list[FieldSpec], registry: TypeRegistry) -> list[SemanticError]:
    errors = _check_duplicate_names([f.name for f in fields], f"{ctx}: duplicate name '{{}}'")
    for f in fields:
        errors.extend(_check_type_ref(f"{ctx} '{f.name}'", f.type, registry))
    return errors


def _check_struct(unit: SchemaUnit, struct: StructSpec, registry: TypeRegistry) -> list[SemanticError]:
    return _check_fields(f"{unit.source}: type '{struct.name}' field", struct.fields, registry)


def _check_class(
    unit: SchemaUnit,
    class_spec: ClassSpec,
    classes: dict[str, ClassSpec],
    registry: TypeRegistry,
) -> list[SemanticError]:
    errors: list[SemanticError] = []
    ctx = f"{unit.source}: class '{class_spec.name}'"

    if class_spec.extends:
        base = class_spec.extends
        if base not in registry:
            errors.append(SemanticError(f"{ctx} extends unknown class '{base}'", unresolved=True))
        elif registry.kind_of(base) is not TypeKind.REMOTE_CLASS:
            errors.append(SemanticError(f"{ctx} extends '{base}', which is a complex type, not a remote class"))
        else:
            chain = inheritance_chain(class_spec.name, classes)
            if chain[-1] in chain[:-1]:
                errors.append(SemanticError(f"{ctx} has an inheritance cycle: {' -> '.join(chain)}"))

    errors.extend(_check_fields(f"{ctx} property", class_spec.properties, registry))
    errors.extend(_check_fields(f"{ctx} constructor parameter", class_spec.constructor_params, registry))
    errors.extend(
        _check_duplicate_names([m.name for m in class_spec.methods], f"{ctx}: duplicate method '{{}}'")
    )

    for method in class_spec.methods:
        method_ctx = f"{ctx} method '{method.name}'"
        errors.extend(_check_fields(f"{method_ctx} parameter", method.params, registry))
        if method.returns is not None:
            errors.extend(_check_type_ref(f"{method_ctx} return", method.returns.type, registry))

    return errors
