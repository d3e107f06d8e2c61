# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler workflow from IDL files to a generated Go package.

A run is a strict sequence of stages:

1. **Load** every schema matched by the configured globs.
2. **Normalize** each document into the IR.
3. **Register** every complex type and remote class of the whole corpus.
   Class emission needs to know, for every referenced name, whether it is a
   value type or a remote object, and that is only known once all files are
   registered.
4. **Check** inheritance, references and duplicates against the registry.
5. **Emit** complex types (pass 1), then remote classes (pass 2).
6. **Write** the files and copy the static runtime files.

Every file is rendered before the first one is written, so a rendering
failure leaves the output directory untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from kmdgen.codegen.go import FILE_EXTENSION, GoOptions, GoPrinter
from kmdgen.compiler.errors import ConfigError, SchemaParseError, UnresolvedTypeError
from kmdgen.compiler.loader import LoadedSchema, load_schemas
from kmdgen.compiler.normalizer import lower_document
from kmdgen.compiler.registry import TypeKind, TypeRegistry, build_registry
from kmdgen.compiler.semantic_analysis import SemanticError, analyze
from kmdgen.compiler.writer import GeneratedFile, copy_static_files, output_name, write_outputs
from kmdgen.config import GeneratorConfig
from kmdgen.model.ir import SchemaUnit

# ###############
# Public Interface
# ###############


@dataclass
class GenerationResult:
    """What a full run read and wrote."""

    schemas: list[Path] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)


def check_schemas(schemas: list[LoadedSchema], root_class: str | None = None) -> tuple[list[SchemaUnit], TypeRegistry]:
    """Normalize *schemas*, build the registry, and run semantic analysis.

    When *root_class* is given it must name a declared remote class.

    Returns:
        The normalized units, in input order, and the complete registry.

    Raises:
        SchemaParseError: On invalid type expressions or structural errors.
        DuplicateTypeError: When two declarations share a name.
        UnresolvedTypeError: When a referenced name, or the root class, is never declared.
    """
    units = [lower_document(s.document, s.path) for s in schemas]
    registry = build_registry(units)

    errors = analyze(units, registry)
    if root_class is not None and not _is_remote_class(registry, root_class):
        errors.append(SemanticError(f"root class '{root_class}' is not a declared remote class", unresolved=True))
    if errors:
        error_lines = "\n".join(f"  {e.message}" for e in errors)
        if any(e.unresolved for e in errors):
            raise UnresolvedTypeError(f"Unresolved references:\n{error_lines}")
        raise SchemaParseError(f"Invalid schemas:\n{error_lines}")

    return units, registry


def render_units(units: list[SchemaUnit], registry: TypeRegistry, config: GeneratorConfig) -> list[GeneratedFile]:
    """Render the generated files for checked *units* without writing them.

    Returns:
        The complex-type files of every unit that declares complex types,
        followed by one class file per unit.

    Raises:
        TemplateError: If a declaration has no Go rendering.
        ConfigError: If two files would be written to the same output name.
    """
    printer = GoPrinter(
        registry,
        GoOptions(
            package_name=config.package_name,
            root_class=config.root_class,
            error_return=config.error_return,
        ),
    )

    files: list[GeneratedFile] = []

    # Pass 1: complex types.
    for unit in units:
        if not unit.complex_types:
            continue
        sources = [printer.render_complex_type(t) for t in unit.complex_types]
        files.append(
            GeneratedFile(
                name=output_name(unit.source, config.schema_suffix, FILE_EXTENSION, config.complex_types_suffix),
                content=printer.render_file(sources),
                source=unit.source,
            )
        )

    # Pass 2: remote classes.
    for unit in units:
        sources = [printer.render_remote_class(c) for c in unit.classes]
        files.append(
            GeneratedFile(
                name=output_name(unit.source, config.schema_suffix, FILE_EXTENSION),
                content=printer.render_file(sources),
                source=unit.source,
            )
        )

    _check_output_names(files)
    return files


def compile_schemas(schemas: list[LoadedSchema], config: GeneratorConfig) -> list[GeneratedFile]:
    """Check *schemas* against *config* and render them without writing."""
    units, registry = check_schemas(schemas, config.root_class)
    return render_units(units, registry, config)


def generate(config: GeneratorConfig, base_dir: Path) -> GenerationResult:
    """Run the whole pipeline for the configuration found in *base_dir*.

    Globs, static file sources and the output directory are all relative to
    *base_dir*.

    Raises:
        CompilerError: Any stage failure; nothing is retried.
    """
    schemas = load_schemas(config.schema_globs, base_dir)
    result = GenerationResult(schemas=[s.path for s in schemas])
    if not schemas:
        return result

    files = compile_schemas(schemas, config)
    output_dir = base_dir / config.output_dir
    result.copied = copy_static_files(config.static_files, base_dir, output_dir)
    result.written = write_outputs(files, output_dir)
    return result


# ################
# Implementation
# ################


def _is_remote_class(registry: TypeRegistry, name: str) -> bool:
    return name in registry and registry.kind_of(name) is TypeKind.REMOTE_CLASS


def _check_output_names(files: list[GeneratedFile]) -> None:
    """Reject files that would overwrite each other, also on case-insensitive file systems."""
    claimed: dict[str, GeneratedFile] = {}
    for generated in files:
        key = generated.name.lower()
        other = claimed.get(key)
        if other is not None:
            raise ConfigError(
                f"Output file '{generated.name}' for '{generated.source}' "
                f"collides with '{other.name}' generated from '{other.source}'"
            )
        claimed[key] = generated
