# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler front end for IDL files: loading, normalization, registration and checks.

`kmdgen.compiler.build` and `kmdgen.compiler.writer` import the printers and the
configuration and are not re-exported here.
"""

from kmdgen.compiler.errors import (
    CompilerError,
    ConfigError,
    DuplicateTypeError,
    SchemaParseError,
    TemplateError,
    UnresolvedTypeError,
    WriteError,
)
from kmdgen.compiler.loader import LoadedSchema, expand_patterns, load_schema, load_schemas, parse_schema
from kmdgen.compiler.normalizer import Normalized, format_doc, lower_document, normalize, normalize_type, zero_value
from kmdgen.compiler.registry import TypeEntry, TypeKind, TypeRegistry, build_registry
from kmdgen.compiler.semantic_analysis import SemanticError, analyze, inheritance_chain

__all__ = [
    "expand_patterns",
    "parse_schema",
    "load_schema",
    "load_schemas",
    "LoadedSchema",
    "normalize",
    "normalize_type",
    "zero_value",
    "format_doc",
    "lower_document",
    "Normalized",
    "TypeRegistry",
    "TypeKind",
    "TypeEntry",
    "build_registry",
    "analyze",
    "inheritance_chain",
    "SemanticError",
    "CompilerError",
    "ConfigError",
    "SchemaParseError",
    "UnresolvedTypeError",
    "DuplicateTypeError",
    "TemplateError",
    "WriteError",
]
