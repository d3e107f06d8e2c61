# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Code printers over the normalized IR."""

from kmdgen.codegen.go import FILE_EXTENSION, GoOptions, GoPrinter, GoSource, enum_constant_name

__all__ = [
    "FILE_EXTENSION",
    "GoOptions",
    "GoPrinter",
    "GoSource",
    "enum_constant_name",
]
