# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy shared by every stage of the bindings compiler.

None of these errors is recovered locally: each one aborts the whole run and
is reported once by the CLI.
"""

# ###############
# Public Interface
# ###############


class CompilerError(Exception):
    """Raised when the compiler encounters any unrecoverable error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(CompilerError):
    """Raised for an invalid configuration file or a malformed glob pattern."""


class SchemaParseError(CompilerError):
    """Raised for malformed JSON or a structurally invalid IDL document."""


class UnresolvedTypeError(CompilerError):
    """Raised when a referenced type name has no registry entry."""


class DuplicateTypeError(CompilerError):
    """Raised when two declarations in the corpus share a type name."""


class TemplateError(CompilerError):
    """Raised when a declaration cannot be rendered as target source code."""


class WriteError(CompilerError):
    """Raised when an output file cannot be written."""
