# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema loading: glob expansion, reading, and parsing of IDL documents."""

from __future__ import annotations

import glob
import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from kmdgen.compiler.errors import ConfigError, SchemaParseError
from kmdgen.model.schema import SchemaDocument

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class LoadedSchema:
    """A parsed IDL document together with the file it was read from."""

    path: Path
    document: SchemaDocument


def expand_patterns(patterns: list[str], root: Path) -> list[Path]:
    """Expand glob patterns into concrete schema files.

    Relative patterns are resolved against *root*. Matches of each pattern are
    sorted so that output order never depends on directory listing order, and a
    file matched by several patterns keeps its first position.

    Args:
        patterns: Glob patterns, in priority order. ``**`` matches recursively.
        root: Directory that relative patterns are anchored to.

    Returns:
        The de-duplicated list of matching files.

    Raises:
        ConfigError: If a pattern is empty or malformed.
    """
    paths: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        _check_pattern(pattern)
        matches = sorted(glob.glob(pattern, root_dir=root, recursive=True))
        for match in matches:
            path = root / match
            if not path.is_file() or path in seen:
                continue
            seen.add(path)
            paths.append(path)
    return paths


def parse_schema(text: str, source_label: str = "<string>") -> SchemaDocument:
    """Parse the text of an IDL document.

    Literal newlines are flattened to spaces first, since documentation
    strings in descriptor files are often wrapped by hand.

    Raises:
        SchemaParseError: If the text is not valid JSON or does not have the
            shape of an IDL document.
    """
    flattened = text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    try:
        data = json.loads(flattened)
    except json.JSONDecodeError as exc:
        raise SchemaParseError(f"Invalid JSON in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise SchemaParseError(f"{source_label}: an IDL document must be a JSON object")

    try:
        return SchemaDocument.model_validate(data)
    except ValidationError as exc:
        raise SchemaParseError(f"Invalid IDL document {source_label}: {exc}") from exc


def load_schema(path: Path) -> LoadedSchema:
    """Read and parse one IDL file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaParseError(f"Cannot read schema file '{path}': {exc}") from exc
    return LoadedSchema(path=path, document=parse_schema(text, source_label=str(path)))


def load_schemas(patterns: list[str], root: Path) -> list[LoadedSchema]:
    """Expand *patterns* under *root* and load every matching IDL file."""
    return [load_schema(path) for path in expand_patterns(patterns, root)]


# ################
# Implementation
# ################


def _check_pattern(pattern: str) -> None:
    """Reject patterns that glob would silently treat as literals."""
    if not pattern.strip():
        raise ConfigError("Empty schema glob pattern")

    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            # A ']' directly after '[' or '[!' is a literal member of the class.
            j = i + 1
            if j < len(pattern) and pattern[j] == "!":
                j += 1
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                raise ConfigError(f"Malformed glob pattern '{pattern}': unterminated character class")
            i = close
        i += 1
