# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Output naming and writing of generated files."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from kmdgen.compiler.errors import ConfigError, WriteError
from kmdgen.config import StaticFile

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class GeneratedFile:
    """A rendered output file, named relative to the output directory."""

    name: str
    content: str
    source: Path


def output_name(source: Path, schema_suffix: str, extension: str, suffix: str = "") -> str:
    """Derive an output file name from a schema file name.

    ``elements.playerendpoint.kmd.json`` becomes ``elements_playerendpoint.go``,
    or ``elements_playerendpoint_complex_types.go`` with *suffix*
    ``complex_types``.
    """
    base = source.name
    if schema_suffix and base.endswith(schema_suffix):
        base = base[: -len(schema_suffix)]
    base = base.replace(".", "_")
    if suffix:
        base += "_" + suffix
    return (base + extension).lower()


def write_outputs(files: list[GeneratedFile], output_dir: Path) -> list[Path]:
    """Write every generated file below *output_dir*.

    Returns:
        The written paths, in input order.

    Raises:
        WriteError: If the directory cannot be created or a file cannot be written.
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(f"Cannot create output directory '{output_dir}': {exc}") from exc

    written: list[Path] = []
    for generated in files:
        path = output_dir / generated.name
        try:
            path.write_text(generated.content, encoding="utf-8")
        except OSError as exc:
            raise WriteError(f"Cannot write '{path}' (generated from '{generated.source}'): {exc}") from exc
        written.append(path)
    return written


def copy_static_files(entries: list[StaticFile], base_dir: Path, output_dir: Path) -> list[Path]:
    """Copy hand-written runtime files verbatim into *output_dir*.

    Sources are relative to *base_dir*, destinations relative to *output_dir*.

    Raises:
        ConfigError: If a source file does not exist.
        WriteError: If a file cannot be copied.
    """
    copied: list[Path] = []
    for entry in entries:
        source = base_dir / entry.source
        destination = output_dir / entry.destination
        if not source.is_file():
            raise ConfigError(f"Static file not found: {source}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as exc:
            raise WriteError(f"Cannot copy '{source}' to '{destination}': {exc}") from exc
        copied.append(destination)
    return copied
