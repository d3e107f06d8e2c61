# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML loader for the ``kmdgen.yaml`` generator configuration."""

from __future__ import annotations

import re
from pathlib import Path

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from kmdgen.compiler.errors import ConfigError
from kmdgen.model.ir import ErrorReturnPolicy

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = "kmdgen.yaml"


class StaticFile(BaseModel):
    """A hand-written runtime file copied verbatim into the output directory."""

    model_config = ConfigDict(extra="forbid")

    source: str
    destination: str


class GeneratorConfig(BaseModel):
    """The parsed generator configuration.

    Attributes:
        schema_globs: Ordered glob patterns selecting the IDL files, relative to
            the configuration file's directory.
        output_dir: Directory receiving the generated package.
        package_name: Go package name written at the top of every file.
        root_class: Remote class that anchors construction and transport and
            therefore gets no capability interface.
        schema_suffix: Suffix stripped from schema file names to build output names.
        complex_types_suffix: Suffix of the per-schema complex-type files.
        error_return: Stub return policy for structured results.
        static_files: Runtime files copied into *output_dir*.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_globs: list[str] = Field(
        validation_alias=AliasChoices("schema-globs", "schemaGlobs", "schema_globs"), min_length=1
    )
    output_dir: str = Field(
        default="kurento", validation_alias=AliasChoices("output-dir", "outputDir", "output_dir")
    )
    package_name: str = Field(
        default="kurento", validation_alias=AliasChoices("package-name", "packageName", "package_name")
    )
    root_class: str = Field(default="MediaObject", validation_alias=AliasChoices("root-class", "root_class"))
    schema_suffix: str = Field(default=".kmd.json", validation_alias=AliasChoices("schema-suffix", "schema_suffix"))
    complex_types_suffix: str = Field(
        default="complex_types", validation_alias=AliasChoices("complex-types-suffix", "complex_types_suffix")
    )
    error_return: ErrorReturnPolicy = Field(
        default=ErrorReturnPolicy.ABSENT, validation_alias=AliasChoices("error-return", "error_return")
    )
    static_files: list[StaticFile] = Field(
        default_factory=list, validation_alias=AliasChoices("static-files", "static_files")
    )

    @field_validator("package_name")
    @classmethod
    def _check_package_name(cls, value: str) -> str:
        if not _PACKAGE_RE.match(value):
            raise ValueError(f"'{value}' is not a valid package name")
        return value


def load_config(path: Path) -> GeneratorConfig:
    """Load and validate a generator configuration file.

    Args:
        path: Path to the ``kmdgen.yaml`` file.

    Returns:
        A validated GeneratorConfig instance.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file: {exc}") from exc

    return parse_config(text, source_label=str(path))


def parse_config(text: str, source_label: str = "<string>") -> GeneratorConfig:
    """Parse configuration YAML text into a GeneratorConfig.

    Raises:
        ConfigError: If the YAML is invalid or does not match the configuration schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration {source_label}: {exc}") from exc


# ################
# Implementation
# ################

_PACKAGE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
