# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the kmdgen command-line interface."""

import argparse
import sys
from pathlib import Path

from kmdgen.compiler.build import check_schemas, generate, render_units
from kmdgen.compiler.errors import CompilerError
from kmdgen.compiler.loader import load_schemas
from kmdgen.config import CONFIG_FILE_NAME, GeneratorConfig, load_config

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the kmdgen CLI."""
    parser = argparse.ArgumentParser(
        prog="kmdgen",
        description="kmdgen: Go bindings generator for Kurento module descriptors",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Create a starter configuration file",
        description=f"Write a starter {CONFIG_FILE_NAME} into a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to create the configuration in (default: current directory)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check the schema files without generating code",
        description="Load, validate and render every configured schema file without writing anything.",
    )
    _add_project_arguments(check_parser)

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the Go bindings",
        description="Generate one Go file per schema file into the configured output directory.",
    )
    _add_project_arguments(generate_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_STARTER_CONFIG = """\
# kmdgen configuration
# Globs are relative to this file and processed in order.
schema-globs:
  - kms-core/src/server/interface/core.kmd.json
  - kms-elements/src/server/interface/elements.*.kmd.json
  - kms-filters/src/server/interface/filters.*.kmd.json
output-dir: kurento
package-name: kurento
root-class: MediaObject
error-return: absent
static-files: []
"""


def _add_project_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help=f"Directory containing {CONFIG_FILE_NAME} (default: current directory)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to the configuration file (default: DIRECTORY/{CONFIG_FILE_NAME})",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "generate":
        return _cmd_generate(args)
    return 0


def _load_project(args: argparse.Namespace) -> tuple[GeneratorConfig, Path] | None:
    """Resolve and load the configuration; print the problem and return None on failure."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None

    config_path = Path(args.config).resolve() if args.config else directory / CONFIG_FILE_NAME
    if not config_path.exists():
        print(
            f"Error: no configuration found at '{config_path}'. Run 'kmdgen init' to create one.",
            file=sys.stderr,
        )
        return None

    try:
        config = load_config(config_path)
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None

    return config, config_path.parent


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: configuration already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(_STARTER_CONFIG, encoding="utf-8")
    print(f"Created configuration at '{config_file}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    project = _load_project(args)
    if project is None:
        return 1
    config, base_dir = project

    try:
        schemas = load_schemas(config.schema_globs, base_dir)
        if not schemas:
            print("No schema files matched the configured globs.")
            return 0
        print(f"Checking {len(schemas)} schema file(s)...")
        units, registry = check_schemas(schemas, config.root_class)
        # Render everything, write nothing.
        render_units(units, registry, config)
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    class_count = sum(len(u.classes) for u in units)
    print(f"Found {class_count} remote class(es) and {len(registry) - class_count} complex type(s).")
    print("No issues found.")
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    project = _load_project(args)
    if project is None:
        return 1
    config, base_dir = project

    try:
        result = generate(config, base_dir)
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not result.schemas:
        print("No schema files matched the configured globs.")
        return 0

    for path in result.copied:
        print(f"  copied {path}")
    for path in result.written:
        print(f"  wrote {path}")
    print(f"Generated {len(result.written)} file(s) from {len(result.schemas)} schema file(s).")
    return 0
