# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the kmdgen documentation."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

project = "kmdgen"
author = "kmdgen Contributors"
release = "0.1.0"

# Docstrings use the Google "Args/Returns/Raises" layout.
extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_member_order = "bysource"
napoleon_numpy_docstring = False

html_theme = "alabaster"
