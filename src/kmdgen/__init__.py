# Copyright 2026 kmdgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""kmdgen: Go bindings generator for Kurento module descriptors."""

__version__ = "0.1.0"
