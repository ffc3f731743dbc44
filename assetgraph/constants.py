#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Shared constants for assetCheck tools.

This module provides centralized constants used across the assetCheck tools
and the analysis library, plus the exception hierarchy raised by the library.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Health Score Constants
# =============================================================================

MAX_HEALTH_SCORE = 100

# Default penalty weights (see score_weights.ScoreWeights for profiles)
UNUSED_ASSET_PENALTY = 2  # Per unused asset
CIRCULAR_DEPENDENCY_PENALTY = 10  # Per dependency cycle
OPTIMIZATION_WARNING_PENALTY = 1  # Per warning-level issue
OPTIMIZATION_ERROR_PENALTY = 3  # Per error-level issue
LARGE_ASSET_PENALTY = 1  # Per asset above LARGE_ASSET_THRESHOLD
LARGE_ASSET_THRESHOLD = 10 * 1024 * 1024  # 10 MiB

# Grade boundaries (score >= boundary)
GRADE_A_MIN = 90
GRADE_B_MIN = 80
GRADE_C_MIN = 70
GRADE_D_MIN = 60

# Breakdown categories, always reported in this order
CATEGORY_UNUSED = "Unused Assets"
CATEGORY_CYCLES = "Circular Dependencies"
CATEGORY_OPTIMIZATION = "Optimization Issues"
CATEGORY_LARGE = "Large Assets"

# =============================================================================
# Unused Asset Analysis Constants
# =============================================================================

# Assets matching these patterns are loaded at runtime by name, so they count as used
DEFAULT_KEEP_PATTERNS = ["*/Resources/*", "*/StreamingAssets/*"]

# Assets matching these patterns are never reported as unused (frequent false positives)
DEFAULT_SKIP_PATTERNS = ["*/Editor/*", "Packages/*", "*.cs", "*.asmdef", "*.asmref"]

# =============================================================================
# Rule Constants
# =============================================================================

# Per-type size budgets for OversizedAssetRule (bytes)
DEFAULT_SIZE_BUDGETS = {
    "texture": 8 * 1024 * 1024,
    "audio": 16 * 1024 * 1024,
    "model": 32 * 1024 * 1024,
    "video": 64 * 1024 * 1024,
}

HASH_CHUNK_SIZE = 64 * 1024  # Read size when hashing file contents

# =============================================================================
# Display Limits
# =============================================================================

DEFAULT_TOP_N = 10  # Default number of issues/assets to list
MAX_CYCLES_DISPLAY = 20  # Maximum cycles to display
MAX_PATH_DISPLAY = 10  # Maximum why-included paths to display

# =============================================================================
# Graph Dump Format
# =============================================================================

GRAPH_ASSETS_KEY = "assets"
GRAPH_DEPENDENCIES_KEY = "dependencies"

# =============================================================================
# Exception Classes
# =============================================================================


class AssetGraphError(Exception):
    """Base exception for all assetgraph errors.

    All assetgraph exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class InvalidArgumentError(AssetGraphError, ValueError):
    """Raised on malformed input: missing node, empty identifier, negative size.

    Always a programming error in the caller.
    """

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class PreconditionFailedError(AssetGraphError):
    """Raised when an operation references a node the graph does not contain.

    Signals a producer bug, e.g. an edge emitted before both of its endpoints.
    """


class GraphLoadError(AssetGraphError):
    """Raised when a graph dump cannot be read or has an invalid structure."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)
