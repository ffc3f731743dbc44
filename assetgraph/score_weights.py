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
"""Penalty weight configuration for the project health score.

Supports three scoring profiles:

- LENIENT: Smaller penalties (prototypes, early production)
- STANDARD: Default weights
- STRICT: Larger penalties and a lower large-asset threshold (shipping builds)

Example usage:
    from assetgraph.score_weights import ScoringProfile, ScoreWeights

    weights = ScoreWeights.for_profile(ScoringProfile.STRICT)
    calculator = HealthScoreCalculator(graph, weights=weights)
"""

from dataclasses import dataclass
from enum import Enum

from assetgraph.constants import (
    CIRCULAR_DEPENDENCY_PENALTY,
    LARGE_ASSET_PENALTY,
    LARGE_ASSET_THRESHOLD,
    OPTIMIZATION_ERROR_PENALTY,
    OPTIMIZATION_WARNING_PENALTY,
    UNUSED_ASSET_PENALTY,
    InvalidArgumentError,
)


class ScoringProfile(Enum):
    """How harshly project problems are penalized."""

    LENIENT = "lenient"
    STANDARD = "standard"
    STRICT = "strict"


@dataclass(frozen=True)
class ScoreWeights:
    """Immutable penalty weights used by HealthScoreCalculator.

    Attributes:
        unused_asset: Penalty per unused asset
        circular_dependency: Penalty per dependency cycle
        optimization_warning: Penalty per warning-level issue
        optimization_error: Penalty per error-level issue
        large_asset: Penalty per asset above large_asset_threshold
        large_asset_threshold: Size in bytes above which an asset counts as large
    """

    unused_asset: float = UNUSED_ASSET_PENALTY
    circular_dependency: float = CIRCULAR_DEPENDENCY_PENALTY
    optimization_warning: float = OPTIMIZATION_WARNING_PENALTY
    optimization_error: float = OPTIMIZATION_ERROR_PENALTY
    large_asset: float = LARGE_ASSET_PENALTY
    large_asset_threshold: int = LARGE_ASSET_THRESHOLD

    def __post_init__(self) -> None:
        """Validate weights are non-negative and the threshold is positive."""
        for name in ("unused_asset", "circular_dependency", "optimization_warning", "optimization_error", "large_asset"):
            if getattr(self, name) < 0:
                raise InvalidArgumentError(f"{name} weight must be non-negative")
        if self.large_asset_threshold <= 0:
            raise InvalidArgumentError("large_asset_threshold must be positive")

    @staticmethod
    def for_profile(profile: ScoringProfile) -> "ScoreWeights":
        """Factory method to create ScoreWeights for a scoring profile.

        Example:
            >>> ScoreWeights.for_profile(ScoringProfile.STANDARD).circular_dependency
            10
        """
        if profile == ScoringProfile.LENIENT:
            return ScoreWeights(
                unused_asset=1,
                circular_dependency=5,
                optimization_warning=0.5,
                optimization_error=2,
                large_asset=0.5,
                large_asset_threshold=32 * 1024 * 1024,
            )
        elif profile == ScoringProfile.STRICT:
            return ScoreWeights(
                unused_asset=3,
                circular_dependency=15,
                optimization_warning=2,
                optimization_error=5,
                large_asset=2,
                large_asset_threshold=4 * 1024 * 1024,
            )
        else:  # ScoringProfile.STANDARD (default)
            return ScoreWeights()
