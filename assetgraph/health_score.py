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
"""Project health score: a single 0-100 number and letter grade.

The score starts at 100 and loses a weighted penalty per unused asset,
dependency cycle, optimization warning and error, and large asset. Inputs can
be passed to calculate(), preset with set_precomputed_results(), or left out
and computed from the graph.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from assetgraph.constants import (
    CATEGORY_CYCLES,
    CATEGORY_LARGE,
    CATEGORY_OPTIMIZATION,
    CATEGORY_UNUSED,
    GRADE_A_MIN,
    GRADE_B_MIN,
    GRADE_C_MIN,
    GRADE_D_MIN,
    MAX_HEALTH_SCORE,
)
from assetgraph.cycle_detector import CycleDetectionResult, CycleDetector
from assetgraph.dependency_graph import DependencyGraph
from assetgraph.optimization import OptimizationEngine, OptimizationReport
from assetgraph.score_weights import ScoreWeights
from assetgraph.unused_analysis import UnusedAssetAnalyzer, UnusedAssetResult

logger = logging.getLogger(__name__)


class HealthGrade(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"

    @staticmethod
    def for_score(score: float) -> "HealthGrade":
        if score >= GRADE_A_MIN:
            return HealthGrade.A
        if score >= GRADE_B_MIN:
            return HealthGrade.B
        if score >= GRADE_C_MIN:
            return HealthGrade.C
        if score >= GRADE_D_MIN:
            return HealthGrade.D
        return HealthGrade.F


@dataclass
class ScoreBreakdownItem:
    """Penalty contributed by one category."""

    category: str
    count: int
    penalty: float
    description: str


@dataclass
class HealthScoreResult:
    """Outcome of a health score calculation.

    Attributes:
        score: Health score in [0, 100]
        grade: Letter grade for score
        total_penalty: Sum of all category penalties (may exceed 100)
        breakdown: Exactly one item per category, in fixed order
    """

    score: float = MAX_HEALTH_SCORE
    grade: HealthGrade = HealthGrade.A
    total_penalty: float = 0
    unused_asset_count: int = 0
    unused_asset_size: int = 0
    circular_dependency_count: int = 0
    optimization_warning_count: int = 0
    optimization_error_count: int = 0
    large_asset_count: int = 0
    potential_savings: int = 0
    total_asset_count: int = 0
    breakdown: List[ScoreBreakdownItem] = field(default_factory=list)


class HealthScoreCalculator:
    """Combines unused, cycle, optimization and size findings into a health score."""

    def __init__(
        self,
        graph: DependencyGraph,
        weights: Optional[ScoreWeights] = None,
        unused_roots: Optional[Iterable[str]] = None,
    ) -> None:
        """Initialize the calculator.

        Args:
            graph: Graph to score
            weights: Penalty weights (default: ScoreWeights())
            unused_roots: Entry points for unused analysis; None skips it
        """
        self._graph = graph
        self._weights = weights if weights is not None else ScoreWeights()
        self._unused_roots = list(unused_roots) if unused_roots is not None else None
        self._precomputed_unused: Optional[UnusedAssetResult] = None
        self._precomputed_cycles: Optional[CycleDetectionResult] = None
        self._precomputed_report: Optional[OptimizationReport] = None

    @property
    def weights(self) -> ScoreWeights:
        return self._weights

    def set_precomputed_results(
        self,
        unused: Optional[UnusedAssetResult] = None,
        cycles: Optional[CycleDetectionResult] = None,
        report: Optional[OptimizationReport] = None,
    ) -> None:
        """Reuse results the caller already has instead of recomputing them."""
        self._precomputed_unused = unused
        self._precomputed_cycles = cycles
        self._precomputed_report = report

    def calculate(
        self,
        unused_result: Optional[UnusedAssetResult] = None,
        cycle_result: Optional[CycleDetectionResult] = None,
        optimization_report: Optional[OptimizationReport] = None,
    ) -> HealthScoreResult:
        """Calculate the health score.

        Each input is taken from the argument, then from the precomputed
        results, and otherwise computed from the graph. Unused assets are only
        analyzed when unused_roots were given; without them they count as zero.
        """
        unused = unused_result if unused_result is not None else self._precomputed_unused
        if unused is None:
            unused = self._analyze_unused()
        cycles = cycle_result if cycle_result is not None else self._precomputed_cycles
        if cycles is None:
            cycles = CycleDetector(self._graph).detect()
        report = optimization_report if optimization_report is not None else self._precomputed_report
        if report is None:
            report = OptimizationEngine(self._graph).analyze()

        weights = self._weights
        large_count = sum(1 for node in self._graph.nodes if node.size_bytes > weights.large_asset_threshold)

        result = HealthScoreResult(
            unused_asset_count=unused.total_unused_count,
            unused_asset_size=unused.total_unused_size,
            circular_dependency_count=cycles.total_cycles,
            optimization_warning_count=report.warning_count,
            optimization_error_count=report.error_count,
            large_asset_count=large_count,
            potential_savings=report.total_potential_savings,
            total_asset_count=self._graph.node_count,
        )

        result.breakdown = [
            ScoreBreakdownItem(
                category=CATEGORY_UNUSED,
                count=result.unused_asset_count,
                penalty=result.unused_asset_count * weights.unused_asset,
                description=f"{result.unused_asset_count} unused assets",
            ),
            ScoreBreakdownItem(
                category=CATEGORY_CYCLES,
                count=result.circular_dependency_count,
                penalty=result.circular_dependency_count * weights.circular_dependency,
                description=f"{result.circular_dependency_count} dependency cycles",
            ),
            ScoreBreakdownItem(
                category=CATEGORY_OPTIMIZATION,
                count=result.optimization_warning_count + result.optimization_error_count,
                penalty=result.optimization_warning_count * weights.optimization_warning
                + result.optimization_error_count * weights.optimization_error,
                description=f"{result.optimization_error_count} errors, {result.optimization_warning_count} warnings",
            ),
            ScoreBreakdownItem(
                category=CATEGORY_LARGE,
                count=large_count,
                penalty=large_count * weights.large_asset,
                description=f"{large_count} assets above the large asset threshold",
            ),
        ]

        result.total_penalty = sum(item.penalty for item in result.breakdown)
        result.score = max(0, MAX_HEALTH_SCORE - result.total_penalty)
        result.grade = HealthGrade.for_score(result.score)

        logger.info("Health score %s (%s), total penalty %s", result.score, result.grade.value, result.total_penalty)
        return result

    def _analyze_unused(self) -> UnusedAssetResult:
        if self._unused_roots is None:
            logger.debug("No unused roots given, unused assets not analyzed")
            return UnusedAssetResult.from_totals(0)
        return UnusedAssetAnalyzer(self._graph, self._unused_roots).analyze()
