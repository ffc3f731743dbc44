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
"""Pluggable optimization rules and the cached rule-evaluation engine.

The engine evaluates every registered rule against every asset and keeps two
cache tiers:

- the whole-graph OptimizationReport returned by analyze()
- per-asset issue lists shared by analyze() and analyze_asset()

invalidate_asset() drops one asset's entry plus the whole report and leaves
every other asset's entry alone. Like the cycle detector, the engine does not
watch the graph: callers that mutate it must invalidate or clear_cache().
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from assetgraph.asset_node import AssetNode, format_bytes
from assetgraph.constants import InvalidArgumentError
from assetgraph.dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


class Severity(IntEnum):
    """Ordered issue severity (INFO < WARNING < ERROR)."""

    INFO = 0
    WARNING = 1
    ERROR = 2

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class OptimizationIssue:
    """One rule finding against one asset.

    Attributes:
        rule_name: Name of the rule that produced the issue
        asset_path: Path of the affected asset
        asset_name: Display name of the affected asset
        message: What is wrong
        recommendation: What to do about it
        severity: Issue severity
        potential_savings: Estimated bytes saved by fixing the issue (>= 0)
        is_auto_fixable: Whether an automatic remedy exists
    """

    rule_name: str
    asset_path: str
    asset_name: str
    message: str
    recommendation: str = ""
    severity: Severity = Severity.WARNING
    potential_savings: int = 0
    is_auto_fixable: bool = False

    def __post_init__(self) -> None:
        if self.potential_savings < 0:
            raise InvalidArgumentError(f"potential_savings must be non-negative: {self.rule_name} on {self.asset_path}")

    @property
    def formatted_savings(self) -> str:
        return format_bytes(self.potential_savings)


class OptimizationRule(ABC):
    """Base class for optimization rules.

    Rules must treat the graph as read-only. They may consult outside state
    (file contents, import settings); any cache they build is owned by the
    rule instance and reset through clear_cache().
    """

    rule_name: str
    description: str
    severity: Severity

    def __init__(self, *, rule_name: str, description: str, severity: Severity = Severity.WARNING) -> None:
        self.rule_name = rule_name
        self.description = description
        self.severity = severity

    @abstractmethod
    def evaluate(self, node: AssetNode, graph: DependencyGraph) -> Iterable[OptimizationIssue]:
        """Return the issues this rule finds for node (possibly none)."""

    def clear_cache(self) -> None:
        """Forget any state derived from a previous graph."""

    def invalidate_asset(self, path: str) -> None:
        """Forget any state derived from one asset that was changed or removed."""

    def create_issue(
        self,
        node: AssetNode,
        message: str,
        recommendation: str = "",
        potential_savings: int = 0,
        severity: Optional[Severity] = None,
        is_auto_fixable: bool = False,
    ) -> OptimizationIssue:
        return OptimizationIssue(
            rule_name=self.rule_name,
            asset_path=node.path,
            asset_name=node.name,
            message=message,
            recommendation=recommendation,
            severity=self.severity if severity is None else severity,
            potential_savings=potential_savings,
            is_auto_fixable=is_auto_fixable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rule_name={self.rule_name!r}, severity={self.severity.name})"


@dataclass
class OptimizationReport:
    """Aggregate result of evaluating all rules over the whole graph.

    Attributes:
        issues: All issues, severity descending then savings descending
        total_issues: Number of issues
        total_potential_savings: Sum of potential savings in bytes
        issues_by_severity: Issue count per severity (only severities present)
    """

    issues: List[OptimizationIssue] = field(default_factory=list)
    total_issues: int = 0
    total_potential_savings: int = 0
    issues_by_severity: Dict[Severity, int] = field(default_factory=dict)

    @classmethod
    def from_issues(cls, issues: Iterable[OptimizationIssue]) -> "OptimizationReport":
        """Build a report, sorting issues by severity then savings (stable)."""
        ordered = sorted(issues, key=lambda issue: (issue.severity, issue.potential_savings), reverse=True)
        by_severity: Dict[Severity, int] = {}
        for issue in ordered:
            by_severity[issue.severity] = by_severity.get(issue.severity, 0) + 1

        return cls(
            issues=ordered,
            total_issues=len(ordered),
            total_potential_savings=sum(issue.potential_savings for issue in ordered),
            issues_by_severity=by_severity,
        )

    @property
    def error_count(self) -> int:
        return self.issues_by_severity.get(Severity.ERROR, 0)

    @property
    def warning_count(self) -> int:
        return self.issues_by_severity.get(Severity.WARNING, 0)

    @property
    def info_count(self) -> int:
        return self.issues_by_severity.get(Severity.INFO, 0)

    @property
    def formatted_savings(self) -> str:
        return format_bytes(self.total_potential_savings)


class OptimizationEngine:
    """Evaluates registered rules against a DependencyGraph with two-tier caching."""

    def __init__(self, graph: DependencyGraph, rules: Optional[Iterable[OptimizationRule]] = None) -> None:
        """Initialize the engine.

        Args:
            graph: Graph to analyze (read-only for the engine)
            rules: Initial rules; None registers default_rules()
        """
        if rules is None:
            # Local import, rules.py imports this module
            from assetgraph.rules import default_rules

            rules = default_rules()

        self._graph = graph
        self._rules: List[OptimizationRule] = list(rules)
        self._report: Optional[OptimizationReport] = None
        self._asset_issues: Dict[str, Tuple[OptimizationIssue, ...]] = {}

    @property
    def rules(self) -> Sequence[OptimizationRule]:
        return tuple(self._rules)

    @property
    def last_report(self) -> Optional[OptimizationReport]:
        """The memoized report, or None if it was never computed or was invalidated."""
        return self._report

    def register_rule(self, rule: OptimizationRule) -> None:
        """Append a rule.

        Existing cache entries are kept; call clear_cache() to apply the new
        rule to assets that were already evaluated.
        """
        self._rules.append(rule)
        logger.debug("Registered rule %s", rule.rule_name)

    def analyze(self) -> OptimizationReport:
        """Evaluate all rules against all assets.

        Returns:
            The memoized OptimizationReport (the same object until invalidated)
        """
        if self._report is not None:
            logger.debug("Optimization report cache hit")
            return self._report

        issues: List[OptimizationIssue] = []
        for node in self._graph.nodes:
            issues.extend(self._issues_for(node))

        self._report = OptimizationReport.from_issues(issues)
        logger.info(
            "Analyzed %s assets with %s rules: %s issues, %s potential savings",
            self._graph.node_count,
            len(self._rules),
            self._report.total_issues,
            self._report.formatted_savings,
        )
        return self._report

    def analyze_asset(self, path: str) -> List[OptimizationIssue]:
        """Evaluate all rules for a single asset (memoized per asset).

        Unknown paths return an empty list.
        """
        node = self._graph.get_node(path)
        if node is None:
            return []
        return list(self._issues_for(node))

    def invalidate_asset(self, path: str) -> None:
        """Drop the cached issues of one asset and the whole-graph report.

        Cached issues of all other assets are preserved. Each rule is told about
        the asset so it can drop state derived from it.
        """
        self._asset_issues.pop(path, None)
        self._report = None
        for rule in self._rules:
            rule.invalidate_asset(path)
        logger.debug("Invalidated optimization cache for %s", path)

    def clear_cache(self) -> None:
        """Drop every cached result, including rule-owned caches."""
        self._asset_issues.clear()
        self._report = None
        for rule in self._rules:
            rule.clear_cache()

    def _issues_for(self, node: AssetNode) -> Tuple[OptimizationIssue, ...]:
        cached = self._asset_issues.get(node.path)
        if cached is not None:
            return cached

        found: List[OptimizationIssue] = []
        for rule in self._rules:
            found.extend(rule.evaluate(node, self._graph))

        issues = tuple(found)
        self._asset_issues[node.path] = issues
        return issues
