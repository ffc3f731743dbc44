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
"""Unused asset detection by reachability from caller-supplied roots.

Which assets are entry points (build scenes, bundles, runtime-loaded folders)
depends on the host, so the roots are passed in. Anything not reachable from
a root, and not excluded by a skip pattern, is reported as unused.
"""

import fnmatch
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set

from assetgraph.asset_node import AssetNode, AssetType, format_bytes
from assetgraph.constants import DEFAULT_KEEP_PATTERNS, DEFAULT_SKIP_PATTERNS
from assetgraph.dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


class UnusedCategory(Enum):
    """Where an unused asset lives, which hints at how safe it is to delete."""

    PROJECT_ASSET = "project_asset"
    IN_RESOURCES = "in_resources"
    IN_PLUGINS = "in_plugins"
    THIRD_PARTY = "third_party"


@dataclass
class UnusedAssetInfo:
    """One unused asset."""

    path: str
    name: str
    asset_type: AssetType
    size_bytes: int
    category: UnusedCategory

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.size_bytes)


@dataclass
class UnusedAssetResult:
    """Result of an unused asset analysis.

    Attributes:
        unused_assets: Unused assets sorted by size descending
        total_unused_size: Combined size of unused assets in bytes
        total_unused_count: Number of unused assets
        total_asset_count: Number of assets in the analyzed graph
    """

    unused_assets: List[UnusedAssetInfo] = field(default_factory=list)
    total_unused_size: int = 0
    total_unused_count: int = 0
    total_asset_count: int = 0

    @classmethod
    def from_totals(cls, unused_count: int, unused_size: int = 0) -> "UnusedAssetResult":
        """Wrap a precomputed count/size pair (no per-asset details)."""
        return cls(total_unused_count=unused_count, total_unused_size=unused_size)

    @property
    def unused_percentage(self) -> float:
        if self.total_asset_count <= 0:
            return 0.0
        return 100.0 * self.total_unused_count / self.total_asset_count

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.total_unused_size)


def categorize_unused(path: str) -> UnusedCategory:
    """Classify an unused asset by the folder it lives in."""
    if "/Resources/" in path:
        return UnusedCategory.IN_RESOURCES
    if "/Plugins/" in path:
        return UnusedCategory.IN_PLUGINS
    if "/ThirdParty/" in path or "/External/" in path:
        return UnusedCategory.THIRD_PARTY
    return UnusedCategory.PROJECT_ASSET


def _matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(path, pattern) for pattern in patterns)


class UnusedAssetAnalyzer:
    """Finds assets not reachable from any root."""

    def __init__(
        self,
        graph: DependencyGraph,
        roots: Iterable[str],
        keep_patterns: Optional[List[str]] = None,
        skip_patterns: Optional[List[str]] = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            graph: Graph to analyze
            roots: Entry point paths; unknown paths are ignored
            keep_patterns: Glob patterns of assets that count as roots (default: DEFAULT_KEEP_PATTERNS)
            skip_patterns: Glob patterns of assets never reported (default: DEFAULT_SKIP_PATTERNS)
        """
        self._graph = graph
        self._roots = list(roots)
        self._keep_patterns = DEFAULT_KEEP_PATTERNS if keep_patterns is None else keep_patterns
        self._skip_patterns = DEFAULT_SKIP_PATTERNS if skip_patterns is None else skip_patterns

    def collect_used_assets(self) -> Set[str]:
        """Return every asset reachable from a root or keep-pattern asset, roots included."""
        entry_points = [root for root in self._roots if self._graph.contains_node(root)]
        entry_points.extend(path for path in self._graph.paths if _matches_any(path, self._keep_patterns))

        used: Set[str] = set()
        for entry in entry_points:
            if entry in used:
                continue
            used.add(entry)
            used.update(self._graph.get_all_dependencies(entry))
        return used

    def analyze(self) -> UnusedAssetResult:
        used = self.collect_used_assets()

        unused: List[UnusedAssetInfo] = []
        for node in self._graph.nodes:
            if node.path in used or _matches_any(node.path, self._skip_patterns):
                continue
            unused.append(self._describe(node))

        unused.sort(key=lambda info: info.size_bytes, reverse=True)
        result = UnusedAssetResult(
            unused_assets=unused,
            total_unused_size=sum(info.size_bytes for info in unused),
            total_unused_count=len(unused),
            total_asset_count=self._graph.node_count,
        )
        logger.info("Found %s unused assets (%s) out of %s", result.total_unused_count, result.formatted_size, result.total_asset_count)
        return result

    @staticmethod
    def _describe(node: AssetNode) -> UnusedAssetInfo:
        return UnusedAssetInfo(
            path=node.path,
            name=node.name,
            asset_type=node.asset_type,
            size_bytes=node.size_bytes,
            category=categorize_unused(node.path),
        )
