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
"""Scene footprint analysis: everything a scene pulls in, grouped by asset type."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from assetgraph.asset_node import AssetNode, AssetType, format_bytes
from assetgraph.dependency_graph import DependencyGraph
from assetgraph.path_finder import find_shortest_path

logger = logging.getLogger(__name__)


@dataclass
class TypeBreakdown:
    """Count and combined size of one asset type within a scene."""

    asset_type: AssetType
    count: int = 0
    total_size: int = 0

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.total_size)

    def get_percentage(self, total_size: int) -> float:
        """Share of total_size taken by this type, 0.0 when total_size is not positive."""
        if total_size <= 0:
            return 0.0
        return 100.0 * self.total_size / total_size


@dataclass
class SceneAnalysisResult:
    """Transitive dependency footprint of one scene.

    Attributes:
        scene_path: Analyzed path
        scene_name: Scene name, empty when the scene is not in the graph
        is_valid: False when the scene is not in the graph
        dependencies: Every asset the scene depends on, directly or not, in graph order
        type_breakdown: Per-type count and size of the dependencies
        total_size: Combined size of the dependencies in bytes
        total_count: Number of dependencies
    """

    scene_path: str
    scene_name: str = ""
    is_valid: bool = False
    dependencies: List[AssetNode] = field(default_factory=list)
    type_breakdown: Dict[AssetType, TypeBreakdown] = field(default_factory=dict)
    total_size: int = 0
    total_count: int = 0

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.total_size)

    def get_top_types(self, count: int = 5) -> List[TypeBreakdown]:
        """The count largest types by total size."""
        return sorted(self.type_breakdown.values(), key=lambda breakdown: breakdown.total_size, reverse=True)[:count]


class SceneAnalyzer:
    """Summarizes what a scene includes."""

    def __init__(self, graph: DependencyGraph) -> None:
        self._graph = graph

    def analyze(self, scene_path: str) -> SceneAnalysisResult:
        result = SceneAnalysisResult(scene_path=scene_path)
        scene = self._graph.get_node(scene_path)
        if scene is None:
            return result

        result.scene_name = scene.name
        result.is_valid = True

        reachable = self._graph.get_all_dependencies(scene_path)
        for node in self._graph.nodes:
            if node.path not in reachable:
                continue
            result.dependencies.append(node)
            breakdown = result.type_breakdown.setdefault(node.asset_type, TypeBreakdown(node.asset_type))
            breakdown.count += 1
            breakdown.total_size += node.size_bytes

        result.total_size = sum(node.size_bytes for node in result.dependencies)
        result.total_count = len(result.dependencies)
        logger.debug("Scene %s includes %s assets (%s)", scene_path, result.total_count, result.formatted_size)
        return result

    def find_inclusion_path(self, from_path: str, to_path: str) -> Optional[List[str]]:
        """Shortest chain of dependencies from from_path to to_path, or None."""
        return find_shortest_path(self._graph, from_path, to_path)

    def format_inclusion_path(self, path: Optional[List[str]]) -> str:
        """Format a chain as "Main → Player → Hero" using asset names."""
        if not path:
            return "No path found"

        names = []
        for item in path:
            node = self._graph.get_node(item)
            names.append(node.name if node is not None else item)
        return " → ".join(names)
