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
"""Impact analysis for deleting assets: what breaks and what else can go."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set

from assetgraph.asset_node import AssetType, format_bytes
from assetgraph.dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


class ImpactLevel(Enum):
    NONE = "none"
    POTENTIALLY_ORPHANED = "potentially_orphaned"
    BROKEN = "broken"


@dataclass
class AffectedAsset:
    """An asset touched by a deletion."""

    path: str
    name: str
    asset_type: AssetType
    impact: ImpactLevel
    size_bytes: int = 0

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.size_bytes)


@dataclass
class DeleteImpactResult:
    """Consequences of deleting one asset (or a set of assets).

    Attributes:
        target_path: Deleted asset (or a summary of several paths)
        is_valid: False when the target is not in the graph
        is_safe_to_delete: True when nothing outside the deletion depends on it
        directly_affected: Dependents that would lose a reference
        cascade_affected: Dependencies whose only dependent is the target
        safe_to_delete_together: Transitive dependencies used only from within the target's tree
        affected_scenes: Scenes among the directly affected assets
        total_deletable_size: Target size plus sizes of safe_to_delete_together
    """

    target_path: str
    target_name: str = ""
    target_type: AssetType = AssetType.OTHER
    target_size: int = 0
    is_valid: bool = False
    is_safe_to_delete: bool = False
    directly_affected: List[AffectedAsset] = field(default_factory=list)
    cascade_affected: List[AffectedAsset] = field(default_factory=list)
    safe_to_delete_together: List[AffectedAsset] = field(default_factory=list)
    affected_scenes: List[str] = field(default_factory=list)
    total_affected_count: int = 0
    total_deletable_size: int = 0

    @property
    def formatted_deletable_size(self) -> str:
        return format_bytes(self.total_deletable_size)


class DeleteImpactAnalyzer:
    """Read-only analysis of what deleting assets would do to the graph."""

    def __init__(self, graph: DependencyGraph) -> None:
        self._graph = graph

    def analyze(self, path: str) -> DeleteImpactResult:
        result = DeleteImpactResult(target_path=path)

        target = self._graph.get_node(path)
        if target is None:
            logger.debug("Delete impact requested for unknown asset %s", path)
            return result

        result.is_valid = True
        result.target_name = target.name
        result.target_type = target.asset_type
        result.target_size = target.size_bytes

        for dependent in self._graph.get_dependents(path):
            affected = self._affected(dependent, ImpactLevel.BROKEN)
            if affected is not None:
                result.directly_affected.append(affected)
                if affected.asset_type == AssetType.SCENE:
                    result.affected_scenes.append(dependent)

        for orphan in self.find_orphan_candidates(path):
            affected = self._affected(orphan, ImpactLevel.POTENTIALLY_ORPHANED)
            if affected is not None:
                result.cascade_affected.append(affected)

        for exclusive in self.find_exclusive_dependencies(path):
            affected = self._affected(exclusive, ImpactLevel.NONE)
            if affected is not None:
                result.safe_to_delete_together.append(affected)

        result.total_affected_count = len(result.directly_affected) + len(result.cascade_affected)
        result.total_deletable_size = result.target_size + sum(asset.size_bytes for asset in result.safe_to_delete_together)
        result.is_safe_to_delete = not result.directly_affected
        return result

    def analyze_multiple(self, paths: Iterable[str]) -> DeleteImpactResult:
        """Analyze deleting several assets at once.

        Only dependents outside the deletion set count as affected.
        """
        path_list = list(dict.fromkeys(paths))
        summary = ", ".join(path_list[:3]) + ("..." if len(path_list) > 3 else "")
        result = DeleteImpactResult(target_path=summary, is_valid=True)

        deleted = set(path_list)
        affected_paths: List[str] = []
        for path in path_list:
            for dependent in self._graph.get_dependents(path):
                if dependent not in deleted and dependent not in affected_paths:
                    affected_paths.append(dependent)

        for dependent in affected_paths:
            affected = self._affected(dependent, ImpactLevel.BROKEN)
            if affected is not None:
                result.directly_affected.append(affected)

        result.target_size = sum(node.size_bytes for node in (self._graph.get_node(p) for p in path_list) if node is not None)
        result.total_affected_count = len(result.directly_affected)
        result.is_safe_to_delete = not result.directly_affected
        return result

    def find_orphan_candidates(self, path: str) -> List[str]:
        """Direct dependencies whose only dependent is path."""
        orphans: List[str] = []
        for dependency in self._graph.get_dependencies(path):
            dependents = self._graph.get_dependents(dependency)
            if len(dependents) == 1 and path in dependents:
                orphans.append(dependency)
        return orphans

    def find_exclusive_dependencies(self, path: str) -> List[str]:
        """Transitive dependencies referenced only by path or by other exclusive dependencies.

        Starts from the whole dependency tree and drops anything still referenced
        from outside it until nothing changes.
        """
        exclusive: Set[str] = self._graph.get_all_dependencies(path)
        exclusive.discard(path)

        changed = True
        while changed:
            changed = False
            for dependency in list(exclusive):
                if any(dependent != path and dependent not in exclusive for dependent in self._graph.get_dependents(dependency)):
                    exclusive.discard(dependency)
                    changed = True

        return sorted(exclusive)

    def _affected(self, path: str, impact: ImpactLevel) -> Optional[AffectedAsset]:
        node = self._graph.get_node(path)
        if node is None:
            return None
        return AffectedAsset(path=path, name=node.name, asset_type=node.asset_type, impact=impact, size_bytes=node.size_bytes)
