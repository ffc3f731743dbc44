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
"""Circular dependency detection using Tarjan's strongly connected components.

The traversal is iterative: an explicit work stack of (node, neighbor iterator)
frames replaces recursion, so deep dependency chains never hit the
interpreter's recursion limit.

Results are memoized per detector. The detector does not observe the graph,
so after any add/remove of nodes or edges the caller must call clear_cache()
before trusting detect() again.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from assetgraph.dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


@dataclass
class DependencyCycle:
    """One strongly connected component reported as a cycle.

    Attributes:
        asset_paths: Members of the component, in the order Tarjan popped them
        is_self_reference: True for a single asset that references itself
    """

    asset_paths: List[str]
    is_self_reference: bool = False

    @property
    def cycle_size(self) -> int:
        return len(self.asset_paths)

    def get_ordered_cycle_path(self, graph: DependencyGraph) -> List[str]:
        """Return the members as a walk along real edges.

        Each element depends on the next one and the last depends on the first.
        Starting at the first member, the walk always follows the first
        unvisited in-cycle dependency. If that greedy walk cannot visit every
        member and close the ring (components that are not a simple ring), the
        member order is returned unchanged.
        """
        if len(self.asset_paths) <= 1:
            return list(self.asset_paths)

        members = set(self.asset_paths)
        start = self.asset_paths[0]
        visited: Set[str] = set()
        path: List[str] = []

        current: Optional[str] = start
        while current is not None and current not in visited:
            visited.add(current)
            path.append(current)
            current = next((dep for dep in graph.get_dependencies(current) if dep in members and dep not in visited), None)

        if len(path) < len(self.asset_paths) or start not in graph.get_dependencies(path[-1]):
            return list(self.asset_paths)

        return path

    def format_cycle(self, graph: DependencyGraph) -> str:
        """Format as "a → b → c → a" using asset names."""
        names = []
        for path in self.get_ordered_cycle_path(graph):
            node = graph.get_node(path)
            names.append(node.name if node is not None else path)

        if names:
            names.append(names[0])

        return " → ".join(names)


@dataclass
class CycleDetectionResult:
    """Outcome of one detection run.

    Attributes:
        cycles: Every detected cycle
        total_cycles: Number of cycles
        total_assets_in_cycles: Number of distinct assets across all cycles
        assets_in_cycles: Set of all assets that are part of some cycle
    """

    cycles: List[DependencyCycle] = field(default_factory=list)
    total_cycles: int = 0
    total_assets_in_cycles: int = 0
    assets_in_cycles: Set[str] = field(default_factory=set)

    @property
    def has_cycles(self) -> bool:
        return self.total_cycles > 0


class CycleDetector:
    """Finds dependency cycles in a DependencyGraph and caches the result."""

    def __init__(self, graph: DependencyGraph) -> None:
        self._graph = graph
        self._cached_result: Optional[CycleDetectionResult] = None

    def clear_cache(self) -> None:
        """Drop the memoized result; the next detect() recomputes."""
        self._cached_result = None

    def detect(self) -> CycleDetectionResult:
        """Detect all cycles.

        Returns:
            The memoized CycleDetectionResult (the same object until clear_cache())
        """
        if self._cached_result is not None:
            logger.debug("Cycle detection cache hit")
            return self._cached_result

        result = CycleDetectionResult()
        for scc in self._strongly_connected_components():
            if len(scc) > 1:
                result.cycles.append(DependencyCycle(asset_paths=scc))
            elif self._graph.has_self_reference(scc[0]):
                result.cycles.append(DependencyCycle(asset_paths=scc, is_self_reference=True))

        for cycle in result.cycles:
            result.assets_in_cycles.update(cycle.asset_paths)
        result.total_cycles = len(result.cycles)
        result.total_assets_in_cycles = len(result.assets_in_cycles)

        logger.debug(
            "Detected %s cycles covering %s assets in %s nodes", result.total_cycles, result.total_assets_in_cycles, self._graph.node_count
        )
        self._cached_result = result
        return result

    def is_in_cycle(self, path: str) -> bool:
        return path in self.detect().assets_in_cycles

    def get_cycle_containing(self, path: str) -> Optional[List[str]]:
        """Return the members of the cycle that contains path, or None."""
        for cycle in self.detect().cycles:
            if path in cycle.asset_paths:
                return cycle.asset_paths
        return None

    def _strongly_connected_components(self) -> List[List[str]]:
        """Tarjan's algorithm over all nodes in insertion order.

        Every node is discovered exactly once; total work is O(nodes + edges).
        """
        index_counter = 0
        indices: Dict[str, int] = {}
        low_links: Dict[str, int] = {}
        stack: List[str] = []
        on_stack: Set[str] = set()
        sccs: List[List[str]] = []

        for root in self._graph.paths:
            if root in indices:
                continue

            work: List[Tuple[str, Iterator[str]]] = []

            indices[root] = low_links[root] = index_counter
            index_counter += 1
            stack.append(root)
            on_stack.add(root)
            work.append((root, iter(self._graph.get_dependencies(root))))

            while work:
                node, neighbors = work[-1]
                descended = False

                for successor in neighbors:
                    if successor not in indices:
                        indices[successor] = low_links[successor] = index_counter
                        index_counter += 1
                        stack.append(successor)
                        on_stack.add(successor)
                        work.append((successor, iter(self._graph.get_dependencies(successor))))
                        descended = True
                        break
                    if successor in on_stack:
                        low_links[node] = min(low_links[node], indices[successor])

                if descended:
                    continue

                # All successors done: finish node and propagate its low-link to the parent frame
                work.pop()
                if work:
                    parent = work[-1][0]
                    low_links[parent] = min(low_links[parent], low_links[node])

                if low_links[node] == indices[node]:
                    scc: List[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        scc.append(member)
                        if member == node:
                            break
                    sccs.append(scc)

        return sccs
