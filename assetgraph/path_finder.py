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
"""Shortest-path queries over a DependencyGraph.

All functions are stateless breadth-first searches. A missing path is an
ordinary outcome and is reported as None, never as an exception. Neighbors are
visited in insertion order, so among several shortest paths the one returned
is always the same for the same graph.
"""

from collections import deque
from typing import AbstractSet, Callable, Deque, Dict, Iterable, List, Optional

from assetgraph.dependency_graph import DependencyGraph


def _breadth_first_path(start: str, goal: str, neighbors: Callable[[str], AbstractSet[str]]) -> Optional[List[str]]:
    """Return [start, ..., goal] following neighbors(), or None if goal is unreachable."""
    parent: Dict[str, Optional[str]] = {start: None}
    queue: Deque[str] = deque([start])

    while queue:
        current = queue.popleft()
        if current == goal:
            path: List[str] = []
            step: Optional[str] = goal
            while step is not None:
                path.append(step)
                step = parent[step]
            path.reverse()
            return path

        for neighbor in neighbors(current):
            if neighbor not in parent:
                parent[neighbor] = current
                queue.append(neighbor)

    return None


def find_shortest_path(graph: DependencyGraph, from_path: str, to_path: str) -> Optional[List[str]]:
    """Find the shortest dependency chain from from_path to to_path.

    Args:
        graph: Graph to search
        from_path: Asset the chain starts at
        to_path: Asset the chain ends at

    Returns:
        [from_path, ..., to_path] where each asset depends on the next, or None
        when no chain exists. For from_path == to_path the result is
        [from_path] if the asset exists.
    """
    if from_path == to_path:
        return [from_path] if graph.contains_node(from_path) else None

    return _breadth_first_path(from_path, to_path, graph.get_dependencies)


def find_reverse_path(graph: DependencyGraph, target: str, root: str) -> Optional[List[str]]:
    """Find how root pulls in target by walking dependents upwards from target.

    Returns:
        [target, ..., root] where each asset is a direct dependency of the next,
        or None when root does not (transitively) depend on target.
    """
    if target == root:
        return [target] if graph.contains_node(target) else None

    return _breadth_first_path(target, root, graph.get_dependents)


def find_why_included(graph: DependencyGraph, roots: Iterable[str], target: str) -> Dict[str, List[str]]:
    """Explain why target is included, once per root.

    Args:
        graph: Graph to search
        roots: Entry points (scenes, bundles, ...) to search from
        target: Asset being explained

    Returns:
        Mapping of each root that reaches target to its shortest path. Roots
        that cannot reach target are left out.
    """
    result: Dict[str, List[str]] = {}

    for root in roots:
        path = find_shortest_path(graph, root, target)
        if path:
            result[root] = path

    return result
