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
"""Directed asset dependency graph backed by NetworkX.

The graph stores one AssetNode per path and a directed "depends on" edge for
every reference the scanner found. Forward adjacency (what an asset uses) is
NetworkX's successor view, reverse adjacency (what uses an asset) is the
predecessor view, so the two are always exact transposes of each other.
Neighbor iteration follows insertion order, which keeps traversals and path
queries reproducible.

Derived analyses (CycleDetector, OptimizationEngine) cache results computed
from a graph. The graph does not notify them: whoever mutates the graph must
invalidate those caches.
"""

import logging
from collections import deque
from typing import AbstractSet, Callable, Deque, Dict, Iterator, List, Optional, Set, Tuple

import networkx as nx

from assetgraph.asset_node import AssetNode, AssetType
from assetgraph.constants import InvalidArgumentError, PreconditionFailedError

logger = logging.getLogger(__name__)

# Node attribute holding the AssetNode
ASSET_ATTR = "asset"

_EMPTY: AbstractSet[str] = frozenset()


class DependencyGraph:
    """Directed graph of asset dependencies.

    Self-edges are not representable through add_edge(). A producer that
    observed a genuine self-reference records it with mark_self_reference();
    it is kept apart from the edge set and only the cycle detector reads it.
    """

    def __init__(self) -> None:
        self._graph: "nx.DiGraph[str]" = nx.DiGraph()
        self._self_references: Set[str] = set()

    # ------------------------------------------------------------------
    # Mutation (graph producer only)
    # ------------------------------------------------------------------

    def add_node(self, node: AssetNode) -> None:
        """Add an asset node.

        Re-adding a path that already exists is a no-op; the first node wins.

        Raises:
            InvalidArgumentError: If node is None
        """
        if node is None:
            raise InvalidArgumentError("node must not be None")

        if node.path in self._graph:
            return

        self._graph.add_node(node.path, **{ASSET_ATTR: node})

    def add_asset(self, path: str, size_bytes: int = 0) -> AssetNode:
        """Create an AssetNode for path and add it; returns the stored node."""
        self.add_node(AssetNode(path, size_bytes))
        return self._graph.nodes[path][ASSET_ATTR]

    def add_edge(self, from_path: str, to_path: str) -> None:
        """Record that from_path depends on to_path.

        Adding the same edge twice has no further effect. An edge from a node to
        itself is silently ignored.

        Raises:
            InvalidArgumentError: If either identifier is empty
            PreconditionFailedError: If either endpoint is not a known node
        """
        if not from_path:
            raise InvalidArgumentError("from_path must be a non-empty string")
        if not to_path:
            raise InvalidArgumentError("to_path must be a non-empty string")
        if from_path == to_path:
            return
        if from_path not in self._graph:
            raise PreconditionFailedError(f"Node not found: {from_path}")
        if to_path not in self._graph:
            raise PreconditionFailedError(f"Node not found: {to_path}")

        self._graph.add_edge(from_path, to_path)

    def mark_self_reference(self, path: str) -> None:
        """Record that an asset references itself.

        Raises:
            InvalidArgumentError: If path is empty
            PreconditionFailedError: If path is not a known node
        """
        if not path:
            raise InvalidArgumentError("path must be a non-empty string")
        if path not in self._graph:
            raise PreconditionFailedError(f"Node not found: {path}")

        self._self_references.add(path)

    def remove_node(self, path: str) -> None:
        """Remove a node and every edge touching it. Unknown paths are ignored."""
        if path not in self._graph:
            return

        self._graph.remove_node(path)
        self._self_references.discard(path)
        logger.debug("Removed node %s", path)

    def clear(self) -> None:
        """Reset to the empty graph."""
        self._graph.clear()
        self._self_references.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_node(self, path: str) -> Optional[AssetNode]:
        """Return the node stored for path, or None."""
        if path not in self._graph:
            return None
        node: AssetNode = self._graph.nodes[path][ASSET_ATTR]
        return node

    def contains_node(self, path: str) -> bool:
        return path in self._graph

    def __contains__(self, path: object) -> bool:
        try:
            return path in self._graph
        except TypeError:
            return False

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def nodes(self) -> Iterator[AssetNode]:
        """Iterate over all nodes in insertion order."""
        return (data[ASSET_ATTR] for _, data in self._graph.nodes(data=True))

    @property
    def paths(self) -> List[str]:
        """All node paths in insertion order."""
        return list(self._graph.nodes)

    def has_self_reference(self, path: str) -> bool:
        return path in self._self_references

    def get_dependencies(self, path: str) -> AbstractSet[str]:
        """Direct dependencies of path (snapshot, insertion order).

        Safe to iterate while mutating the graph. Unknown paths yield an empty set.
        """
        if path not in self._graph:
            return _EMPTY
        return dict.fromkeys(self._graph.succ[path]).keys()

    def get_dependents(self, path: str) -> AbstractSet[str]:
        """Assets that directly depend on path (snapshot, insertion order).

        Unknown paths yield an empty set.
        """
        if path not in self._graph:
            return _EMPTY
        return dict.fromkeys(self._graph.pred[path]).keys()

    def get_all_dependencies(self, path: str) -> Set[str]:
        """Transitive closure of dependencies, computed breadth-first.

        The result contains path itself only when path lies on a cycle.
        """
        return self._closure(path, self.get_dependencies)

    def get_all_dependents(self, path: str) -> Set[str]:
        """Transitive closure of dependents (everything that pulls path in)."""
        return self._closure(path, self.get_dependents)

    @staticmethod
    def _closure(start: str, neighbors: Callable[[str], AbstractSet[str]]) -> Set[str]:
        result: Set[str] = set()
        queue: Deque[str] = deque([start])

        while queue:
            current = queue.popleft()
            for neighbor in neighbors(current):
                if neighbor not in result:
                    result.add(neighbor)
                    queue.append(neighbor)

        return result

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def get_total_size(self) -> int:
        """Sum of all node sizes in bytes."""
        return sum(node.size_bytes for node in self.nodes)

    def get_nodes_by_size(self, top_n: Optional[int] = None) -> List[AssetNode]:
        """Nodes sorted by size descending; equal sizes keep insertion order.

        Args:
            top_n: Maximum number of nodes to return (None = all)
        """
        ranked = sorted(self.nodes, key=lambda node: node.size_bytes, reverse=True)
        if top_n is None:
            return ranked
        return ranked[: max(0, top_n)]

    def get_size_by_type(self) -> Dict[AssetType, Tuple[int, int]]:
        """Group nodes by asset type.

        Returns:
            Dictionary mapping AssetType → (total_size_bytes, count)
        """
        totals: Dict[AssetType, Tuple[int, int]] = {}
        for node in self.nodes:
            size, count = totals.get(node.asset_type, (0, 0))
            totals[node.asset_type] = (size + node.size_bytes, count + 1)
        return totals

    def to_networkx(self) -> "nx.DiGraph[str]":
        """Return an independent NetworkX copy (nodes carry the 'asset' attribute)."""
        return self._graph.copy()

    def __repr__(self) -> str:
        return f"DependencyGraph(nodes={self.node_count}, edges={self.edge_count})"
