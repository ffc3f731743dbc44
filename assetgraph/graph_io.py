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
"""Load and save DependencyGraph dumps produced by an asset scanner.

Dump format (plain or gzip compressed JSON):

    {
      "assets": [{"path": "Assets/A.prefab", "size": 1024}, ...],
      "dependencies": {"Assets/A.prefab": ["Assets/B.mat", ...], ...}
    }

A path listing itself as a dependency is recorded as a self-reference rather
than an edge.
"""

import gzip
import json
import logging
from typing import IO, Any, Dict, List, Mapping

from assetgraph.constants import GRAPH_ASSETS_KEY, GRAPH_DEPENDENCIES_KEY, AssetGraphError, GraphLoadError
from assetgraph.dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


def _open_dump(filename: str, mode: str) -> IO[str]:
    if filename.endswith(".gz"):
        return gzip.open(filename, mode + "t", encoding="utf-8")  # type: ignore[return-value]
    return open(filename, mode, encoding="utf-8")


def graph_from_dict(data: Mapping[str, Any]) -> DependencyGraph:
    """Build a DependencyGraph from a decoded dump.

    Args:
        data: Decoded JSON object with "assets" and optional "dependencies"

    Returns:
        The populated graph

    Raises:
        GraphLoadError: If the structure is invalid or a dependency names an unknown asset
    """
    if not isinstance(data, Mapping):
        raise GraphLoadError("Graph dump must be a JSON object")

    assets = data.get(GRAPH_ASSETS_KEY)
    if not isinstance(assets, list):
        raise GraphLoadError(f"Graph dump must contain an '{GRAPH_ASSETS_KEY}' list")

    dependencies = data.get(GRAPH_DEPENDENCIES_KEY, {})
    if not isinstance(dependencies, Mapping):
        raise GraphLoadError(f"'{GRAPH_DEPENDENCIES_KEY}' must map asset paths to lists of paths")

    graph = DependencyGraph()
    try:
        for entry in assets:
            if not isinstance(entry, Mapping) or "path" not in entry:
                raise GraphLoadError(f"Invalid asset entry: {entry!r}")
            graph.add_asset(entry["path"], int(entry.get("size", 0)))

        for from_path, to_paths in dependencies.items():
            if not isinstance(to_paths, list):
                raise GraphLoadError(f"Dependencies of {from_path} must be a list")
            for to_path in to_paths:
                if to_path == from_path:
                    graph.mark_self_reference(from_path)
                else:
                    graph.add_edge(from_path, to_path)
    except GraphLoadError:
        raise
    except (AssetGraphError, TypeError, ValueError) as e:
        raise GraphLoadError(f"Invalid graph dump: {e}") from e

    logger.info("Loaded graph with %s assets and %s dependencies", graph.node_count, graph.edge_count)
    return graph


def load_graph(filename: str) -> DependencyGraph:
    """Load a graph dump from disk (gzip when the name ends in .gz).

    Raises:
        GraphLoadError: If the file cannot be read or is not a valid dump
    """
    logger.info("Loading graph from %s", filename)

    try:
        with _open_dump(filename, "r") as f:
            data = json.load(f)
    except (IOError, OSError) as e:
        logger.error("Failed to load graph: %s", e)
        raise GraphLoadError(f"Failed to load graph from {filename}: {e}") from e
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in graph file: %s", e)
        raise GraphLoadError(f"Invalid JSON in {filename}: {e}") from e

    return graph_from_dict(data)


def graph_to_dict(graph: DependencyGraph) -> Dict[str, Any]:
    """Encode a graph in the dump format (keys and dependency lists sorted)."""
    dependencies: Dict[str, List[str]] = {}
    for path in sorted(graph.paths):
        targets = sorted(graph.get_dependencies(path))
        if graph.has_self_reference(path):
            targets = sorted(targets + [path])
        if targets:
            dependencies[path] = targets

    return {
        GRAPH_ASSETS_KEY: [{"path": node.path, "size": node.size_bytes} for node in sorted(graph.nodes, key=lambda n: n.path)],
        GRAPH_DEPENDENCIES_KEY: dependencies,
    }


def save_graph(graph: DependencyGraph, filename: str) -> None:
    """Write a graph dump to disk (gzip when the name ends in .gz).

    Raises:
        IOError: If the file cannot be written
    """
    try:
        with _open_dump(filename, "w") as f:
            json.dump(graph_to_dict(graph), f, indent=2, sort_keys=True)
    except IOError as e:
        logger.error("Failed to save graph: %s", e)
        raise IOError(f"Failed to save graph to {filename}: {e}") from e

    logger.info("Saved graph with %s assets to %s", graph.node_count, filename)
