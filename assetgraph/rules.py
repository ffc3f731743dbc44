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
"""Built-in optimization rules that work from the graph and file contents alone."""

import hashlib
import logging
import os
from collections import defaultdict
from typing import DefaultDict, Dict, Iterable, List, Mapping, Optional

from assetgraph.asset_node import AssetNode, AssetType, format_bytes
from assetgraph.constants import DEFAULT_SIZE_BUDGETS, HASH_CHUNK_SIZE
from assetgraph.dependency_graph import DependencyGraph
from assetgraph.optimization import OptimizationIssue, OptimizationRule, Severity

logger = logging.getLogger(__name__)

# Asset types that commonly get copied around a project
DUPLICATE_CANDIDATE_TYPES = frozenset({AssetType.TEXTURE, AssetType.AUDIO, AssetType.MODEL})


class OversizedAssetRule(OptimizationRule):
    """Flags assets whose size exceeds the budget for their type."""

    def __init__(self, size_budgets: Optional[Mapping[AssetType, int]] = None) -> None:
        super().__init__(
            rule_name="Oversized Asset",
            description="Detects assets larger than the size budget for their type",
            severity=Severity.WARNING,
        )
        if size_budgets is None:
            size_budgets = {AssetType(type_name): budget for type_name, budget in DEFAULT_SIZE_BUDGETS.items()}
        self.size_budgets: Dict[AssetType, int] = dict(size_budgets)

    def evaluate(self, node: AssetNode, graph: DependencyGraph) -> Iterable[OptimizationIssue]:
        budget = self.size_budgets.get(node.asset_type)
        if budget is None or node.size_bytes <= budget:
            return []

        return [
            self.create_issue(
                node,
                message=f"{node.asset_type.value.replace('_', ' ').capitalize()} is {node.formatted_size} (budget: {format_bytes(budget)})",
                recommendation="Reduce resolution, bitrate or detail level, or split the asset",
                potential_savings=node.size_bytes - budget,
            )
        ]


def hash_file(full_path: str) -> Optional[str]:
    """Return the MD5 hex digest of a file, or None if it cannot be read."""
    digest = hashlib.md5()
    try:
        with open(full_path, "rb") as f:
            for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        logger.debug("Cannot hash %s: %s", full_path, e)
        return None
    return digest.hexdigest()


class DuplicateAssetRule(OptimizationRule):
    """Detects texture, audio and model assets with identical content.

    The content-hash index is owned by the rule instance. It is built on first
    use from the whole graph and kept until clear_cache() or invalidate_asset(),
    so separate engines with separate rule instances never share it.
    """

    def __init__(self, project_root: Optional[str] = None) -> None:
        super().__init__(
            rule_name="Duplicate Asset",
            description="Detects duplicate assets with same content",
            severity=Severity.WARNING,
        )
        self.project_root = project_root
        self._hash_to_paths: Optional[Dict[str, List[str]]] = None
        self._path_to_hash: Dict[str, str] = {}

    def clear_cache(self) -> None:
        self._hash_to_paths = None
        self._path_to_hash.clear()

    def invalidate_asset(self, path: str) -> None:
        # Group membership of every other file may change, rebuild on next use
        if self._hash_to_paths is not None:
            self.clear_cache()

    def evaluate(self, node: AssetNode, graph: DependencyGraph) -> Iterable[OptimizationIssue]:
        if node.asset_type not in DUPLICATE_CANDIDATE_TYPES:
            return []

        if self._hash_to_paths is None:
            self._build_hash_index(graph)

        content_hash = self._path_to_hash.get(node.path)
        if content_hash is None:
            return []

        duplicates = self._hash_to_paths.get(content_hash, []) if self._hash_to_paths else []
        # Report once per group, on its first member
        if len(duplicates) < 2 or duplicates[0] != node.path:
            return []

        others = duplicates[1:]
        return [
            self.create_issue(
                node,
                message=f"Duplicate of {len(others)} other file(s)",
                recommendation=f"Consolidate with: {', '.join(others)}",
                potential_savings=node.size_bytes * len(others),
            )
        ]

    def _resolve(self, path: str) -> str:
        if self.project_root:
            return os.path.join(self.project_root, path)
        return os.path.abspath(path)

    def _build_hash_index(self, graph: DependencyGraph) -> None:
        groups: DefaultDict[str, List[str]] = defaultdict(list)
        for candidate in graph.nodes:
            if candidate.asset_type not in DUPLICATE_CANDIDATE_TYPES:
                continue
            content_hash = hash_file(self._resolve(candidate.path))
            if content_hash is None:
                continue
            self._path_to_hash[candidate.path] = content_hash
            groups[content_hash].append(candidate.path)

        self._hash_to_paths = dict(groups)
        duplicate_groups = sum(1 for paths in groups.values() if len(paths) > 1)
        logger.debug("Hashed %s assets, %s duplicate groups", len(self._path_to_hash), duplicate_groups)


def default_rules(project_root: Optional[str] = None) -> List[OptimizationRule]:
    """Rules registered by an OptimizationEngine created without explicit rules."""
    return [
        OversizedAssetRule(),
        DuplicateAssetRule(project_root=project_root),
    ]
