#!/usr/bin/env python3
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
"""Tests for assetgraph.scene_analysis"""

from typing import Callable

import pytest

from assetgraph.asset_node import AssetType
from assetgraph.dependency_graph import DependencyGraph
from assetgraph.scene_analysis import SceneAnalyzer, TypeBreakdown

MAIN_SCENE = "Assets/Scenes/Main.unity"


class TestSceneAnalyzer:
    """Tests for SceneAnalyzer.analyze."""

    def test_scene_footprint(self, sized_project_graph: DependencyGraph) -> None:
        """Test the footprint holds every transitive dependency and nothing else."""
        result = SceneAnalyzer(sized_project_graph).analyze(MAIN_SCENE)

        assert result.is_valid
        assert result.scene_name == "Main"
        assert [node.path for node in result.dependencies] == [
            "Assets/Prefabs/Hero.prefab",
            "Assets/Materials/Hero.mat",
            "Assets/Textures/Hero.png",
            "Assets/Shaders/Toon.shader",
        ]
        assert result.total_count == 4
        assert result.total_size == 4320
        assert result.formatted_size == "4.22 KB"

    def test_type_breakdown(self, sized_project_graph: DependencyGraph) -> None:
        """Test dependencies are grouped per asset type with count and size."""
        result = SceneAnalyzer(sized_project_graph).analyze(MAIN_SCENE)

        assert set(result.type_breakdown) == {AssetType.PREFAB, AssetType.MATERIAL, AssetType.TEXTURE, AssetType.SHADER}
        texture = result.type_breakdown[AssetType.TEXTURE]
        assert texture.count == 1
        assert texture.total_size == 4000
        assert texture.get_percentage(result.total_size) == pytest.approx(4000 / 4320 * 100)
        assert [breakdown.asset_type for breakdown in result.get_top_types(2)] == [AssetType.TEXTURE, AssetType.PREFAB]

    def test_shared_dependencies_counted_once(self, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test an asset reached along several chains is counted once."""
        graph = graph_builder(
            [("s.unity", "a.prefab"), ("s.unity", "b.prefab"), ("a.prefab", "t.png"), ("b.prefab", "t.png")],
            sizes={"a.prefab": 1, "b.prefab": 2, "t.png": 100},
        )

        result = SceneAnalyzer(graph).analyze("s.unity")

        assert result.total_count == 3
        assert result.total_size == 103
        assert result.type_breakdown[AssetType.PREFAB].count == 2

    def test_scene_without_dependencies(self, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test an isolated scene is valid with an empty footprint."""
        graph = graph_builder([], nodes=["Empty.unity"])

        result = SceneAnalyzer(graph).analyze("Empty.unity")

        assert result.is_valid
        assert result.total_count == 0
        assert result.type_breakdown == {}
        assert result.get_top_types() == []

    def test_unknown_scene(self, sized_project_graph: DependencyGraph) -> None:
        """Test a scene missing from the graph gives an invalid, empty result."""
        result = SceneAnalyzer(sized_project_graph).analyze("Assets/Scenes/Nope.unity")

        assert not result.is_valid
        assert result.scene_name == ""
        assert result.total_size == 0
        assert result.dependencies == []


class TestInclusionPath:
    """Tests for inclusion path lookup and formatting."""

    def test_find_and_format(self, sized_project_graph: DependencyGraph) -> None:
        """Test the chain from the scene to a texture is found and formatted by name."""
        analyzer = SceneAnalyzer(sized_project_graph)

        path = analyzer.find_inclusion_path(MAIN_SCENE, "Assets/Textures/Hero.png")

        assert path == [MAIN_SCENE, "Assets/Prefabs/Hero.prefab", "Assets/Materials/Hero.mat", "Assets/Textures/Hero.png"]
        assert analyzer.format_inclusion_path(path) == "Main → Hero → Hero → Hero"

    def test_no_path(self, sized_project_graph: DependencyGraph) -> None:
        """Test unreachable targets give None and format as no path."""
        analyzer = SceneAnalyzer(sized_project_graph)

        path = analyzer.find_inclusion_path(MAIN_SCENE, "Assets/Textures/Unused.png")

        assert path is None
        assert analyzer.format_inclusion_path(path) == "No path found"


class TestTypeBreakdown:
    """Tests for TypeBreakdown."""

    def test_percentage_of_empty_total(self) -> None:
        """Test the percentage of a zero total is zero."""
        assert TypeBreakdown(AssetType.AUDIO, count=1, total_size=10).get_percentage(0) == 0.0
