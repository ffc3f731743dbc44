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
"""Tests for assetgraph.rules"""

from pathlib import Path
from typing import Callable, Dict

from assetgraph.asset_node import AssetType
from assetgraph.dependency_graph import DependencyGraph
from assetgraph.optimization import OptimizationEngine, Severity
from assetgraph.rules import DuplicateAssetRule, OversizedAssetRule, default_rules, hash_file

MIB = 1024 * 1024


def _write_files(root: str, contents: Dict[str, bytes]) -> None:
    for relative, data in contents.items():
        full = Path(root) / relative
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_bytes(data)


class TestOversizedAssetRule:
    """Tests for OversizedAssetRule."""

    def test_flags_texture_over_budget(self, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test a texture above 8 MiB is flagged with the excess as savings."""
        graph = graph_builder([], nodes=["Big.png", "Small.png"], sizes={"Big.png": 10 * MIB, "Small.png": 8 * MIB})
        rule = OversizedAssetRule()

        big = list(rule.evaluate(graph.get_node("Big.png"), graph))  # type: ignore[arg-type]
        small = list(rule.evaluate(graph.get_node("Small.png"), graph))  # type: ignore[arg-type]

        assert len(big) == 1
        issue = big[0]
        assert issue.severity == Severity.WARNING
        assert issue.potential_savings == 2 * MIB
        assert "8 MB" in issue.message
        assert small == []

    def test_types_without_budget_ignored(self, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test asset types without a budget are never flagged."""
        graph = graph_builder([], nodes=["Huge.prefab"], sizes={"Huge.prefab": 500 * MIB})

        assert list(OversizedAssetRule().evaluate(graph.get_node("Huge.prefab"), graph)) == []  # type: ignore[arg-type]

    def test_custom_budgets(self, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test custom budgets replace the defaults."""
        graph = graph_builder([], nodes=["Theme.ogg"], sizes={"Theme.ogg": 2000})
        rule = OversizedAssetRule(size_budgets={AssetType.AUDIO: 1000})

        issues = list(rule.evaluate(graph.get_node("Theme.ogg"), graph))  # type: ignore[arg-type]

        assert len(issues) == 1
        assert issues[0].potential_savings == 1000


class TestDuplicateAssetRule:
    """Tests for DuplicateAssetRule."""

    def test_reports_first_duplicate_only(self, temp_dir: str, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test a group of identical files is reported once, on its first member."""
        _write_files(temp_dir, {"a/Rock.png": b"same", "b/Rock.png": b"same", "c/Rock.png": b"same", "d/Other.png": b"different"})
        graph = graph_builder([], nodes=["a/Rock.png", "b/Rock.png", "c/Rock.png", "d/Other.png"], sizes={"a/Rock.png": 4, "b/Rock.png": 4, "c/Rock.png": 4, "d/Other.png": 9})

        report = OptimizationEngine(graph, rules=[DuplicateAssetRule(project_root=temp_dir)]).analyze()

        assert report.total_issues == 1
        issue = report.issues[0]
        assert issue.asset_path == "a/Rock.png"
        assert issue.potential_savings == 8
        assert "b/Rock.png" in issue.recommendation
        assert "c/Rock.png" in issue.recommendation

    def test_ignores_non_candidate_types(self, temp_dir: str, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test identical materials are not reported."""
        _write_files(temp_dir, {"a.mat": b"same", "b.mat": b"same"})
        graph = graph_builder([], nodes=["a.mat", "b.mat"])

        report = OptimizationEngine(graph, rules=[DuplicateAssetRule(project_root=temp_dir)]).analyze()

        assert report.total_issues == 0

    def test_missing_files_skipped(self, temp_dir: str, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test assets whose files cannot be read are skipped."""
        graph = graph_builder([], nodes=["gone.png", "also_gone.png"])

        report = OptimizationEngine(graph, rules=[DuplicateAssetRule(project_root=temp_dir)]).analyze()

        assert report.total_issues == 0

    def test_hash_index_owned_by_instance(self, temp_dir: str, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test the hash index is kept until clear_cache() and not shared between instances."""
        _write_files(temp_dir, {"x.png": b"one", "y.png": b"two"})
        graph = graph_builder([], nodes=["x.png", "y.png"])
        rule = DuplicateAssetRule(project_root=temp_dir)

        assert list(rule.evaluate(graph.get_node("x.png"), graph)) == []  # type: ignore[arg-type]

        # Content changes are not seen while the index is cached
        _write_files(temp_dir, {"y.png": b"one"})
        assert list(rule.evaluate(graph.get_node("x.png"), graph)) == []  # type: ignore[arg-type]

        other_rule = DuplicateAssetRule(project_root=temp_dir)
        assert len(list(other_rule.evaluate(graph.get_node("x.png"), graph))) == 1  # type: ignore[arg-type]

        rule.clear_cache()
        assert len(list(rule.evaluate(graph.get_node("x.png"), graph))) == 1  # type: ignore[arg-type]

    def test_invalidate_asset_sees_content_change(self, temp_dir: str, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test invalidating an asset rebuilds the hash index from current file contents."""
        _write_files(temp_dir, {"x.png": b"one", "y.png": b"two"})
        graph = graph_builder([], nodes=["x.png", "y.png"])
        engine = OptimizationEngine(graph, rules=[DuplicateAssetRule(project_root=temp_dir)])

        assert engine.analyze().total_issues == 0

        _write_files(temp_dir, {"y.png": b"one"})
        engine.invalidate_asset("x.png")

        assert engine.analyze().total_issues == 1

    def test_removed_duplicate_no_longer_reported(self, temp_dir: str, graph_builder: Callable[..., DependencyGraph]) -> None:
        """Test deleting one of two identical assets clears the issue on the survivor."""
        _write_files(temp_dir, {"a.png": b"same", "b.png": b"same"})
        graph = graph_builder([], nodes=["a.png", "b.png"])
        engine = OptimizationEngine(graph, rules=[DuplicateAssetRule(project_root=temp_dir)])

        assert len(engine.analyze_asset("a.png")) == 1
        assert engine.analyze().total_issues == 1

        graph.remove_node("b.png")
        (Path(temp_dir) / "b.png").unlink()
        engine.invalidate_asset("b.png")
        engine.invalidate_asset("a.png")

        assert engine.analyze_asset("a.png") == []
        assert engine.analyze().total_issues == 0


class TestHashFile:
    """Tests for hash_file."""

    def test_same_content_same_hash(self, temp_dir: str) -> None:
        """Test hashing depends on content only."""
        _write_files(temp_dir, {"a.bin": b"x" * 200000, "b.bin": b"x" * 200000, "c.bin": b"y"})

        assert hash_file(str(Path(temp_dir) / "a.bin")) == hash_file(str(Path(temp_dir) / "b.bin"))
        assert hash_file(str(Path(temp_dir) / "a.bin")) != hash_file(str(Path(temp_dir) / "c.bin"))

    def test_unreadable_returns_none(self, temp_dir: str) -> None:
        """Test a missing file hashes to None."""
        assert hash_file(str(Path(temp_dir) / "missing.bin")) is None


class TestDefaultRules:
    """Tests for default_rules."""

    def test_default_rules(self, temp_dir: str) -> None:
        """Test the built-in rule set and its project root."""
        rules = default_rules(project_root=temp_dir)

        assert [type(rule) for rule in rules] == [OversizedAssetRule, DuplicateAssetRule]
        duplicate_rule = rules[1]
        assert isinstance(duplicate_rule, DuplicateAssetRule)
        assert duplicate_rule.project_root == temp_dir
