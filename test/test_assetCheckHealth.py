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
"""Integration tests for assetCheckHealth.py"""

import json
import sys
from typing import Any, Callable, Dict

import pytest

import assetCheckHealth
from assetgraph.color_utils import Colors
from assetgraph.constants import EXIT_INVALID_ARGS, EXIT_SUCCESS
from assetgraph.cycle_detector import CycleDetector
from assetgraph.graph_io import graph_from_dict
from assetgraph.health_score import HealthScoreCalculator
from assetgraph.optimization import OptimizationEngine
from assetgraph.unused_analysis import UnusedAssetAnalyzer


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["assetCheckHealth.py", *argv])
    return assetCheckHealth.main()


class TestAssetCheckHealth:
    """End-to-end tests for the health report."""

    def test_text_report(self, monkeypatch: pytest.MonkeyPatch, capsys: Any, write_graph_dump: Callable[..., str], project_dump: Dict[str, Any]) -> None:
        """Test the text report shows score, grade, breakdown and the cycle."""
        graph_file = write_graph_dump(project_dump)

        assert _run(monkeypatch, graph_file, "--no-color") == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert "=== Asset Health ===" in out
        assert "(grade A)" in out
        assert "Circular Dependencies (1)" in out
        assert "Loop → Loop2 → Loop" in out or "Loop2 → Loop → Loop2" in out

    def test_json_report_with_roots(self, monkeypatch: pytest.MonkeyPatch, capsys: Any, write_graph_dump: Callable[..., str], project_dump: Dict[str, Any]) -> None:
        """Test the JSON report includes unused assets when roots are given."""
        graph_file = write_graph_dump(project_dump)

        assert _run(monkeypatch, graph_file, "--root", "Assets/Scenes/Main.unity", "--format", "json") == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["score"] == 84
        assert data["grade"] == "B"
        assert [item["category"] for item in data["breakdown"]] == ["Unused Assets", "Circular Dependencies", "Optimization Issues", "Large Assets"]
        assert {entry["path"] for entry in data["unused"]} == {"Assets/Textures/Orphan.png", "Assets/Materials/Loop.mat", "Assets/Materials/Loop2.mat"}
        assert len(data["cycles"]) == 1

    def test_strict_profile(self, monkeypatch: pytest.MonkeyPatch, capsys: Any, write_graph_dump: Callable[..., str], project_dump: Dict[str, Any]) -> None:
        """Test the scoring profile changes the penalty."""
        graph_file = write_graph_dump(project_dump)

        assert _run(monkeypatch, graph_file, "--profile", "strict", "--format", "json") == EXIT_SUCCESS

        assert json.loads(capsys.readouterr().out)["score"] == 85

    def test_missing_graph_file(self, monkeypatch: pytest.MonkeyPatch, capsys: Any, temp_dir: str) -> None:
        """Test an unreadable dump exits with the invalid arguments code."""
        assert _run(monkeypatch, f"{temp_dir}/missing.json") == EXIT_INVALID_ARGS
        assert "Failed to load graph" in capsys.readouterr().err

    def test_invalid_top(self, monkeypatch: pytest.MonkeyPatch, write_graph_dump: Callable[..., str], project_dump: Dict[str, Any]) -> None:
        """Test a non-positive --top is rejected."""
        assert _run(monkeypatch, write_graph_dump(project_dump), "--top", "0") == EXIT_INVALID_ARGS

    def test_unknown_root_warns(self, monkeypatch: pytest.MonkeyPatch, capsys: Any, write_graph_dump: Callable[..., str], project_dump: Dict[str, Any]) -> None:
        """Test roots missing from the graph produce a warning but still succeed."""
        assert _run(monkeypatch, write_graph_dump(project_dump), "--root", "Assets/Nope.unity") == EXIT_SUCCESS
        assert "Root not found in graph: Assets/Nope.unity" in capsys.readouterr().err


class TestPrintTextReport:
    """Tests for print_text_report layout."""

    def test_breakdown_columns_aligned_with_color(self, monkeypatch: pytest.MonkeyPatch, capsys: Any, project_dump: Dict[str, Any]) -> None:
        """Test penalties are padded inside the color codes so columns line up."""
        monkeypatch.setattr(Colors, "RED", "<r>")
        monkeypatch.setattr(Colors, "GREEN", "<g>")
        monkeypatch.setattr(Colors, "RESET", "</>")
        graph = graph_from_dict(project_dump)
        cycles = CycleDetector(graph).detect()
        report = OptimizationEngine(graph, rules=[]).analyze()
        unused = UnusedAssetAnalyzer(graph, ["Assets/Scenes/Main.unity"]).analyze()
        result = HealthScoreCalculator(graph).calculate(unused, cycles, report)

        assetCheckHealth.print_text_report(graph, result, cycles, report, unused, top_n=5)

        out = capsys.readouterr().out
        assert "<r>    -6</>" in out
        assert "<r>   -10</>" in out
        assert "<g>     0</>" in out
