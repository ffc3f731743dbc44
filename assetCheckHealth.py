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
"""Score the health of an asset project from a scanner's dependency graph dump.

Loads a dependency graph dump, detects dependency cycles, evaluates the
optimization rules, optionally finds unused assets, and combines everything
into a 0-100 health score with a letter grade.

Requirements:
    - Python 3.8+
    - networkx: pip install networkx
    - colorama: pip install colorama

Usage:
    assetCheckHealth.py <graph.json> [--root PATH]... [--profile lenient|standard|strict] [--top N] [--format text|json]

Exit Codes:
    0: Success
    1: Invalid arguments or graph dump
    2: Unexpected error
    130: Interrupted
"""

import argparse
import json
import logging
import os
import signal
import sys
from typing import Any, Dict, List, Optional

__version__ = "1.0.0"
__author__ = "Mana Battery"

from assetgraph.color_utils import Colors, colored, format_severity, get_grade_color, print_error, print_warning, should_use_color
from assetgraph.constants import (
    DEFAULT_TOP_N,
    EXIT_INVALID_ARGS,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    MAX_CYCLES_DISPLAY,
    GraphLoadError,
)
from assetgraph.cycle_detector import CycleDetectionResult, CycleDetector
from assetgraph.dependency_graph import DependencyGraph
from assetgraph.graph_io import load_graph
from assetgraph.health_score import HealthScoreCalculator, HealthScoreResult
from assetgraph.optimization import OptimizationEngine, OptimizationReport
from assetgraph.rules import default_rules
from assetgraph.score_weights import ScoreWeights, ScoringProfile
from assetgraph.unused_analysis import UnusedAssetAnalyzer, UnusedAssetResult

__all__ = ["EXIT_SUCCESS", "main", "build_json_report"]


def disable_colors() -> None:
    """Disable color output globally."""
    Colors.disable()


def signal_handler(signum: int, frame: Any) -> None:
    """Handle interrupt signals gracefully."""
    print_warning("\nInterrupted by user. Exiting...", prefix=False)
    sys.exit(EXIT_KEYBOARD_INTERRUPT)


def build_json_report(
    graph: DependencyGraph,
    result: HealthScoreResult,
    cycles: CycleDetectionResult,
    report: OptimizationReport,
    unused: Optional[UnusedAssetResult],
    top_n: int,
) -> Dict[str, Any]:
    """Assemble the machine readable report."""
    return {
        "version": __version__,
        "score": result.score,
        "grade": result.grade.value,
        "total_penalty": result.total_penalty,
        "total_assets": result.total_asset_count,
        "total_size": graph.get_total_size(),
        "breakdown": [{"category": item.category, "count": item.count, "penalty": item.penalty, "description": item.description} for item in result.breakdown],
        "cycles": [cycle.get_ordered_cycle_path(graph) for cycle in cycles.cycles],
        "issues": [
            {
                "rule": issue.rule_name,
                "asset": issue.asset_path,
                "severity": issue.severity.label,
                "message": issue.message,
                "recommendation": issue.recommendation,
                "potential_savings": issue.potential_savings,
            }
            for issue in report.issues[:top_n]
        ],
        "unused": [{"path": info.path, "size": info.size_bytes} for info in unused.unused_assets[:top_n]] if unused is not None else None,
    }


def print_text_report(
    graph: DependencyGraph,
    result: HealthScoreResult,
    cycles: CycleDetectionResult,
    report: OptimizationReport,
    unused: Optional[UnusedAssetResult],
    top_n: int,
) -> None:
    """Print the human readable report to stdout."""
    grade_color = get_grade_color(result.grade.value)

    print(f"\n{Colors.BRIGHT}{Colors.CYAN}=== Asset Health ==={Colors.RESET}")
    print(f"Assets: {Colors.BRIGHT}{graph.node_count}{Colors.RESET}  Dependencies: {Colors.BRIGHT}{graph.edge_count}{Colors.RESET}")
    print(f"Score:  {grade_color}{Colors.BRIGHT}{result.score:g}{Colors.RESET} (grade {grade_color}{result.grade.value}{Colors.RESET})")

    print(f"\n{Colors.BRIGHT}Breakdown:{Colors.RESET}")
    for item in result.breakdown:
        # Pad before coloring, escape codes have no width
        if item.penalty:
            penalty = colored(f"-{item.penalty:g}".rjust(6), Colors.RED)
        else:
            penalty = colored("0".rjust(6), Colors.GREEN)
        print(f"  {item.category:<24} {penalty}  {Colors.DIM}{item.description}{Colors.RESET}")

    if cycles.has_cycles:
        print(f"\n{Colors.BRIGHT}Circular Dependencies ({cycles.total_cycles}):{Colors.RESET}")
        for cycle in cycles.cycles[:MAX_CYCLES_DISPLAY]:
            print(f"  {Colors.RED}{cycle.format_cycle(graph)}{Colors.RESET}")
        if cycles.total_cycles > MAX_CYCLES_DISPLAY:
            print(f"  {Colors.DIM}... and {cycles.total_cycles - MAX_CYCLES_DISPLAY} more{Colors.RESET}")

    if report.issues:
        print(f"\n{Colors.BRIGHT}Top Issues ({report.total_issues}, {report.formatted_savings} potential savings):{Colors.RESET}")
        for issue in report.issues[:top_n]:
            print(f"  {format_severity(f'[{issue.severity.label}]', issue.severity.label)} {issue.asset_path}: {issue.message}")
            if issue.recommendation:
                print(f"    {Colors.DIM}→ {issue.recommendation}{Colors.RESET}")

    if unused is not None and unused.unused_assets:
        print(f"\n{Colors.BRIGHT}Largest Unused Assets ({unused.total_unused_count}, {unused.formatted_size}):{Colors.RESET}")
        for info in unused.unused_assets[:top_n]:
            print(f"  {Colors.YELLOW}{info.formatted_size:>10}{Colors.RESET}  {info.path}")


def main() -> int:
    """Main entry point for the script.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    parser = argparse.ArgumentParser(
        description="Score the health of an asset project from its dependency graph.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        f"  %(prog)s graph.json\n"
        f"  %(prog)s graph.json --root Assets/Scenes/Main.unity --root Assets/Scenes/Menu.unity\n"
        f"  %(prog)s graph.json.gz --profile strict --format json\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("graph_file", help="Dependency graph dump (JSON, optionally gzip compressed)")

    parser.add_argument(
        "--root",
        action="append",
        default=[],
        metavar="PATH",
        help="Entry point asset (scene, bundle). Repeat for several roots. Enables unused asset analysis",
    )

    parser.add_argument(
        "--profile",
        choices=[profile.value for profile in ScoringProfile],
        default=ScoringProfile.STANDARD.value,
        help="Scoring profile (default: standard)",
    )

    parser.add_argument(
        "--project-root",
        metavar="DIR",
        help="Directory asset paths are relative to, used to hash file contents (default: graph file directory)",
    )

    parser.add_argument("--top", type=int, default=DEFAULT_TOP_N, metavar="N", help=f"Number of issues and unused assets to list (default: {DEFAULT_TOP_N})")

    parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format (default: text)")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging to stderr")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    if args.no_color or args.format == "json" or not should_use_color():
        disable_colors()

    if args.top <= 0:
        print_error("--top must be a positive number")
        return EXIT_INVALID_ARGS

    try:
        graph = load_graph(args.graph_file)
    except GraphLoadError as e:
        print_error(str(e))
        return e.exit_code

    project_root = args.project_root or os.path.dirname(os.path.abspath(args.graph_file))
    roots: List[str] = args.root

    for root in roots:
        if not graph.contains_node(root):
            print_warning(f"Root not found in graph: {root}")

    try:
        cycles = CycleDetector(graph).detect()
        report = OptimizationEngine(graph, default_rules(project_root=project_root)).analyze()
        unused = UnusedAssetAnalyzer(graph, roots).analyze() if roots else None

        calculator = HealthScoreCalculator(graph, weights=ScoreWeights.for_profile(ScoringProfile(args.profile)), unused_roots=roots or None)
        calculator.set_precomputed_results(unused=unused, cycles=cycles, report=report)
        result = calculator.calculate()
    except Exception as e:
        print_error(f"Unexpected failure: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        if args.format == "json":
            print(json.dumps(build_json_report(graph, result, cycles, report, unused, args.top), indent=2))
        else:
            print_text_report(graph, result, cycles, report, unused, args.top)
    except BrokenPipeError:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())

    return EXIT_SUCCESS


if __name__ == "__main__":
    from assetgraph.constants import AssetGraphError

    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print_warning("Interrupted.", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except AssetGraphError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)
