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
"""Explain why an asset is included in the build and what deleting it would break.

For each root (scene, bundle) that transitively depends on the target asset,
prints the shortest dependency chain from the root to the target. Without
--root, every asset that nothing else depends on is treated as a root.
With --impact, also reports what deleting the target would break and which
of its dependencies could be deleted along with it.

Requirements:
    - Python 3.8+
    - networkx: pip install networkx
    - colorama: pip install colorama

Usage:
    assetCheckWhy.py <graph.json> <target> [--root PATH]... [--impact]

Exit Codes:
    0: Success
    1: Invalid arguments, graph dump or unknown target
    2: Unexpected error
    130: Interrupted
"""

import argparse
import logging
import os
import signal
import sys
from typing import Any, Dict, List

__version__ = "1.0.0"
__author__ = "Mana Battery"

from assetgraph.color_utils import Colors, print_error, print_success, print_warning, should_use_color
from assetgraph.constants import (
    EXIT_INVALID_ARGS,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    MAX_PATH_DISPLAY,
    GraphLoadError,
)
from assetgraph.delete_impact import DeleteImpactAnalyzer, DeleteImpactResult
from assetgraph.dependency_graph import DependencyGraph
from assetgraph.graph_io import load_graph
from assetgraph.path_finder import find_why_included

__all__ = ["EXIT_SUCCESS", "main", "default_roots"]


def disable_colors() -> None:
    """Disable color output globally."""
    Colors.disable()


def signal_handler(signum: int, frame: Any) -> None:
    """Handle interrupt signals gracefully."""
    print_warning("\nInterrupted by user. Exiting...", prefix=False)
    sys.exit(EXIT_KEYBOARD_INTERRUPT)


def default_roots(graph: DependencyGraph) -> List[str]:
    """Assets no other asset depends on, in graph insertion order."""
    return [path for path in graph.paths if not graph.get_dependents(path)]


def print_why_included(graph: DependencyGraph, target: str, paths_by_root: Dict[str, List[str]]) -> None:
    node = graph.get_node(target)
    size = f" ({node.formatted_size})" if node is not None else ""
    print(f"\n{Colors.BRIGHT}{Colors.CYAN}=== Why is {target}{size} included? ==={Colors.RESET}")

    if not paths_by_root:
        print_warning("Not reachable from any root", prefix=False)
        return

    # Shortest chains first
    ordered = sorted(paths_by_root.items(), key=lambda item: len(item[1]))
    for root, path in ordered[:MAX_PATH_DISPLAY]:
        print(f"\n  {Colors.BRIGHT}{root}{Colors.RESET} {Colors.DIM}({len(path) - 1} hops){Colors.RESET}")
        for depth, step in enumerate(path):
            marker = "└─ " if depth else ""
            color = Colors.YELLOW if step == target else ""
            print(f"    {'   ' * max(depth - 1, 0)}{marker}{color}{step}{Colors.RESET}")

    if len(ordered) > MAX_PATH_DISPLAY:
        print(f"\n  {Colors.DIM}... and {len(ordered) - MAX_PATH_DISPLAY} more roots{Colors.RESET}")


def print_delete_impact(impact: DeleteImpactResult) -> None:
    print(f"\n{Colors.BRIGHT}{Colors.CYAN}=== Delete Impact ==={Colors.RESET}")

    if impact.is_safe_to_delete:
        print_success("Safe to delete: nothing depends on this asset")
    else:
        print(f"{Colors.RED}{len(impact.directly_affected)} assets would have broken references:{Colors.RESET}")
        for affected in impact.directly_affected:
            print(f"  {Colors.RED}✗{Colors.RESET} {affected.path}")
        if impact.affected_scenes:
            print(f"{Colors.RED}{Colors.BRIGHT}Scenes affected: {len(impact.affected_scenes)}{Colors.RESET}")

    if impact.cascade_affected:
        print(f"\n{Colors.YELLOW}Would become orphaned:{Colors.RESET}")
        for affected in impact.cascade_affected:
            print(f"  {affected.path} {Colors.DIM}({affected.formatted_size}){Colors.RESET}")

    if impact.safe_to_delete_together:
        print(f"\n{Colors.GREEN}Can be deleted together:{Colors.RESET}")
        for affected in impact.safe_to_delete_together:
            print(f"  {affected.path} {Colors.DIM}({affected.formatted_size}){Colors.RESET}")

    print(f"\nTotal deletable size: {Colors.BRIGHT}{impact.formatted_deletable_size}{Colors.RESET}")


def main() -> int:
    """Main entry point for the script.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    parser = argparse.ArgumentParser(
        description="Explain why an asset is included and what deleting it would break.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        f"  %(prog)s graph.json Assets/Textures/Rock.png\n"
        f"  %(prog)s graph.json Assets/Textures/Rock.png --root Assets/Scenes/Main.unity\n"
        f"  %(prog)s graph.json Assets/Materials/Rock.mat --impact\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("graph_file", help="Dependency graph dump (JSON, optionally gzip compressed)")

    parser.add_argument("target", help="Asset path to explain")

    parser.add_argument(
        "--root",
        action="append",
        default=[],
        metavar="PATH",
        help="Entry point asset to search from. Repeat for several roots (default: assets nothing depends on)",
    )

    parser.add_argument("--impact", action="store_true", help="Also show the impact of deleting the target")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging to stderr")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    if args.no_color or not should_use_color():
        disable_colors()

    try:
        graph = load_graph(args.graph_file)
    except GraphLoadError as e:
        print_error(str(e))
        return e.exit_code

    if not graph.contains_node(args.target):
        print_error(f"Asset not found in graph: {args.target}")
        return EXIT_INVALID_ARGS

    roots = args.root or default_roots(graph)

    try:
        paths_by_root = find_why_included(graph, roots, args.target)
        impact = DeleteImpactAnalyzer(graph).analyze(args.target) if args.impact else None
    except Exception as e:
        print_error(f"Unexpected failure: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        print_why_included(graph, args.target, paths_by_root)
        if impact is not None:
            print_delete_impact(impact)
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
