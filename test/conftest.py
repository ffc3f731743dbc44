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
"""Pytest configuration and shared base fixtures for assetgraph tests.

This module provides base fixtures used across all tests. Graph fixtures are
organized in a separate conftest file:
- conftest_graph.py: DependencyGraph fixtures (chains, cycles, project layouts)

Fixture Scopes:
- function: Default, recreated for each test
- module: Shared across tests in one file, use for immutable data
"""

import json
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Import specialized fixture modules
pytest_plugins = [
    "conftest_graph",
]


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="assetgraph_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def write_graph_dump(temp_dir: str) -> Callable[[Dict[str, Any]], str]:
    """Return a helper that writes a graph dump to temp_dir and returns its path.

    Scope: function
    Dependencies: temp_dir
    Use for: Loader and CLI tests
    """

    def _write(data: Dict[str, Any], name: str = "graph.json") -> str:
        path = Path(temp_dir) / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def project_dump() -> Dict[str, Any]:
    """Scanner dump of a small project.

    Main.unity → Player.prefab → Player.mat → Player.png
    Main.unity → Music.ogg
    Orphan.png is unused, Loop.mat ↔ Loop2.mat form a cycle.
    """
    return {
        "assets": [
            {"path": "Assets/Scenes/Main.unity", "size": 2048},
            {"path": "Assets/Prefabs/Player.prefab", "size": 1024},
            {"path": "Assets/Materials/Player.mat", "size": 512},
            {"path": "Assets/Textures/Player.png", "size": 4096},
            {"path": "Assets/Audio/Music.ogg", "size": 8192},
            {"path": "Assets/Textures/Orphan.png", "size": 3000},
            {"path": "Assets/Materials/Loop.mat", "size": 100},
            {"path": "Assets/Materials/Loop2.mat", "size": 100},
        ],
        "dependencies": {
            "Assets/Scenes/Main.unity": ["Assets/Prefabs/Player.prefab", "Assets/Audio/Music.ogg"],
            "Assets/Prefabs/Player.prefab": ["Assets/Materials/Player.mat"],
            "Assets/Materials/Player.mat": ["Assets/Textures/Player.png"],
            "Assets/Materials/Loop.mat": ["Assets/Materials/Loop2.mat"],
            "Assets/Materials/Loop2.mat": ["Assets/Materials/Loop.mat"],
        },
    }
