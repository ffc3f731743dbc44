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
"""Asset node model and file-type classification.

An AssetNode is the unit the dependency graph stores: one file identified by
its project-relative path. The type classification is derived once from the
path suffix and never changes afterwards.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from assetgraph.constants import InvalidArgumentError


class AssetType(Enum):
    """Asset category derived from the file extension."""

    TEXTURE = "texture"
    AUDIO = "audio"
    MODEL = "model"
    MATERIAL = "material"
    SHADER = "shader"
    PREFAB = "prefab"
    SCENE = "scene"
    SCRIPT = "script"
    ANIMATION = "animation"
    ANIMATOR_CONTROLLER = "animator_controller"
    SCRIPTABLE_OBJECT = "scriptable_object"
    FONT = "font"
    VIDEO = "video"
    TEXT_DATA = "text_data"
    OTHER = "other"


_EXTENSION_TYPES: Dict[str, AssetType] = {}
for _type, _extensions in (
    (AssetType.TEXTURE, (".png", ".jpg", ".jpeg", ".tga", ".psd", ".tiff", ".gif", ".bmp", ".exr", ".hdr")),
    (AssetType.AUDIO, (".wav", ".mp3", ".ogg", ".aiff", ".aif", ".flac")),
    (AssetType.MODEL, (".fbx", ".obj", ".dae", ".3ds", ".blend")),
    (AssetType.MATERIAL, (".mat",)),
    (AssetType.SHADER, (".shader", ".shadergraph", ".shadersubgraph", ".hlsl", ".cginc")),
    (AssetType.PREFAB, (".prefab",)),
    (AssetType.SCENE, (".unity",)),
    (AssetType.SCRIPT, (".cs",)),
    (AssetType.ANIMATION, (".anim",)),
    (AssetType.ANIMATOR_CONTROLLER, (".controller", ".overridecontroller")),
    (AssetType.SCRIPTABLE_OBJECT, (".asset",)),
    (AssetType.FONT, (".fontsettings", ".ttf", ".otf")),
    (AssetType.VIDEO, (".mp4", ".mov", ".avi", ".webm")),
    (AssetType.TEXT_DATA, (".txt", ".json", ".xml", ".yaml", ".csv")),
):
    for _extension in _extensions:
        _EXTENSION_TYPES[_extension] = _type


def resolve_asset_type(extension: str) -> AssetType:
    """Classify a file extension (with leading dot, any case).

    Args:
        extension: File suffix such as ".png"

    Returns:
        Matching AssetType, or AssetType.OTHER for unknown suffixes
    """
    return _EXTENSION_TYPES.get(extension.lower(), AssetType.OTHER)


def format_bytes(size_bytes: int) -> str:
    """Format a byte count for display (e.g. 1536 -> "1.5 KB").

    Negative values are shown as "0 B".
    """
    if size_bytes < 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB"]
    index = 0
    size = float(size_bytes)
    while size >= 1024 and index < len(units) - 1:
        index += 1
        size /= 1024

    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[index]}"


@dataclass(frozen=True)
class AssetNode:
    """One analyzable asset.

    Identity and equality are defined by ``path`` alone; two nodes with the same
    path but different sizes compare equal.

    Attributes:
        path: Unique project-relative identifier (e.g. "Assets/Textures/hero.png")
        size_bytes: File size in bytes
        name: File name without extension (derived)
        extension: Lower-case suffix including the dot (derived)
        asset_type: Category resolved from the extension (derived)
    """

    path: str
    size_bytes: int = field(default=0, compare=False)
    name: str = field(init=False, compare=False)
    extension: str = field(init=False, compare=False)
    asset_type: AssetType = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if not self.path:
            raise InvalidArgumentError("Asset path must be a non-empty string")
        if self.size_bytes < 0:
            raise InvalidArgumentError(f"Asset size must be non-negative: {self.path} ({self.size_bytes})")

        base_name = os.path.basename(self.path)
        stem, extension = os.path.splitext(base_name)
        object.__setattr__(self, "name", stem)
        object.__setattr__(self, "extension", extension.lower())
        object.__setattr__(self, "asset_type", resolve_asset_type(extension))

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.size_bytes)

    def __str__(self) -> str:
        return f"{self.name} ({self.formatted_size})"
