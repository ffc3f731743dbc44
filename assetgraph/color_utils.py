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
"""Colorama wrapper utilities for colored terminal output."""

import sys
import os
import logging
from typing import Optional, TextIO, Tuple

from colorama import Fore, Style, init

logger = logging.getLogger(__name__)

# Keep escape codes when stdout is piped; callers decide via should_use_color()
init(autoreset=False, strip=False)


class Colors:
    """Color codes for terminal output."""

    # Foreground colors
    RED = Fore.RED
    GREEN = Fore.GREEN
    YELLOW = Fore.YELLOW
    BLUE = Fore.BLUE
    MAGENTA = Fore.MAGENTA
    CYAN = Fore.CYAN
    WHITE = Fore.WHITE

    # Styles
    RESET = Style.RESET_ALL
    BRIGHT = Style.BRIGHT
    DIM = Style.DIM
    NORMAL = Style.NORMAL

    @staticmethod
    def disable() -> None:
        """Disable all color output."""
        for attr in dir(Colors):
            if not attr.startswith("_") and attr != "disable":
                setattr(Colors, attr, "")


def colored(text: str, color: str = "", style: str = "") -> str:
    """Return colored text string.

    Args:
        text: Text to colorize
        color: Color code (e.g., Colors.RED)
        style: Style code (e.g., Colors.BRIGHT)

    Returns:
        Formatted string with color codes, or the plain text when no color is given
    """
    if not color:
        return text

    return f"{style}{color}{text}{Colors.RESET}"


def print_colored(text: str, color: str = "", style: str = "", file: Optional[TextIO] = None) -> None:
    """Print colored text to file/stdout."""
    if file is None:
        file = sys.stdout

    print(colored(text, color, style), file=file)


def print_success(text: str, file: Optional[TextIO] = None, prefix: bool = False) -> None:
    """Print success message in green.

    Args:
        text: Message to print
        file: File object (default: sys.stdout)
        prefix: If True, prepend "Success: " to message
    """
    message = f"Success: {text}" if prefix else text
    print_colored(message, Colors.GREEN, file=file)


def print_error(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print error message in red to stderr.

    Args:
        text: Error message to print
        file: File object (default: sys.stderr)
        prefix: If True, prepend "Error: " to message (default: True)
    """
    if file is None:
        file = sys.stderr
    message = f"Error: {text}" if prefix else text
    print_colored(message, Colors.RED, file=file)


def print_warning(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print warning message in yellow to stderr.

    Args:
        text: Warning message to print
        file: File object (default: sys.stderr)
        prefix: If True, prepend "Warning: " to message (default: True)
    """
    if file is None:
        file = sys.stderr
    message = f"Warning: {text}" if prefix else text
    print_colored(message, Colors.YELLOW, file=file)


def print_info(text: str, file: Optional[TextIO] = None) -> None:
    """Print info message in cyan."""
    print_colored(text, Colors.CYAN, file=file)


def should_use_color(force_color: bool = False, no_color: bool = False) -> bool:
    """Determine if color should be used based on environment and flags.

    Args:
        force_color: Force color output regardless of terminal
        no_color: Disable color output

    Returns:
        True if color should be used
    """
    if no_color:
        return False

    if force_color:
        return True

    if not sys.stdout.isatty():
        return False

    # See no-color.org
    if os.environ.get("NO_COLOR"):
        return False

    return True


# Issue severity → (color, style) attribute names on Colors, looked up at call time
SEVERITY_COLORS = {
    "error": ("RED", "BRIGHT"),
    "warning": ("YELLOW", "NORMAL"),
    "info": ("CYAN", "NORMAL"),
}

# Health grade → color attribute name on Colors
GRADE_COLORS = {
    "A": "GREEN",
    "B": "GREEN",
    "C": "YELLOW",
    "D": "YELLOW",
    "F": "RED",
}


def get_severity_color(severity: str) -> Tuple[str, str]:
    """Get color and style for a severity level.

    Args:
        severity: Severity name, case-insensitive (error/warning/info)

    Returns:
        Tuple of (color, style)
    """
    color_name, style_name = SEVERITY_COLORS.get(severity.lower(), ("WHITE", "NORMAL"))
    return getattr(Colors, color_name), getattr(Colors, style_name)


def get_grade_color(grade: str) -> str:
    """Get the color used to display a health grade letter."""
    return str(getattr(Colors, GRADE_COLORS.get(grade.upper(), "WHITE")))


def format_severity(text: str, severity: str) -> str:
    """Return text colored for the given severity level."""
    color, style = get_severity_color(severity)
    return colored(text, color, style)
