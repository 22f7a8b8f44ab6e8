"""
User interface layer.

This package contains display implementations.
Currently only TerminalDisplay is implemented.
"""

from .terminal import TerminalDisplay

__all__ = ["TerminalDisplay"]
