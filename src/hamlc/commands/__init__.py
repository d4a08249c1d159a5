"""CLI commands"""

from .compile import compile_command

__all__ = ["compile_command"]
