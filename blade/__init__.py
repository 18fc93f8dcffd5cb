"""
blade: a pluggable command-line tool whose subcommands live in plugin files.
"""

from blade.core.command import Command, CommandContext
from blade.registry.command_registry import CommandRegistry

__version__ = "0.1.0"

__all__ = ["Command", "CommandContext", "CommandRegistry", "__version__"]
