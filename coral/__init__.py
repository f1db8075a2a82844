"""Command trees, typed flag sets, argument validators and usage rendering for command-line interfaces."""

__version__ = "0.1.0"

__all__ = ["args", "flags", "help", "node", "parsing", "suggestions"]