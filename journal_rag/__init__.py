"""Question answering over personal journal entries."""

__version__ = "0.1.0"
