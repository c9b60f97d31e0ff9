"""Journal analytics — performance metrics for journaled trades."""

__version__ = "0.1.0"
