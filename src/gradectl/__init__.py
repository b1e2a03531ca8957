"""gradectl — course grades and team aggregates from the command line."""

__version__ = "0.1.0"
