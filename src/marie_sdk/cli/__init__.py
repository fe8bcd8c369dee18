"""
MARIE SDK Command-Line Interface
================================

This package provides command-line tools for the MARIE SDK:

- **masm**: Two-pass MARIE assembler
- **mrun**: MARIE simulator

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["masm", "mrun"]
