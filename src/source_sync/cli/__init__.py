"""
Command Line Interface for Source Sync.

This package provides CLI commands for managing connection configurations
and the projects associated with them.
"""

__all__ = []
