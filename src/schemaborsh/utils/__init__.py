"""Utility functions for schemaborsh.

This module provides input normalisation helpers.
"""

from __future__ import annotations

from .buffers import byte_buffers_to_lists

__all__ = [
    "byte_buffers_to_lists",
]
