"""Database file layer.

This module locates database files, reads their line-oriented format,
and positions streams at date or configuration segments.
"""
