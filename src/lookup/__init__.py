"""Parameter lookup layer.

This module finds the effective value of a key for a date, converts
value text to typed results, and resolves prefixed request batches.
"""
