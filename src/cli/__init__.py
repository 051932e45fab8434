"""Command-line interface for caldb."""
