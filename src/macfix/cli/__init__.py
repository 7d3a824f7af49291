"""Command-line interface for macfix."""
