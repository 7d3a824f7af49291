"""Runtime configuration for macfix."""
