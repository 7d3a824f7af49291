"""Handlers for systemd units and apt packages."""
