"""Core reconciliation logic."""
