"""Example functions kept for platform smoke tests."""
