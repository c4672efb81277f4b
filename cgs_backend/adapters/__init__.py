"""Adapters for external collaborators (tag readers, filesystem)."""
