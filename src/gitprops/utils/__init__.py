"""Utility modules for gitprops."""
