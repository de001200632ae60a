"""Bundled recipe catalog."""
