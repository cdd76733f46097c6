"""Logging helpers shared by the mapper packages."""
