"""Shared helpers for packinit (file I/O, dictionary merging)."""
