"""Top-level packinit commands (auto-discovered)."""
