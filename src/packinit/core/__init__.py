"""Core library for packinit: settings, I/O helpers and the setup flow."""
