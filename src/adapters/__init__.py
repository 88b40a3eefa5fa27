"""Adaptadores de I/O (HTTP, disco)."""
