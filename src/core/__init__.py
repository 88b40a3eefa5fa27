"""Core: configuración, dominio, mensajes y validadores (sin I/O)."""
