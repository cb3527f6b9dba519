"""Core layer - connections, statements, transactions."""
