"""Core primitives shared across the leave workflow engine."""
