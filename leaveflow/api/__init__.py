"""HTTP adapter for the leave workflow engine."""
