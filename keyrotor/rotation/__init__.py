"""Rotation cycle, recovery resolution and their errors."""
