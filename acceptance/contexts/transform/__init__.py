"""Contexts converting step arguments into entities."""
