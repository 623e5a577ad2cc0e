"""Contexts operating on entities and repositories only."""
