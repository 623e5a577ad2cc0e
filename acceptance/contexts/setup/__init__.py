"""Contexts creating scenario state without the UI."""
