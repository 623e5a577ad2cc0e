"""Contexts driving the browser."""
