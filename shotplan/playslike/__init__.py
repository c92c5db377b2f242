"""Plays-like distance model."""
