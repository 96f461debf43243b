"""Dialoom booking API backend."""
