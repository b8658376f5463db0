"""Shared constants for pipectx."""
