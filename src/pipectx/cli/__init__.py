"""Command-line interface for pipectx."""
