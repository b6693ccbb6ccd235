"""Command-line interface for rtlab."""
