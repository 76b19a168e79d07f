"""Command-line interface for installator."""
