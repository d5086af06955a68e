"""Command-line interface for termpose."""
