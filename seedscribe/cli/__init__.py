"""Command line interface for seedscribe."""
