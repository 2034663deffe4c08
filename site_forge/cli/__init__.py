"""Command line interface for site-forge."""
