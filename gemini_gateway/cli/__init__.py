"""Command line interface for the gateway."""
