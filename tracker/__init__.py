"""Command-line entry point and environment configuration."""
