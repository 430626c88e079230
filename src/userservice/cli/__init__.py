"""Command-line client for the user service."""
