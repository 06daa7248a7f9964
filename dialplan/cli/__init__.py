"""Command-line interface for dialplan."""
