"""Command-line interface for t212taxes."""
