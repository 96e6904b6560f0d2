"""CLI commands for t212taxes."""
