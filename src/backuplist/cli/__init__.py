"""Command-line interface for backuplist."""
