"""Command-line tooling for schemaborsh."""
