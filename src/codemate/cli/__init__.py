"""Command-line interface for codemate."""
