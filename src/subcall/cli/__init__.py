"""Command-line entry point for subcall."""
