"""Application services behind the built-in sub-commands."""
