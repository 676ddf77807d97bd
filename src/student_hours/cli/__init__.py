"""Command-line interface for Student Hours Finder."""
