"""Shared utilities: structured logging and period parsing."""
