"""Shared utilities: structured logging and error types."""
