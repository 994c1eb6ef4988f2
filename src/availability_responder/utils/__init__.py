"""Shared helpers for datetime handling and log sanitization."""
