"""Shared utilities for fileorganizer: constants, errors and logging."""
