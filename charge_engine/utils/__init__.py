"""Shared utilities: logging, data paths and file helpers."""
