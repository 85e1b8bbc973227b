"""Shared helpers for statusline."""
