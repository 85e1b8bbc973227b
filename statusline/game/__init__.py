"""Game-side services for statusline."""
