"""Autosuggestion: debouncing, popular keywords, suggestion ranking."""
