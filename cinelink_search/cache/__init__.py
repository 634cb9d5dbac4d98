"""Local result cache and its fuzzy index."""
