"""Client-side movie/series search: fuzzy result cache, API quota, suggestions."""

__version__ = "0.4.0"
