"""Building blocks for a tabular fuzzy finder: styles, themes, highlighting, indexing and search."""

__version__ = "0.4.0"