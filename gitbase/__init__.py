"""Expression trees, filter pushdown, index key encoding, commit line statistics, reference helpers and cache keys for SQL over git."""

__version__ = "0.1.0"

__all__ = ["commitstats", "expression", "filters", "hashing", "index", "refnames"]