"""ws-search: TF-IDF code retrieval over a local workspace."""

__version__ = "0.1.0"
