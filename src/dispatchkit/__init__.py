"""dispatchkit — participant registries and four dispatch disciplines."""

__version__ = "0.1.0"
