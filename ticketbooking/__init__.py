"""Event ticket booking HTTP service with SQLite storage, Redis-queued payments and booking expiry."""

__version__ = "0.1.0"

__all__ = ["__version__"]