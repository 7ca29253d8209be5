"""Thread-safe and awaitable results, promises, lazy and shared results, and when_all/when_any."""

__version__ = "0.1.0"