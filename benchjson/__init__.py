"""Streaming JSON reports of benchmark runs and machine context."""

__version__ = "0.1.0"
__all__ = ["model", "json_reporter"]