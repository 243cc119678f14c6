"""Keep the latest daily note in sync with a small secondary display."""

__version__ = "0.1.0"
