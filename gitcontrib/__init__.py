"""Terminal charts for labeled numeric series and per-author git statistics."""

__version__ = "0.1.0"
