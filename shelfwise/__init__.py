"""Shelfwise: supplier invoice and sales reconciliation for small retail stores."""

__version__ = "0.1.0"
