"""Tinvest API: authentication and per-user watchlists."""

__version__ = "0.1.0"
