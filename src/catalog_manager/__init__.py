"""Catalog manager: registry of service types and catalog items."""

__version__ = "0.1.0"
