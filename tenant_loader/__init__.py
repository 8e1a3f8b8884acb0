"""Tenant initialization data loader."""

__version__ = "0.1.0"
