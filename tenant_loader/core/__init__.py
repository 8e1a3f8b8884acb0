"""
Core Layer - Shared contracts.

This package contains:
- Configuration management (settings.py)
- Core data types (types.py) - rules, flags and outcomes
- Error types (errors.py)
- Trace collection
"""

from tenant_loader.core.types import IdStrategy, LoadOutcome, LoadRule

__all__ = ["IdStrategy", "LoadOutcome", "LoadRule"]
