"""
Utilities package for the record store.

Exports shared helpers for cross-cutting concerns such as logging. Keep this
package free of domain-specific logic.
"""

from recordstore.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
