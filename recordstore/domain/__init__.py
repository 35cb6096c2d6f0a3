"""
Domain package for the record store.

Exports the record model shared by the store and the summary rendering.
"""

from recordstore.domain.models import RECORD_FIELDS, Record

__all__ = [
    "RECORD_FIELDS",
    "Record",
]
