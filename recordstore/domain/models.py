"""
Domain models for the record store.

A record is three free-text attributes identified externally by the integer
handle the store assigned to it; the handle is not part of the record itself.
"""
from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, Field

RECORD_FIELDS: Tuple[str, ...] = ("name", "city", "country")


class Record(BaseModel):
    """
    A single stored entry. All fields start empty and are replaced wholesale.
    """

    name: str = Field("", description="Person name.")
    city: str = Field("", description="City of residence.")
    country: str = Field("", description="Country of residence.")

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
    }

    def summary_line(self, handle: int) -> str:
        """Render the one-line summary used by the bulk dump."""
        return (
            f"Usercode: {handle}, Name: {self.name}, "
            f"City: {self.city}, Country: {self.country}"
        )


__all__ = ["RECORD_FIELDS", "Record"]
