"""Core data models for buzzword.

Observations are the only thing the frequency store keeps; ranked items are
derived from them on every ranking request and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field


@dataclass(frozen=True, slots=True)
class Observation:
    """One timestamped occurrence of a phrase."""

    content: str
    observed_at: datetime


class RankedItem(BaseModel):
    """A phrase and how many times it was observed in the current window."""

    phrase: str = Field(..., description="Representative (first-seen) casing of the phrase")
    count: int = Field(..., ge=1, description="Number of observations in the group")
