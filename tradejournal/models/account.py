"""Account data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Account(BaseModel):
    """Represents a trading account that owns ledger entries.

    ``current_balance`` and ``total_deposits`` are derived from the
    account's entries; the stored values are a cache refreshed by the
    ledger whenever those entries change.
    """

    id: str = Field(..., min_length=1, description="Unique account identifier")
    name: str = Field(..., min_length=1, description="Account name")
    currency: str = Field(default="USD", min_length=1, description="ISO currency code")
    initial_balance: float = Field(..., gt=0, description="Balance at creation")
    current_balance: float = Field(..., description="Running balance")
    total_deposits: Optional[float] = Field(
        default=None, description="Cumulative capital contributed"
    )
    created_at: datetime = Field(
        default_factory=datetime.now, description="Account creation timestamp"
    )

    model_config = {"frozen": True}
