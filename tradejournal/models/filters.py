"""EntryFilter data model."""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

StatusResult = Literal["all", "open", "closed", "stopped", "win", "loss"]
TypeFilter = Literal["all", "buy", "sell", "deposit", "withdrawal"]


class EntryFilter(BaseModel):
    """Criteria for narrowing a list of ledger entries.

    Every dimension is conjunctive; ``"all"`` or ``None`` leaves the
    dimension unconstrained.
    """

    status_result: StatusResult = Field(default="all", description="Status or trade result")
    emotion: str = Field(default="all", description="Emotional state")
    tag: str = Field(default="all", description="Tag (buy/sell entries only)")
    entry_type: TypeFilter = Field(default="all", description="Entry type")
    account_id: Optional[str] = Field(default=None, description="Owning account")
    date_from: Optional[date] = Field(default=None, description="Earliest date (inclusive)")
    date_to: Optional[date] = Field(default=None, description="Latest date (inclusive)")

    model_config = {"frozen": True}
