"""LedgerEntry data model."""

from datetime import date as date_type
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

EntryType = Literal["buy", "sell", "deposit", "withdrawal"]
EntryStatus = Literal["open", "closed", "stopped"]

TRADE_TYPES = ("buy", "sell")
CAPITAL_TYPES = ("deposit", "withdrawal")
ENTRY_TYPES = TRADE_TYPES + CAPITAL_TYPES
ENTRY_STATUSES = ("open", "closed", "stopped")

# Statuses whose P&L has been realized (counted in balance and calendar)
REALIZED_STATUSES = ("closed", "stopped")


class LedgerEntry(BaseModel):
    """A single journaled event on an account.

    Either a market trade (buy/sell) or a capital movement
    (deposit/withdrawal). Capital movements are always closed, carry
    their signed amount in ``pnl`` and never have risk or R-multiple.
    """

    id: str = Field(..., min_length=1, description="Unique entry identifier")
    account_id: str = Field(..., min_length=1, description="Owning account ID")
    date: date_type = Field(..., description="Calendar day of the entry")
    symbol: str = Field(default="", description="Trading symbol")
    type: EntryType = Field(..., description="Entry type")
    lot_size: float = Field(default=0.0, ge=0, description="Position size")
    entry_price: float = Field(default=0.0, ge=0, description="Entry price")
    exit_price: Optional[float] = Field(default=None, ge=0, description="Exit price")
    stop_loss: Optional[float] = Field(default=None, ge=0, description="Stop loss level")
    take_profit: Optional[float] = Field(default=None, ge=0, description="Take profit level")
    pnl: Optional[float] = Field(default=None, description="Realized P&L")
    status: EntryStatus = Field(default="open", description="Entry status")
    risk_amount: Optional[float] = Field(default=None, description="Amount risked")
    r_multiple: Optional[float] = Field(default=None, description="Derived R-multiple")
    emotion: str = Field(default="", description="Emotional state")
    mistakes: str = Field(default="", description="Mistakes made")
    lessons: str = Field(default="", description="Lessons learned")
    notes: str = Field(default="", description="Free-form notes")
    tags: list[str] = Field(default_factory=list, description="Entry tags")
    screenshot_url: Optional[str] = Field(default=None, description="Chart screenshot URL")

    model_config = {"frozen": True}

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, tags: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in tags:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    @model_validator(mode="after")
    def _check_capital_movement(self) -> "LedgerEntry":
        if self.type in CAPITAL_TYPES:
            if self.status != "closed":
                raise ValueError(f"{self.type} entries must be closed")
            if self.risk_amount is not None or self.r_multiple is not None:
                raise ValueError(f"{self.type} entries cannot carry risk")
        return self

    @property
    def is_trade(self) -> bool:
        """True for buy/sell entries."""
        return self.type in TRADE_TYPES

    @property
    def is_capital_movement(self) -> bool:
        """True for deposit/withdrawal entries."""
        return self.type in CAPITAL_TYPES

    @property
    def is_realized(self) -> bool:
        return self.status in REALIZED_STATUSES
