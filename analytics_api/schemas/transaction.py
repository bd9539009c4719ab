"""Transaction schemas module."""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# Calendar years accepted as filters
MIN_YEAR = 1
MAX_YEAR = 9999


class TransactionRecord(BaseModel):
    """Read-only view of a stored transaction handed to the analytics engine."""

    id: UUID = Field(default_factory=uuid4, description="Transaction ID")
    country: str = Field(..., min_length=1, max_length=64, description="Country of sale")
    region: str = Field(..., min_length=1, max_length=64, description="Sales region")
    product: str = Field(..., min_length=1, max_length=128, description="Product name")
    amount: Decimal = Field(..., ge=0, decimal_places=2, description="Sale amount")
    quantity: int = Field(..., ge=0, description="Units sold")
    transaction_date: datetime = Field(..., description="Transaction timestamp")

    class Config:
        from_attributes = True
        frozen = True


class TransactionFilter(BaseModel):
    """Filter pushed down to the transaction store."""

    year: Optional[int] = Field(None, description="Only transactions dated in this year")

    class Config:
        frozen = True

    def matches(self, record: TransactionRecord) -> bool:
        """Check a record against the filter in Python."""
        if self.year is not None:
            if record.transaction_date is None or record.transaction_date.year != self.year:
                return False
        return True
