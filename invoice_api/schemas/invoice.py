"""Invoice Schemas — write payload for create and full-replace update.

Invariants:
    - date: required ISO calendar date; a full ISO datetime is truncated to its date
    - description: required, 5-500 chars ignoring surrounding whitespace, stored as sent
    - amount: required decimal > 0 with at most 2 decimal places and 10 integer
      digits (fits NUMERIC(12, 2) exactly, so it is never rounded or overflowed)
    - customerId: required integer in 1..MAX_ENTITY_ID (existence is checked by the service)
    - note: optional, <= 1000 chars
"""

from datetime import date as date_type, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from invoice_api.core.domain_types import MAX_ENTITY_ID

DESCRIPTION_MIN_LENGTH = 5
DESCRIPTION_MAX_LENGTH = 500


class InvoiceWrite(BaseModel):
    """Invoice create/update body."""
    model_config = ConfigDict(populate_by_name=True)

    date: date_type
    description: str
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    note: str | None = Field(None, max_length=1000)
    customer_id: int = Field(alias="customerId", ge=1, le=MAX_ENTITY_ID)

    @field_validator("date", mode="before")
    @classmethod
    def truncate_datetime(cls, v):
        if isinstance(v, str) and len(v.strip()) > 10:
            try:
                return datetime.fromisoformat(v.strip().replace("Z", "+00:00")).date()
            except ValueError:
                raise ValueError("invalid ISO date") from None
        return v

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str) -> str:
        if not DESCRIPTION_MIN_LENGTH <= len(v.strip()) <= DESCRIPTION_MAX_LENGTH:
            raise ValueError("description length out of range")
        return v

    @field_validator("note", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_fields(self) -> dict:
        """Writable fields keyed by API name."""
        return self.model_dump(by_alias=True)
