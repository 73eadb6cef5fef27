"""Customer Schemas — write payload for create and full-replace update.

Invariants:
    - name: required, >= 2 chars once surrounding whitespace is ignored
    - address <= 500, jobLocation <= 200, email/phone syntactically valid
    - Values are stored exactly as sent: whitespace is only ignored for the
      blank and length checks, email is validated but not normalized
    - Blank optional strings are treated as absent (None)
    - Omitted optional fields are None: an update clears them (full replace)
"""

import re

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

_PHONE_CHARS = re.compile(r"^\+?[\d\s().-]+$")
_PHONE_MIN_DIGITS = 7
_PHONE_MAX_DIGITS = 15
NAME_MIN_LENGTH = 2


def is_valid_phone(value: str) -> bool:
    """Digits with optional leading + and common separators, 7-15 digits."""
    if not _PHONE_CHARS.match(value):
        return False
    digits = sum(ch.isdigit() for ch in value)
    return _PHONE_MIN_DIGITS <= digits <= _PHONE_MAX_DIGITS


class CustomerWrite(BaseModel):
    """Customer create/update body."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    address: str | None = Field(None, max_length=500)
    phone: str | None = None
    email: str | None = None
    job_location: str | None = Field(None, alias="jobLocation", max_length=200)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if len(v.strip()) < NAME_MIN_LENGTH:
            raise ValueError("name too short")
        return v

    @field_validator("address", "phone", "email", "job_location", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_phone(v):
            raise ValueError("invalid phone number")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(str(exc)) from None
        return v

    def to_fields(self) -> dict:
        """Writable fields keyed by API name."""
        return self.model_dump(by_alias=True)
