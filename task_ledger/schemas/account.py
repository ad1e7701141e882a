import re

from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

def normalize_address(value: str) -> str:
    """Validate an owner address and return it lowercased."""
    value = value.strip()
    if not ADDRESS_RE.match(value):
        raise ValueError("Address must be 0x followed by 40 hex digits")
    return value.lower()

class AccountBase(BaseModel):
    address: str

    @field_validator("address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        return normalize_address(value)

class AccountCreate(AccountBase):
    password: str

class Account(BaseModel):
    address: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class TokenData(BaseModel):
    address: Optional[str] = None

class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: Account
