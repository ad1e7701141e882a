from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(SQLModel, table=True):
    """Credentials for an owner address.

    Accounts only gate access to the API; an owner's task ledger is created
    on its first task, not at signup.
    """
    __tablename__ = "accounts"

    address: str = Field(primary_key=True, max_length=42)
    hashed_password: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
