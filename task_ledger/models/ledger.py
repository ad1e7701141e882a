from sqlmodel import SQLModel, Field

class TaskLedger(SQLModel, table=True):
    """Per-owner bookkeeping: sequence length and the cached live count."""
    __tablename__ = "ledgers"

    owner: str = Field(primary_key=True, max_length=42)
    length: int = Field(default=0)
    active_count: int = Field(default=0)
