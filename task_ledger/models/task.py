from sqlmodel import SQLModel, Field

class Task(SQLModel, table=True):
    """One slot in an owner's append-only task sequence.

    ``id`` is the slot's position in the owner's sequence and is never reused.
    An empty ``content`` marks the slot as deleted; the row stays so that the
    ids of its siblings do not move.
    """
    __tablename__ = "tasks"

    owner: str = Field(primary_key=True, max_length=42)
    id: int = Field(primary_key=True, ge=0)
    content: str = Field(default="")
    completed: bool = Field(default=False)
    created_at: int = Field(default=0)
    completed_at: int = Field(default=0)

    @property
    def is_deleted(self) -> bool:
        return self.content == ""
