"""Base Domain Entity

Shared SQLModel base for all persisted entities.
"""

from sqlmodel import SQLModel


class BaseModel(SQLModel):
    """Base class for table entities (registers on SQLModel.metadata)"""

    pass
