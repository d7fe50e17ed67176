"""Todo database model."""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from teamhub.storage.db import Base


class Todo(Base):
    """Todo item owned by a team."""

    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    owner_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Todo(id={self.id}, owner={self.owner_id})>"
