"""User database model."""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from teamhub.storage.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """User record keyed by the identity provider's id.

    Created on the first authenticated request and never hard-deleted.
    """

    __tablename__ = "users"

    provider_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    first_sign_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    team_list: Mapped[list[str]] = mapped_column(JSON, default=list)

    @classmethod
    def new(cls, provider_id: str) -> "User":
        return cls(provider_id=provider_id, first_sign_in=_utcnow(), team_list=[])

    # The list is reassigned rather than mutated so the ORM sees the change.
    def add_team(self, team_id: str) -> None:
        if team_id not in self.team_list:
            self.team_list = [*self.team_list, team_id]

    def remove_team(self, team_id: str) -> None:
        self.team_list = [elt for elt in self.team_list if elt != team_id]

    def __repr__(self) -> str:
        return f"<User(provider_id={self.provider_id}, teams={len(self.team_list)})>"
