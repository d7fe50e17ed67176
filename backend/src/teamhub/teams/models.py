"""Team and membership database models."""

import secrets
import time
import uuid
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from teamhub.storage.db import Base


class Role(str, Enum):
    """Team member roles."""
    OWNER = "OWNER"          # Exactly one per team, billing, can transfer ownership
    ADMIN = "ADMIN"          # Can manage members and billing
    READ_ONLY = "READ_ONLY"  # Can read team content


ALL_ROLES = (Role.OWNER, Role.ADMIN, Role.READ_ONLY)


class InvitationStatus(str, Enum):
    """Membership status."""
    PENDING = "PENDING"  # Keyed by the invitation code
    ACTIVE = "ACTIVE"    # Keyed by the user's provider id


@dataclass(frozen=True)
class Subscription:
    """Last authoritative subscription state fetched from Stripe."""
    id: str
    product_id: str
    status: str


def new_team_id() -> str:
    return uuid.uuid4().hex


def new_invitation_code() -> str:
    """Generate a single-use invitation code.

    The millisecond timestamp prefix keeps codes sortable by creation time,
    the random suffix makes them unguessable.
    """
    return f"{time.time_ns() // 1_000_000:012x}{secrets.token_urlsafe(30)}"


class Team(Base):
    """Team account.

    The Stripe customer is created lazily on the first checkout and reused
    afterwards. The subscription columns are only ever written together.
    """

    __tablename__ = "teams"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_team_id)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Stripe
    stripe_customer_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subscription_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subscription_product_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subscription_status: Mapped[str | None] = mapped_column(String(50), nullable=True)

    @property
    def subscription(self) -> Subscription | None:
        if self.subscription_id and self.subscription_product_id and self.subscription_status:
            return Subscription(
                id=self.subscription_id,
                product_id=self.subscription_product_id,
                status=self.subscription_status,
            )
        return None

    @property
    def has_stripe_customer_id(self) -> bool:
        return bool(self.stripe_customer_id)

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, display_name={self.display_name})>"


class Member(Base):
    """Team membership record.

    ``member_id`` is the user's provider id once the membership is ACTIVE and
    the invitation code while it is PENDING. Accepting an invitation therefore
    replaces the record instead of flipping its status.
    """

    __tablename__ = "members"

    team_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    member_id: Mapped[str] = mapped_column(String(128), primary_key=True)

    role: Mapped[Role] = mapped_column(SQLEnum(Role), nullable=False, default=Role.READ_ONLY)
    status: Mapped[InvitationStatus] = mapped_column(
        SQLEnum(InvitationStatus), nullable=False, default=InvitationStatus.PENDING
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    @property
    def is_active(self) -> bool:
        return self.status == InvitationStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Member(team={self.team_id}, member={self.member_id}, role={self.role}, status={self.status})>"
