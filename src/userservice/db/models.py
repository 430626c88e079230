"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Alembic migrations mirror these definitions.

Key concepts:
- Unique constraints on username and nickname are the last line of
  defense against concurrent signups racing past the existence checks
- Accounts are never physically deleted; deleted="Y" hides them
- One refresh token row per account (account_id is the primary key)
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DELETED = "Y"
ACTIVE = "N"


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    """A registered user account.

    Learn: Mutations go through the transition methods below so every
    change is explicit. The service always finishes a mutation with
    touch(now) so updated_at moves on every change.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("nickname", name="uq_users_nickname"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    nickname: Mapped[str] = mapped_column(String(50), nullable=False)
    birth_date: Mapped[str] = mapped_column(String(20), nullable=False)
    birth_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    # yyyyMMddHHmmss in the service timezone
    created_at: Mapped[str] = mapped_column(String(15), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(15), nullable=False)
    deleted: Mapped[str] = mapped_column(String(1), nullable=False, default=ACTIVE)

    @property
    def is_deleted(self) -> bool:
        return self.deleted == DELETED

    def change_nickname(self, nickname: str) -> None:
        self.nickname = nickname

    def change_password(self, password_digest: str) -> None:
        self.password = password_digest

    def mark_deleted(self) -> None:
        """Logical delete. There is no way back."""
        self.deleted = DELETED

    def touch(self, now: str) -> None:
        self.updated_at = now

    def __repr__(self) -> str:
        return f"<Account id={self.id} username={self.username!r} deleted={self.deleted}>"


class RefreshToken(Base):
    """The single active refresh token for an account.

    Learn: account_id is the primary key, so saving a new token for an
    account replaces the old one: logging in on a second device
    revokes the first device's refresh capability.
    """

    __tablename__ = "refresh_tokens"

    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True
    )
    token: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
