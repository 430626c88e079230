"""Persistence for accounts and refresh tokens.

Learn: Stores wrap an AsyncSession and only flush. The service that owns
the unit of work decides when to commit.
"""

from userservice.repositories.accounts import AccountStore
from userservice.repositories.refresh_tokens import RefreshTokenStore

__all__ = ["AccountStore", "RefreshTokenStore"]
