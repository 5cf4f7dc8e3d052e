"""
User repository for account-specific database operations.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from models.user import User
from repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with user-specific operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (already normalised) email."""
        query = select(User).where(User.email == email)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_newest_first(self) -> List[User]:
        query = select(User).order_by(User.created_at.desc(), User.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def lock(self, user_id: int) -> Optional[User]:
        """Row-lock the user for the rest of the transaction (no-op on SQLite)."""
        query = select(User).where(User.id == user_id).with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
