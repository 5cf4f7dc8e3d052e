from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from models.push_token import PushToken
from repositories.base import BaseRepository


class PushTokenRepository(BaseRepository[PushToken]):

    def __init__(self, db: AsyncSession):
        super().__init__(PushToken, db)

    async def get_by_token(self, token: str) -> Optional[PushToken]:
        result = await self.db.execute(select(PushToken).where(PushToken.token == token))
        return result.scalar_one_or_none()

    async def upsert(self, token: str, platform: str) -> PushToken:
        existing = await self.get_by_token(token)
        if existing:
            return await self.update(existing, {"platform": platform})
        return await self.create({"token": token, "platform": platform})

    async def tokens_for_platform(self, platform: str) -> List[str]:
        result = await self.db.execute(
            select(PushToken.token).where(PushToken.platform == platform).order_by(PushToken.id.asc())
        )
        return list(result.scalars().all())

    async def delete_tokens(self, tokens: List[str]) -> int:
        if not tokens:
            return 0
        result = await self.db.execute(delete(PushToken).where(PushToken.token.in_(tokens)))
        await self.db.commit()
        return result.rowcount
