"""
Service context shared by request handlers and the background sweep.
"""

import asyncio
import logging
from typing import Optional, Set

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.config import Settings
from core.database import build_engine, build_session_factory, create_tables
from services.media_service import MediaService
from services.offline_sweep import SWEEP_JOB_ID, run_offline_sweep
from services.push_service import PushService

logger = logging.getLogger(__name__)


class ServiceContext:
    """Holds the engine, session factory, external services and scheduler."""

    def __init__(
        self,
        settings: Settings,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
        push_service=None,
        media_service=None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.settings = settings
        self.engine = engine
        self.session_factory = session_factory
        self.push_service = push_service
        self.media_service = media_service
        self.scheduler = scheduler or AsyncIOScheduler()
        self._tasks: Set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContext":
        engine = build_engine(
            settings.database_url,
            echo=settings.DATABASE_ECHO,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
        )
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            push_service=PushService.from_settings(settings),
            media_service=MediaService.from_settings(settings),
        )

    def track_task(self, task: asyncio.Task) -> None:
        """Keep a reference to a fire-and-forget task until it finishes."""
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def startup(self) -> None:
        if self.settings.CREATE_TABLES_ON_STARTUP:
            await create_tables(self.engine)
            logger.info("Database tables ensured")

        if self.settings.ENABLE_OFFLINE_SWEEP and not self.scheduler.running:
            self.scheduler.add_job(
                run_offline_sweep,
                trigger=IntervalTrigger(seconds=self.settings.OFFLINE_CHECK_INTERVAL_SECONDS),
                args=[self],
                id=SWEEP_JOB_ID,
                name="Raise alerts for silent devices",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            self.scheduler.start()
            logger.info(
                f"Offline sweep every {self.settings.OFFLINE_CHECK_INTERVAL_SECONDS}s "
                f"(offline after {self.settings.OFFLINE_AFTER_SECONDS}s)"
            )

    async def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        await self.engine.dispose()
        logger.info("Service context closed")
