"""
Periodic cleanup of abandoned sessions and old audio assets.
"""
import asyncio
import logging
from datetime import timedelta

from mock_me.core.storage import AudioAssetStore
from mock_me.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class Housekeeper:
    """
    Reaps sessions older than ``session_ttl_minutes`` and prunes audio
    older than ``audio_retention_hours``. A value of 0 disables that step.
    """

    def __init__(
        self,
        session_store: SessionStore,
        asset_store: AudioAssetStore,
        session_ttl_minutes: int = 180,
        audio_retention_hours: int = 0,
        interval_seconds: int = 300,
    ):
        self.session_store = session_store
        self.asset_store = asset_store
        self.session_ttl_minutes = session_ttl_minutes
        self.audio_retention_hours = audio_retention_hours
        self.interval_seconds = interval_seconds
        self._task = None

    async def run_once(self) -> dict:
        reaped = []
        pruned = 0
        if self.session_ttl_minutes > 0:
            reaped = self.session_store.reap_expired(timedelta(minutes=self.session_ttl_minutes))
        if self.audio_retention_hours > 0:
            pruned = await self.asset_store.prune_older_than(self.audio_retention_hours * 3600)
        return {"sessions_reaped": len(reaped), "assets_pruned": pruned}

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Housekeeping pass failed: {e}")

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop())
            logger.info(f"Housekeeping started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Housekeeping stopped")
