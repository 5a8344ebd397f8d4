import asyncio
import logging
from typing import Optional

from barta.core.config import settings
from barta.db.store import Database
from barta.domains.calls.services import CallSignalingService
from barta.domains.presence.services import SessionRegistry, TypingRegistry

logger = logging.getLogger(__name__)


async def sweep_once(db: Database) -> None:
    """Однократная очистка устаревших сессий, индикаторов набора и звонков"""
    active = await SessionRegistry(db).list_active()
    typing_removed = await TypingRegistry(db).sweep()
    calls = await CallSignalingService(db).sweep()
    logger.debug(
        f"Sweep finished: {len(active)} active sessions, {typing_removed} typing flags removed, "
        f"{calls.expired} calls expired, {calls.removed} calls removed"
    )


async def run_sweeper(db: Database, interval_seconds: Optional[int] = None) -> None:
    """Периодическая очистка, независимая от запросов"""
    interval = settings.sweep_interval_seconds if interval_seconds is None else interval_seconds
    logger.info(f"Background sweeper started, interval {interval}s")
    while True:
        await asyncio.sleep(interval)
        try:
            await sweep_once(db)
        except Exception as e:
            logger.exception(f"Background sweep failed: {e}")
