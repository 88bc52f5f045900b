"""Periodic rest-time calculator.

Runs one pass at start, then every `duration_calc_interval_minutes`:
picks the newest workouts that still have sets without a raw or cleaned
duration, recomputes them with the scheduled cleaning bounds (10 s .. 600 s)
and commits each workout in its own transaction.

    python -m training_tracker.workers.duration_calculator
"""

from __future__ import annotations

import asyncio
import logging
import signal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from training_tracker.core.config import Settings, get_settings
from training_tracker.core.logging import configure_logging
from training_tracker.services.durations import (
    DurationRecomputeResult,
    recompute_workout_durations,
    workouts_needing_durations,
)
from training_tracker.services.outlier_cleaning import SCHEDULED

logger = logging.getLogger(__name__)


async def run_duration_pass(
    session_maker: async_sessionmaker[AsyncSession],
    settings: Settings | None = None,
) -> DurationRecomputeResult:
    """One scheduled pass over the pending workouts."""
    settings = settings or get_settings()
    async with session_maker() as session:
        workout_ids = await workouts_needing_durations(session, limit=settings.duration_calc_batch_limit)

    total = DurationRecomputeResult()
    if not workout_ids:
        logger.info("No workouts need duration calculation")
        return total

    logger.info("Processing %d workouts...", len(workout_ids))
    for workout_id in workout_ids:
        async with session_maker() as session, session.begin():
            total.add(
                await recompute_workout_durations(
                    session, workout_id, bounds=SCHEDULED, policy=settings.raw_duration_policy
                )
            )
    logger.info(
        "Completed: %d sets updated, %d outliers cleaned",
        total.sets_updated,
        total.outliers_found,
    )
    return total


async def run_forever(
    session_maker: async_sessionmaker[AsyncSession],
    settings: Settings | None = None,
    stop: asyncio.Event | None = None,
) -> None:
    """Run passes until `stop` is set. A failing pass is logged and retried next interval."""
    settings = settings or get_settings()
    stop = stop or asyncio.Event()
    interval = settings.duration_calc_interval_minutes * 60
    logger.info("Duration calculator running every %d minutes", settings.duration_calc_interval_minutes)
    while not stop.is_set():
        try:
            await run_duration_pass(session_maker, settings)
        except Exception:
            logger.exception("Duration pass failed")
        try:
            await asyncio.wait_for(stop.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass
    logger.info("Duration calculator stopped")


async def main() -> None:
    from training_tracker.db.session import async_session_maker, engine

    configure_logging()
    settings = get_settings()
    logger.info("Database: %s", engine.url.render_as_string(hide_password=True))

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)
    try:
        await run_forever(async_session_maker, settings, stop)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
