# stock_relay/scheduler.py
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from stock_relay.config import CLEANUP_INTERVAL_SECONDS, DATA_EXPIRY_SECONDS, SCHEDULER_TIMEZONE
from stock_relay.stock_store import StockStore

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "sweep_expired_stocks"


def sweep_expired_stocks(store: StockStore):
    """
    Scheduled job that evicts stale stocks while nobody is reading.
    Reads sweep on their own; this only reclaims memory in between.
    """
    try:
        expired = store.sweep(max_age_ms=DATA_EXPIRY_SECONDS * 1000)
        if expired:
            logger.info(f"⏰ Scheduled sweep removed {len(expired)} expired stock(s). {len(store)} remaining.")
        else:
            logger.debug("⏰ Scheduled sweep found nothing to remove.")
    except Exception as e:
        logger.error(f"⚠️ Scheduled sweep failed: {e}", exc_info=True)


def create_scheduler(store: StockStore, interval_seconds: int = CLEANUP_INTERVAL_SECONDS) -> AsyncIOScheduler:
    """Builds an unstarted scheduler with the sweep job registered."""
    scheduler = AsyncIOScheduler(timezone=SCHEDULER_TIMEZONE)
    scheduler.add_job(
        sweep_expired_stocks,
        'interval',
        seconds=interval_seconds,
        args=[store],
        id=SWEEP_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    logger.info(f"--- Stock sweep job scheduled every {interval_seconds} seconds ---")
    return scheduler
