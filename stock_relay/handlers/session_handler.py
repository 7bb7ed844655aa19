# stock_relay/handlers/session_handler.py
"""
Handles the payloads sent by the in-game script: a whole stock snapshot
for one session on POST, and a session wipe on DELETE.
"""
import logging
from typing import Tuple
from pydantic import ValidationError
from stock_relay.handlers.stock_handler import iso_timestamp, normalize_name
from stock_relay.schemas import BatchSummary, FruitStock, SessionBatch, SessionCleanup, StockEntry
from stock_relay.stock_store import StockStore

logger = logging.getLogger(__name__)

SESSION_SUFFIX_LENGTH = 8

# batch key -> (id prefix, display suffix)
VARIANTS = {
    "normalStock": ("normal", "Normal"),
    "mirageStock": ("mirage", "Mirage"),
}


def session_suffix(session_id) -> str:
    return str(session_id)[-SESSION_SUFFIX_LENGTH:]


def _is_present(value) -> bool:
    # Empty lists still count; false, 0, "" and null do not
    return isinstance(value, (list, dict)) or bool(value)


def is_session_batch(body) -> bool:
    """A body is a session batch when it has a sessionId and at least one stock list."""
    if not isinstance(body, dict) or not body.get("sessionId"):
        return False
    return any(_is_present(body.get(key)) for key in VARIANTS)


def _store_variant(store: StockStore, items, variant: str, label: str, suffix: str, now: int) -> Tuple[int, int]:
    if not isinstance(items, list):
        return 0, 0

    stored, skipped = 0, 0
    for item in items:
        try:
            fruit = FruitStock.model_validate(item)
        except ValidationError:
            skipped += 1
            continue
        store.upsert(StockEntry(
            id=f"{variant}-{normalize_name(fruit.name)}-{suffix}",
            name=f"{fruit.name} ({label})",
            price=fruit.price,
            quantity=1,
            created_at=now,
            last_updated=now,
        ))
        stored += 1
    return stored, skipped


def ingest_session_batch(store: StockStore, body: dict) -> BatchSummary:
    """
    Expands normalStock / mirageStock into one entry per fruit.
    Elements without a name or a numeric price are skipped and only
    show up in skippedCount; the batch itself never fails because of them.
    """
    batch = SessionBatch.model_validate({**body, "sessionId": str(body["sessionId"])})
    suffix = session_suffix(batch.session_id)
    now = store.now()

    stored_total, skipped_total = 0, 0
    for key, (variant, label) in VARIANTS.items():
        stored, skipped = _store_variant(store, body.get(key), variant, label, suffix, now)
        stored_total += stored
        skipped_total += skipped

    if skipped_total:
        logger.warning(f"Session {suffix}: skipped {skipped_total} malformed stock item(s)")
    logger.info(f"📦 Session {suffix}: stored {stored_total} stock(s) from player '{batch.player_name}'")

    return BatchSummary(
        session_id=batch.session_id,
        player_name=batch.player_name,
        server_id=batch.server_id,
        normal_count=len(batch.normal_stock) if isinstance(batch.normal_stock, list) else 0,
        mirage_count=len(batch.mirage_stock) if isinstance(batch.mirage_stock, list) else 0,
        total_fruits=batch.total_fruits or 0,
        stored_count=stored_total,
        skipped_count=skipped_total,
        timestamp=iso_timestamp(now),
    )


def cleanup_session(store: StockStore, body: dict) -> Tuple[str, int, str]:
    """Wipes every stock of a session. Returns (suffix, deleted count, reason)."""
    cleanup = SessionCleanup.model_validate({
        "sessionId": str(body["sessionId"]),
        "reason": str(body["reason"]) if body.get("reason") else "unknown",
    })
    suffix = session_suffix(cleanup.session_id)
    deleted_count = store.delete_by_session_suffix(suffix)
    logger.info(f"Session {suffix} cleaned up ({cleanup.reason}): {deleted_count} stock(s) removed")
    return suffix, deleted_count, cleanup.reason
