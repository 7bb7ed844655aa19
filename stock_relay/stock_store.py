# stock_relay/stock_store.py
import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Union

from stock_relay.config import DATA_EXPIRY_SECONDS
from stock_relay.schemas import StockEntry

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class StockStore:
    """
    In-memory mapping of stock id -> StockEntry with time-based expiry.

    Every public method runs under one re-entrant lock, so request handlers,
    worker threads and the scheduled sweep never see a half-applied write. Callers only
    ever receive copies of the stored entries.
    """

    def __init__(self, clock: Callable[[], int] = now_ms, max_age_ms: int = DATA_EXPIRY_SECONDS * 1000):
        self._entries: Dict[str, StockEntry] = {}
        self._lock = threading.RLock()
        self._clock = clock
        self.max_age_ms = max_age_ms
        self.last_sweep_at: Optional[int] = None

    def now(self) -> int:
        return self._clock()

    def get(self, stock_id: str) -> Optional[StockEntry]:
        with self._lock:
            entry = self._entries.get(stock_id)
            return entry.model_copy() if entry else None

    def list(self) -> List[StockEntry]:
        with self._lock:
            return [entry.model_copy() for entry in self._entries.values()]

    def upsert(self, entry: StockEntry) -> StockEntry:
        """
        Inserts the entry, or replaces the one already stored under entry.id.
        A replaced entry keeps its first createdAt.
        """
        with self._lock:
            existing = self._entries.get(entry.id)
            stored = entry.model_copy()
            if existing is not None:
                stored.created_at = existing.created_at
            if stored.last_updated < stored.created_at:
                stored.last_updated = stored.created_at
            self._entries[entry.id] = stored
            return stored.model_copy()

    def update_partial(
        self,
        stock_id: str,
        name: Optional[str] = None,
        price: Optional[Union[int, float]] = None,
        quantity: Optional[Union[int, float]] = None,
    ) -> Optional[StockEntry]:
        # None means "not supplied": the stored value is kept
        with self._lock:
            existing = self._entries.get(stock_id)
            if existing is None:
                return None
            updated = existing.model_copy(update={
                "name": name if name is not None else existing.name,
                "price": price if price is not None else existing.price,
                "quantity": quantity if quantity is not None else existing.quantity,
                "last_updated": max(self.now(), existing.created_at),
            })
            self._entries[stock_id] = updated
            return updated.model_copy()

    def touch(self, stock_id: str) -> Optional[int]:
        with self._lock:
            existing = self._entries.get(stock_id)
            if existing is None:
                return None
            existing.last_updated = max(self.now(), existing.created_at)
            return existing.last_updated

    def delete(self, stock_id: str) -> Optional[StockEntry]:
        with self._lock:
            return self._entries.pop(stock_id, None)

    def delete_by_session_suffix(self, suffix: str) -> int:
        """
        Removes every entry whose id contains `suffix`.
        This is a substring match on the id, so an unrelated session ending
        in the same characters is wiped too.
        """
        if not suffix:
            return 0
        with self._lock:
            doomed = [stock_id for stock_id in self._entries if suffix in stock_id]
            for stock_id in doomed:
                del self._entries[stock_id]
        logger.info(f"🧹 Removed {len(doomed)} stock(s) for session suffix '{suffix}'")
        return len(doomed)

    def sweep(self, now: Optional[int] = None, max_age_ms: Optional[int] = None) -> List[str]:
        """Evicts entries with now - lastUpdated > max_age_ms and returns their ids."""
        with self._lock:
            now = self.now() if now is None else now
            max_age_ms = self.max_age_ms if max_age_ms is None else max_age_ms
            expired = [
                stock_id for stock_id, entry in self._entries.items()
                if now - entry.last_updated > max_age_ms
            ]
            for stock_id in expired:
                del self._entries[stock_id]
                logger.info(f"Cleaned up expired data for: {stock_id}")
            self.last_sweep_at = now
            return expired

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.last_sweep_at = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


stock_store = StockStore()


def get_store() -> StockStore:
    """FastAPI dependency returning the process-wide store."""
    return stock_store
