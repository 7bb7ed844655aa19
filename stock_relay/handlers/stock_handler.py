# stock_relay/handlers/stock_handler.py
import logging
import re
from datetime import datetime, timezone
from pydantic import ValidationError
from stock_relay.errors import BadRequestError, StockNotFoundError
from stock_relay.schemas import StockCreate, StockEntry, StockPing, StockUpdate
from stock_relay.stock_store import StockStore

logger = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """'Dragon  Fruit' -> 'dragon-fruit'"""
    return WHITESPACE_RE.sub("-", name.lower())


def iso_timestamp(ms: int) -> str:
    """Epoch milliseconds -> '2025-01-01T00:00:00.000Z'."""
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _invalid_fields(exc: ValidationError) -> str:
    fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
    return ", ".join(fields)


def create_stock(store: StockStore, body) -> StockEntry:
    """Validates a generic {name, price, quantity} record and stores it under a fresh id."""
    try:
        payload = StockCreate.model_validate(body)
    except ValidationError as e:
        logger.warning(f"Rejected stock record, invalid fields: {_invalid_fields(e)}")
        raise BadRequestError(
            "Missing or invalid fields: name, price, quantity required "
            "OR use Roblox format with sessionId, normalStock, mirageStock"
        )

    now = store.now()
    entry = StockEntry(
        id=f"{normalize_name(payload.name)}-{now}",
        name=payload.name,
        price=payload.price,
        quantity=payload.quantity,
        created_at=now,
        last_updated=now,
    )
    stored = store.upsert(entry)
    logger.info(f"✅ Created stock '{stored.id}'")
    return stored


def update_stock(store: StockStore, body) -> StockEntry:
    # ids are always strings in the store; a numeric id is looked up as its text
    if not isinstance(body, dict) or not body.get("id"):
        raise BadRequestError("Stock ID is required")
    try:
        payload = StockUpdate.model_validate({**body, "id": str(body["id"])})
    except ValidationError as e:
        raise BadRequestError(f"Invalid fields: {_invalid_fields(e)}")

    updated = store.update_partial(
        payload.id,
        name=payload.name,
        price=payload.price,
        quantity=payload.quantity,
    )
    if updated is None:
        raise StockNotFoundError(payload.id)
    logger.info(f"Updated stock '{updated.id}'")
    return updated


def ping_stock(store: StockStore, body) -> int:
    """Keep-alive: refreshes lastUpdated and returns the new timestamp."""
    if not isinstance(body, dict) or not body.get("id"):
        raise BadRequestError("Stock ID is required for ping")
    payload = StockPing(id=str(body["id"]))

    last_updated = store.touch(payload.id)
    if last_updated is None:
        raise StockNotFoundError(payload.id)
    logger.debug(f"Pinged stock '{payload.id}'")
    return last_updated


def delete_stock(store: StockStore, stock_id: str) -> StockEntry:
    deleted = store.delete(stock_id)
    if deleted is None:
        raise StockNotFoundError(stock_id)
    logger.info(f"🗑️ Deleted stock '{stock_id}'")
    return deleted
