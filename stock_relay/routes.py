# stock_relay/routes.py
from fastapi import APIRouter, Request, Depends, status
from typing import Optional
import logging
from stock_relay.auth import AccessMode, authorize
from stock_relay.config import STOCKS_PATH, PUBLIC_ACCESS_KEY
from stock_relay.errors import BadRequestError, InternalError, StockNotFoundError, StockRelayError
from stock_relay.handlers.stock_handler import create_stock, update_stock, ping_stock, delete_stock, iso_timestamp
from stock_relay.handlers.session_handler import is_session_batch, ingest_session_batch, cleanup_session
from stock_relay.stock_store import StockStore, get_store

logger = logging.getLogger(__name__)

stock_router = APIRouter(prefix=STOCKS_PATH, tags=["Stocks"])


@stock_router.get("")
async def get_stocks(
    id: Optional[str] = None,
    access: AccessMode = Depends(authorize),
    store: StockStore = Depends(get_store),
):
    is_public = access == AccessMode.PUBLIC
    try:
        # Stale entries must never be returned, so every read sweeps first
        store.sweep()

        if id:
            stock = store.get(id)
            if not stock:
                raise StockNotFoundError(id)
            response = {"success": True, "data": stock.to_json()}
            if is_public:
                response["access"] = "public"
            return response

        all_stocks = [stock.to_json() for stock in store.list()]
        response = {
            "success": True,
            "data": all_stocks,
            "count": len(all_stocks),
            "lastCleanup": iso_timestamp(store.last_sweep_at),
        }
        if is_public:
            response["access"] = "public"
            response["note"] = f"Public access via ?key={PUBLIC_ACCESS_KEY} parameter"
        return response
    except StockRelayError:
        raise
    except Exception as e:
        logger.error(f"❌ GET Error: {e}", exc_info=True)
        raise InternalError("Failed to retrieve data")


@stock_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(authorize)])
async def post_stocks(
    request: Request,
    store: StockStore = Depends(get_store),
):
    try:
        body = await request.json()
        logger.debug(f"📦 Incoming stock payload: {body}")

        if is_session_batch(body):
            summary = ingest_session_batch(store, body)
            return {
                "success": True,
                "message": "Blox Fruits stock updated successfully",
                "data": summary.to_json(),
            }

        stock = create_stock(store, body)
        return {
            "success": True,
            "message": "Stock created successfully",
            "data": stock.to_json(),
        }
    except StockRelayError:
        raise
    except Exception as e:
        logger.error(f"❌ POST Error: {e}", exc_info=True)
        raise InternalError("Failed to create stock")


@stock_router.put("", dependencies=[Depends(authorize)])
async def put_stock(
    request: Request,
    store: StockStore = Depends(get_store),
):
    try:
        body = await request.json()
        stock = update_stock(store, body)
        return {
            "success": True,
            "message": "Stock updated successfully",
            "data": stock.to_json(),
        }
    except StockRelayError:
        raise
    except Exception as e:
        logger.error(f"❌ PUT Error: {e}", exc_info=True)
        raise InternalError("Failed to update stock")


@stock_router.delete("", dependencies=[Depends(authorize)])
async def delete_stocks(
    request: Request,
    id: Optional[str] = None,
    store: StockStore = Depends(get_store),
):
    try:
        if not id:
            # Without ?id the in-game script may be asking to wipe its session
            try:
                body = await request.json()
            except Exception as e:
                logger.debug(f"DELETE without id and without a readable body: {e}")
                body = None

            if isinstance(body, dict) and body.get("sessionId"):
                suffix, deleted_count, reason = cleanup_session(store, body)
                return {
                    "success": True,
                    "message": f"Session {suffix} cleaned up",
                    "deletedCount": deleted_count,
                    "reason": reason,
                }
            raise BadRequestError("Stock ID is required")

        deleted = delete_stock(store, id)
        return {
            "success": True,
            "message": f"Stock {id} deleted successfully",
            "deletedData": deleted.to_json(),
        }
    except StockRelayError:
        raise
    except Exception as e:
        logger.error(f"❌ DELETE Error: {e}", exc_info=True)
        raise InternalError("Failed to delete stock")


@stock_router.patch("", dependencies=[Depends(authorize)])
async def ping_stocks(
    request: Request,
    store: StockStore = Depends(get_store),
):
    try:
        body = await request.json()
        last_updated = ping_stock(store, body)
        return {
            "success": True,
            "message": "Stock pinged successfully",
            "lastUpdated": iso_timestamp(last_updated),
        }
    except StockRelayError:
        raise
    except Exception as e:
        logger.error(f"❌ PATCH Error: {e}", exc_info=True)
        raise InternalError("Failed to ping stock")
