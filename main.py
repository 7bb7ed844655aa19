# main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from stock_relay.config import CORS_ORIGINS, LOG_LEVEL
from stock_relay.errors import setup_error_handlers
from stock_relay.routes import stock_router
from stock_relay.scheduler import create_scheduler
from stock_relay.stock_store import stock_store

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Starts the expiry sweeper with the application and stops it on shutdown,
    so the interval job never outlives the server.
    """
    logger.info("🚀 Application starting up...")
    scheduler = create_scheduler(stock_store)
    scheduler.start()
    app.state.scheduler = scheduler
    logger.info("✅ Background sweep scheduler has been started.")
    try:
        yield
    finally:
        logger.info("Application shutting down, stopping sweep scheduler...")
        if scheduler.running:
            scheduler.shutdown(wait=False)
        logger.info("✅ Shutdown complete.")


app = FastAPI(
    title="Blox Fruits Stock Relay API",
    description="Relays in-game stock snapshots to polling viewers",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_error_handlers(app)
app.include_router(stock_router)


@app.get("/ping", tags=["Health"])
async def ping():
    """A simple endpoint to check if the API is alive."""
    return {"status": "API is alive"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000)
