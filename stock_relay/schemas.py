# stock_relay/schemas.py
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from typing import Annotated, Optional, Union, Any

# Finite JSON numbers only: numeric strings, booleans, NaN and Infinity are rejected
Number = Union[StrictInt, Annotated[StrictFloat, Field(allow_inf_nan=False)]]


# ---------------- STOCK ENTRY ----------------
class StockEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    price: Union[int, float]
    quantity: Union[int, float]
    created_at: int = Field(alias="createdAt")
    last_updated: int = Field(alias="lastUpdated")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


# ---------------- REQUEST BODIES ----------------
class StockCreate(BaseModel):
    """Generic single-record POST body."""
    name: StrictStr = Field(min_length=1)
    price: Number
    quantity: Number


class StockUpdate(BaseModel):
    id: StrictStr = Field(min_length=1)
    name: Optional[StrictStr] = None
    price: Optional[Number] = None
    quantity: Optional[Number] = None


class StockPing(BaseModel):
    id: StrictStr = Field(min_length=1)


class FruitStock(BaseModel):
    """One element of a session batch's normalStock / mirageStock list."""
    name: StrictStr = Field(min_length=1)
    price: Number


class SessionBatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    normal_stock: Optional[Any] = Field(default=None, alias="normalStock")
    mirage_stock: Optional[Any] = Field(default=None, alias="mirageStock")
    player_name: Optional[Any] = Field(default=None, alias="playerName")
    server_id: Optional[Any] = Field(default=None, alias="serverId")
    total_fruits: Optional[Any] = Field(default=None, alias="totalFruits")


class SessionCleanup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    reason: Optional[str] = None


# ---------------- RESPONSES ----------------
class BatchSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    player_name: Optional[Any] = Field(default=None, alias="playerName")
    server_id: Optional[Any] = Field(default=None, alias="serverId")
    normal_count: int = Field(alias="normalCount")
    mirage_count: int = Field(alias="mirageCount")
    total_fruits: Any = Field(default=0, alias="totalFruits")
    stored_count: int = Field(alias="storedCount")
    skipped_count: int = Field(alias="skippedCount")
    timestamp: str

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)

