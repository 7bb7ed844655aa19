"""Tests for session batch detection, id derivation and session cleanup."""

import pytest

from stock_relay.handlers.session_handler import (
    cleanup_session,
    ingest_session_batch,
    is_session_batch,
    session_suffix,
)
from stock_relay.handlers.stock_handler import iso_timestamp, normalize_name
from stock_relay.stock_store import StockStore


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Dragon", "dragon"),
        ("Dragon Fruit", "dragon-fruit"),
        ("T-Rex  \t Fruit", "t-rex-fruit"),
    ],
)
def test_normalize_name(name: str, expected: str) -> None:
    assert normalize_name(name) == expected


def test_session_suffix_uses_last_eight_characters() -> None:
    assert session_suffix("abcdefgh12345678") == "12345678"
    assert session_suffix("short") == "short"


def test_iso_timestamp_matches_javascript_format() -> None:
    assert iso_timestamp(1_700_000_000_123) == "2023-11-14T22:13:20.123Z"


class TestIsSessionBatch:
    def test_session_with_one_list(self) -> None:
        assert is_session_batch({"sessionId": "s", "mirageStock": []})

    def test_session_without_lists(self) -> None:
        assert not is_session_batch({"sessionId": "s", "name": "x"})

    def test_lists_without_session(self) -> None:
        assert not is_session_batch({"normalStock": [{"name": "Apple", "price": 1}]})

    def test_not_a_dict(self) -> None:
        assert not is_session_batch([{"sessionId": "s"}])

    @pytest.mark.parametrize("value", [False, 0, "", None])
    def test_falsy_stock_list_does_not_count(self, value) -> None:
        assert not is_session_batch({"sessionId": "s", "normalStock": value, "name": "Ice"})

    def test_empty_dict_still_counts(self) -> None:
        assert is_session_batch({"sessionId": "s", "normalStock": {}})


class TestIngest:
    def test_entries_are_tagged_by_variant(self, store: StockStore, clock) -> None:
        summary = ingest_session_batch(store, {
            "sessionId": "abcdefgh12345678",
            "normalStock": [{"name": "Rocket", "price": 5000}],
            "mirageStock": [{"name": "Leopard", "price": 5000000}],
        })

        assert summary.stored_count == 2
        assert summary.timestamp == iso_timestamp(clock.now)
        assert store.get("normal-rocket-12345678").name == "Rocket (Normal)"
        assert store.get("mirage-leopard-12345678").name == "Leopard (Mirage)"

    def test_non_list_category_is_ignored(self, store: StockStore) -> None:
        summary = ingest_session_batch(store, {"sessionId": "abcdefgh12345678", "normalStock": "Rocket"})

        assert summary.normal_count == 0
        assert summary.stored_count == 0
        assert summary.skipped_count == 0
        assert len(store) == 0

    def test_boolean_and_empty_names_are_skipped(self, store: StockStore) -> None:
        summary = ingest_session_batch(store, {
            "sessionId": "abcdefgh12345678",
            "normalStock": [
                {"name": "", "price": 1},
                {"name": "Spin", "price": True},
                "Spin",
                {"name": "Spin", "price": 7.5},
            ],
        })

        assert summary.skipped_count == 3
        assert store.get("normal-spin-12345678").price == 7.5

    def test_numeric_session_id_is_accepted(self, store: StockStore) -> None:
        summary = ingest_session_batch(store, {"sessionId": 9876543210, "normalStock": [{"name": "Ice", "price": 1}]})

        assert summary.session_id == "9876543210"
        assert store.get("normal-ice-76543210") is not None

    def test_summary_serializes_with_wire_names(self, store: StockStore) -> None:
        summary = ingest_session_batch(store, {"sessionId": "abcdefgh12345678", "mirageStock": []})

        assert set(summary.to_json()) == {
            "sessionId", "playerName", "serverId", "normalCount", "mirageCount",
            "totalFruits", "storedCount", "skippedCount", "timestamp",
        }
        assert summary.to_json()["totalFruits"] == 0


def test_cleanup_session(store: StockStore) -> None:
    ingest_session_batch(store, {"sessionId": "abcdefgh12345678", "normalStock": [{"name": "Ice", "price": 1}]})

    suffix, deleted, reason = cleanup_session(store, {"sessionId": "abcdefgh12345678", "reason": "server_shutdown"})

    assert (suffix, deleted, reason) == ("12345678", 1, "server_shutdown")
    assert len(store) == 0
