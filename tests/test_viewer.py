"""Tests for the console polling viewer."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from stock_relay import viewer

STOCKS = [
    {"id": "normal-rocket-1", "name": "Rocket (Normal)", "price": 5000},
    {"id": "mirage-leopard-1", "name": "Leopard (Mirage)", "price": 5000000},
    {"id": "manual-1", "name": "Manual", "price": 10},
]


@pytest.mark.parametrize(
    "price, expected",
    [(500, "500"), (1500, "1.5K"), (1000, "1.0K"), (2500000, "2.5M"), (7.5, "7.5")],
)
def test_format_price(price, expected: str) -> None:
    assert viewer.format_price(price) == expected


@pytest.mark.parametrize("price, expected", [("cheap", "cheap"), (None, "None"), (True, "True")])
def test_format_price_passes_odd_values_through(price, expected: str) -> None:
    assert viewer.format_price(price) == expected


def test_render_tolerates_odd_entries() -> None:
    odd = [{"name": "Ice (Normal)", "price": "n/a"}, {"name": None, "price": 1}, {"price": 2}]

    output = viewer.render(odd, "12:00:00")

    assert "$n/a" in output
    assert "Normal Fruits (1)" in output


def test_split_by_variant_ignores_untagged() -> None:
    normal, mirage = viewer.split_by_variant(STOCKS)

    assert [s["id"] for s in normal] == ["normal-rocket-1"]
    assert [s["id"] for s in mirage] == ["mirage-leopard-1"]


def test_render() -> None:
    output = viewer.render(STOCKS, "12:00:00")

    assert "Normal: 1  Mirage: 1" in output
    assert "Rocket" in output and "$5.0K" in output
    assert "Leopard" in output and "$5.0M" in output
    assert "(Normal)" not in output.split("\n", 2)[2]


def test_render_empty() -> None:
    assert viewer.render([], "12:00:00").count("No stock available") == 2


def _response(status_code: int, payload) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


def test_fetch_stocks_uses_public_key() -> None:
    with patch("stock_relay.viewer.requests.get", return_value=_response(200, {"success": True, "data": STOCKS})) as get:
        stocks = viewer.fetch_stocks("http://relay:8000/")

    assert stocks == STOCKS
    get.assert_called_once_with(
        "http://relay:8000/api/stocks/bloxfruits",
        params={"key": "status"},
        timeout=viewer.REQUEST_TIMEOUT,
    )


def test_fetch_stocks_raises_on_error_payload() -> None:
    payload = {"error": "Unauthorized", "message": "Invalid or missing Authorization header"}
    with patch("stock_relay.viewer.requests.get", return_value=_response(401, payload)):
        with pytest.raises(viewer.ViewerError, match="Invalid or missing"):
            viewer.fetch_stocks("http://relay:8000")


def test_fetch_stocks_wraps_connection_errors() -> None:
    with patch("stock_relay.viewer.requests.get", side_effect=requests.exceptions.ConnectionError("refused")):
        with pytest.raises(viewer.ViewerError):
            viewer.fetch_stocks("http://relay:8000")


def test_run_once_survives_fetch_errors(caplog) -> None:
    with patch("stock_relay.viewer.fetch_stocks", side_effect=viewer.ViewerError("down")):
        viewer.run("http://relay:8000", interval=15, once=True)

    assert "down" in caplog.text


def test_main_once_prints_table(capsys) -> None:
    with patch("stock_relay.viewer.fetch_stocks", return_value=STOCKS):
        viewer.main(["--once", "--base-url", "http://relay:8000"])

    assert "Normal Fruits (1)" in capsys.readouterr().out
