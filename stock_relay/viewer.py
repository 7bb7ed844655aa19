# stock_relay/viewer.py
"""
Console viewer for the relayed stock.

Polls the public read endpoint every few seconds and prints the Normal
and Mirage stock side by side with the time of the last refresh.

    python -m stock_relay.viewer --base-url http://localhost:8000
"""
import argparse
import logging
import time
from datetime import datetime
from typing import List, Tuple
import requests
from stock_relay.config import PUBLIC_ACCESS_KEY, STOCKS_PATH, VIEWER_BASE_URL, VIEWER_REFRESH_SECONDS

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10
NORMAL_TAG = " (Normal)"
MIRAGE_TAG = " (Mirage)"


class ViewerError(Exception):
    pass


def fetch_stocks(base_url: str = VIEWER_BASE_URL) -> List[dict]:
    url = f"{base_url.rstrip('/')}{STOCKS_PATH}"
    try:
        response = requests.get(url, params={"key": PUBLIC_ACCESS_KEY}, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        raise ViewerError(f"Failed to fetch stocks: {e}") from e

    try:
        data = response.json()
    except ValueError:
        raise ViewerError(f"Unexpected response ({response.status_code}) from {url}")

    if response.status_code != 200 or not data.get("success"):
        raise ViewerError(data.get("message") or "Failed to fetch")
    return data.get("data", [])


def split_by_variant(stocks: List[dict]) -> Tuple[List[dict], List[dict]]:
    normal = [stock for stock in stocks if NORMAL_TAG in str(stock.get("name", ""))]
    mirage = [stock for stock in stocks if MIRAGE_TAG in str(stock.get("name", ""))]
    return normal, mirage


def format_price(price) -> str:
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return str(price)
    if price >= 1_000_000:
        return f"{price / 1_000_000:.1f}M"
    if price >= 1_000:
        return f"{price / 1_000:.1f}K"
    return str(price)


def render(stocks: List[dict], refreshed_at: str) -> str:
    normal, mirage = split_by_variant(stocks)
    lines = [
        f"Blox Fruits Stock  |  Normal: {len(normal)}  Mirage: {len(mirage)}  |  Last update: {refreshed_at}",
        "",
    ]
    for title, tag, fruits in (("Normal Fruits", NORMAL_TAG, normal), ("Mirage Fruits", MIRAGE_TAG, mirage)):
        lines.append(f"{title} ({len(fruits)})")
        if not fruits:
            lines.append("  No stock available")
        for fruit in fruits:
            lines.append(f"  {fruit['name'].replace(tag, ''):<24} ${format_price(fruit.get('price'))}")
        lines.append("")
    return "\n".join(lines)


def run(base_url: str, interval: int, once: bool = False):
    while True:
        try:
            stocks = fetch_stocks(base_url)
            print(render(stocks, datetime.now().strftime("%H:%M:%S")), flush=True)
        except ViewerError as e:
            logger.error(f"❌ {e}")
        if once:
            return
        time.sleep(interval)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Poll and display the relayed Blox Fruits stock.")
    parser.add_argument("--base-url", default=VIEWER_BASE_URL, help="Stock relay server URL")
    parser.add_argument("--interval", type=int, default=VIEWER_REFRESH_SECONDS, help="Seconds between refreshes")
    parser.add_argument("--once", action="store_true", help="Fetch a single time and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    try:
        run(args.base_url, args.interval, once=args.once)
    except KeyboardInterrupt:
        logger.info("Viewer stopped.")


if __name__ == "__main__":
    main()
