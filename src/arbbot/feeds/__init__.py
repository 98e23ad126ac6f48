"""Order book sources."""

from .orderbook import (
    BinanceFeed,
    MercadoBitcoinFeed,
    OrderBookFeed,
    fetch_books,
)

__all__ = ["OrderBookFeed", "BinanceFeed", "MercadoBitcoinFeed", "fetch_books"]
