"""REST order book feeds for the two venues."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..engine.book import OrderBook
from ..errors import FeedError
from ..types import Symbol, Venue


logger = logging.getLogger(__name__)


class BinanceDepth(BaseModel):
    last_update_id: int = Field(alias="lastUpdateId")
    bids: List[Tuple[str, str]]
    asks: List[Tuple[str, str]]

    def to_book(self) -> OrderBook:
        return OrderBook.from_pairs(self.bids, self.asks)


class MercadoBitcoinDepth(BaseModel):
    timestamp: int
    bids: List[Tuple[float, float]]
    asks: List[Tuple[float, float]]

    def to_book(self) -> OrderBook:
        return OrderBook.from_pairs(self.bids, self.asks)


class OrderBookFeed:
    """Fetch a top-of-book snapshot from one venue."""

    venue: Venue
    url: str
    model: type

    def __init__(
        self, client: Optional[httpx.AsyncClient] = None, timeout: float = 5.0
    ) -> None:
        self._owns_client = client is None
        self.session = client or httpx.AsyncClient()
        self.timeout = timeout

    async def __aenter__(self) -> "OrderBookFeed":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.session.aclose()

    def request(self, symbol: Symbol) -> Tuple[str, dict]:
        raise NotImplementedError

    async def fetch(self, symbol: Symbol) -> OrderBook:
        url, params = self.request(symbol)
        try:
            resp = await self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            payload = self.model.model_validate(resp.json())
            book = payload.to_book()
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            raise FeedError(f"{self.venue.value} {symbol.value}: {exc}") from exc
        logger.debug(
            "%s %s: bid=%s ask=%s",
            self.venue.value,
            symbol.value,
            book.best_bid,
            book.best_ask,
        )
        return book


class BinanceFeed(OrderBookFeed):
    venue = Venue.PRIMARY
    url = "https://api.binance.com/api/v3/depth"
    model = BinanceDepth

    def request(self, symbol: Symbol) -> Tuple[str, dict]:
        return self.url, {"symbol": symbol.venue_param(self.venue), "limit": 1}


class MercadoBitcoinFeed(OrderBookFeed):
    venue = Venue.SECONDARY
    url = "https://www.mercadobitcoin.net/api/{coin}/orderbook"
    model = MercadoBitcoinDepth

    def request(self, symbol: Symbol) -> Tuple[str, dict]:
        return self.url.format(coin=symbol.venue_param(self.venue)), {"limit": 1}


async def fetch_books(
    primary: OrderBookFeed, secondary: OrderBookFeed, symbol: Symbol
) -> Tuple[OrderBook, OrderBook]:
    """Fetch both venues concurrently; either failure raises :class:`FeedError`."""

    return tuple(await asyncio.gather(primary.fetch(symbol), secondary.fetch(symbol)))
