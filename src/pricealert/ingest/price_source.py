from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

import aiohttp
import structlog

from pricealert.errors import PriceFetchError
from pricealert.ingest.parser import parse_spot_price

log = structlog.get_logger("price_source")

DEFAULT_PRODUCT = "BTC-USD"
COINBASE_SPOT_URL = "https://api.coinbase.com/v2/prices/{product}/spot"  # public spot endpoint


@dataclass(slots=True)
class PriceSourceConfig:
    product: str = DEFAULT_PRODUCT
    url: Optional[str] = None         # defaults to the Coinbase spot URL for `product`
    timeout_s: float = 10.0

    @property
    def resolved_url(self) -> str:
        return self.url or COINBASE_SPOT_URL.format(product=self.product)


class SpotPriceSource:
    """
    One blocking-style GET per run. Any non-2xx, network error, timeout or bad payload
    is a PriceFetchError; there is no retry here.
    """
    def __init__(self, cfg: PriceSourceConfig, session: Optional[aiohttp.ClientSession] = None):
        self.cfg = cfg
        self._session = session

    async def fetch(self) -> float:
        if self._session is not None:
            return await self._fetch(self._session)
        timeout = aiohttp.ClientTimeout(total=self.cfg.timeout_s)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            return await self._fetch(session)

    async def _fetch(self, session: aiohttp.ClientSession) -> float:
        url = self.cfg.resolved_url
        try:
            async with session.get(url, headers={"Accept": "application/json"}) as resp:
                if not 200 <= resp.status < 300:
                    raise PriceFetchError(f"Price fetch failed: {resp.status} {resp.reason or ''}".rstrip())
                payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise PriceFetchError(f"Price fetch failed: {e!r}") from e
        except ValueError as e:
            # body was not JSON
            raise PriceFetchError(f"Price fetch returned malformed JSON: {e}") from e

        price = parse_spot_price(payload, f"{self.cfg.product} spot price")
        log.info("price_fetched", product=self.cfg.product, price=price)
        return price
