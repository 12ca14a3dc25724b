from __future__ import annotations
import math
from typing import Any

from pricealert.errors import PriceFetchError

def parse_spot_price(m: Any, name: str = "spot price") -> float:
    """
    Return the finite spot price carried by `m`; raise PriceFetchError otherwise.

    Coinbase v2 spot shape:
      {"data": {"base": "BTC", "currency": "USD", "amount": "64123.45"}}
    Flat shapes such as {"price": 64123.45} or {"amount": "64123.45"} are accepted too.
    """
    if not isinstance(m, dict):
        raise PriceFetchError(f"Invalid {name} payload: {m!r}")

    data = m.get("data")
    px = data.get("amount") if isinstance(data, dict) else None
    if px is None:
        px = m.get("price", m.get("amount"))

    # amounts arrive as strings; bools are not prices
    if isinstance(px, bool) or not isinstance(px, (int, float, str)):
        raise PriceFetchError(f"Invalid {name}: {px!r}")
    try:
        v = float(px)
    except ValueError:
        raise PriceFetchError(f"Invalid {name}: {px!r}") from None
    if not math.isfinite(v):
        raise PriceFetchError(f"Invalid {name}: {px!r}")
    return v
