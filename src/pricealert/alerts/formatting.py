from __future__ import annotations
from typing import Optional, Sequence

from pricealert.utils.time import iso_utc
from pricealert.utils.types import BreachedTarget

def fmt_num(x: float) -> str:
    """60000.0 -> '60000', 60000.5 -> '60000.5'"""
    x = float(x)
    return str(int(x)) if x.is_integer() else repr(x)

def split_product(product: str) -> tuple[str, str]:
    """'BTC-USD' -> ('BTC', 'USD'); anything without a dash is treated as the asset."""
    base, sep, quote = product.partition("-")
    return base or product, (quote if sep else "USD")

def format_alert_subject(price: float, breached: Sequence[BreachedTarget], product: str = "BTC-USD") -> str:
    asset, quote = split_product(product)
    labels = ", ".join(b["label"] for b in breached)
    return f"🚨 {asset} alert ({price:.2f} {quote}): {labels}"

def format_alert_body(
    price: float,
    breached: Sequence[BreachedTarget],
    now_ms: int,
    product: str = "BTC-USD",
    run_url: Optional[str] = None,
) -> str:
    asset, quote = split_product(product)
    lines = [
        f"{asset} spot ({quote}): {price:.2f}",
        "",
        "Triggered targets:",
    ]
    for b in breached:
        lines.append(
            f"- {b['label']}: below {fmt_num(b['threshold'])} "
            f"(re-arm at {fmt_num(b['threshold'] + b['buffer'])})"
        )
    lines.append("")
    if run_url:
        lines.append(f"Run: {run_url}")
    lines.append(f"Time (UTC): {iso_utc(now_ms)}")
    return "\n".join(lines)
