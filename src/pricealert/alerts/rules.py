# src/pricealert/alerts/rules.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from pricealert.errors import ConfigError


@dataclass(slots=True, frozen=True)
class ThresholdTarget:
    """
    Fire when the price falls below `threshold`.
    Re-arms only once the price is back at or above threshold + buffer.
    """
    id: str
    label: str
    threshold: float
    buffer: float = 0.0

    @property
    def rearm_above(self) -> float:
        return self.threshold + self.buffer


def to_finite(x: Any, name: str) -> float:
    """Coerce a number or numeric string to a finite float, else ConfigError."""
    if isinstance(x, bool) or x is None:
        raise ConfigError(f"Invalid {name}: {x!r}")
    try:
        n = float(x.strip()) if isinstance(x, str) else float(x)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {name}: {x!r}") from None
    if not math.isfinite(n):
        raise ConfigError(f"Invalid {name}: {x!r}")
    return n


def parse_target(raw: Mapping[str, Any]) -> ThresholdTarget:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"target entries must be objects, got {type(raw).__name__}")

    tid = raw.get("id")
    if not isinstance(tid, str) or not tid.strip():
        raise ConfigError(f"target is missing a string id: {dict(raw)!r}")

    label = raw.get("label")
    if label is None:
        label = tid

    threshold = to_finite(raw.get("threshold"), f"threshold for {tid}")
    buffer = to_finite(raw.get("buffer", 0), f"buffer for {tid}")
    if buffer < 0:
        raise ConfigError(f"Invalid buffer for {tid}: {buffer} (must be >= 0)")

    return ThresholdTarget(id=tid, label=str(label), threshold=threshold, buffer=buffer)


def parse_targets(config: Any) -> list[ThresholdTarget]:
    """
    Validate the `targets` array of an alert config, preserving order.
    Any problem here is fatal for the run.
    """
    raw_targets = config.get("targets") if isinstance(config, Mapping) else None
    if not isinstance(raw_targets, list) or not raw_targets:
        raise ConfigError("alert config must define a non-empty targets[]")

    targets: list[ThresholdTarget] = []
    seen: set[str] = set()
    for raw in raw_targets:
        t = parse_target(raw)
        if t.id in seen:
            raise ConfigError(f"duplicate target id: {t.id}")
        seen.add(t.id)
        targets.append(t)
    return targets
