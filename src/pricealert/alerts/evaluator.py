from __future__ import annotations

from dataclasses import dataclass

from pricealert.alerts.rules import ThresholdTarget
from pricealert.alerts.state import TargetState
from pricealert.utils.time import ONE_DAY_MS


@dataclass(slots=True, frozen=True)
class Evaluation:
    alert: bool
    next: TargetState


def evaluate_target(
    price: float,
    threshold: float,
    buffer: float,
    prev: TargetState,
    now_ms: int,
) -> Evaluation:
    """
    Hysteresis state machine for a single "price below threshold" target.

    Zones (rearm_above = threshold + buffer):
      - price >= rearm_above              -> re-arm, no alert
      - threshold <= price < rearm_above  -> grey zone: keep prev.armed, no alert
      - price < threshold                 -> alert iff armed and no alert in the last 24h;
                                             always leaves the target disarmed

    Pure: no I/O, never mutates `prev`. The caller persists `next`.
    """
    rearm_above = threshold + buffer
    last_alert_at_ms = prev.last_alert_at_ms

    if price >= rearm_above:
        return Evaluation(
            alert=False,
            next=TargetState(armed=True, last_alert_at_ms=last_alert_at_ms, last_state="above"),
        )

    if price >= threshold:
        # grey zone: neither arms nor disarms (anti-flapping)
        return Evaluation(
            alert=False,
            next=TargetState(armed=prev.armed, last_alert_at_ms=last_alert_at_ms, last_state="above"),
        )

    within_24h = last_alert_at_ms is not None and (now_ms - last_alert_at_ms) < ONE_DAY_MS

    if prev.armed and not within_24h:
        return Evaluation(
            alert=True,
            next=TargetState(armed=False, last_alert_at_ms=now_ms, last_state="below"),
        )

    return Evaluation(
        alert=False,
        next=TargetState(armed=False, last_alert_at_ms=last_alert_at_ms, last_state="below"),
    )


def evaluate(target: ThresholdTarget, price: float, prev: TargetState, now_ms: int) -> Evaluation:
    """Convenience wrapper taking a validated target config."""
    return evaluate_target(price, target.threshold, target.buffer, prev, now_ms)
