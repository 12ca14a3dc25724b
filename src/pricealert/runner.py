# src/pricealert/runner.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Sequence

import structlog

from pricealert.alerts.evaluator import evaluate
from pricealert.alerts.formatting import format_alert_body, format_alert_subject
from pricealert.alerts.notifiers import ConsoleNotifier, RunOutputs
from pricealert.alerts.rules import ThresholdTarget
from pricealert.alerts.state import StateDocument
from pricealert.errors import ConfigError
from pricealert.storage.base import StateStore
from pricealert.utils.time import iso_utc, utc_now_ms
from pricealert.utils.types import BreachedTarget

log = structlog.get_logger("runner")


class PriceSource(Protocol):
    async def fetch(self) -> float: ...


@dataclass(slots=True)
class RunResult:
    price: float
    now_ms: int
    breached: list[BreachedTarget]
    state: StateDocument
    subject: Optional[str] = None
    body: Optional[str] = None

    @property
    def alert_needed(self) -> bool:
        return bool(self.breached)


@dataclass(slots=True)
class AlertRun:
    """
    One invocation of the job:
      load state -> fetch one price -> evaluate every target (same price, same now)
      -> save state once -> emit outputs.
    Any exception escaping run() is fatal; state is only written after every target
    has been evaluated and outputs only after the write succeeded.
    """
    targets: Sequence[ThresholdTarget]
    store: StateStore
    source: PriceSource
    outputs: RunOutputs
    product: str = "BTC-USD"
    run_url: Optional[str] = None
    clock: Callable[[], int] = utc_now_ms
    console: ConsoleNotifier = field(default_factory=ConsoleNotifier)

    async def run(self) -> RunResult:
        if not self.targets:
            raise ConfigError("alert config must define a non-empty targets[]")

        state = await self.store.load()
        price = await self.source.fetch()
        now_ms = self.clock()

        breached: list[BreachedTarget] = []
        for t in self.targets:
            ev = evaluate(t, price, state.get(t.id), now_ms)
            state.put(t.id, ev.next)
            log.debug("target_evaluated", target=t.id, price=price, alert=ev.alert,
                      armed=ev.next.armed, zone=ev.next.last_state)
            if ev.alert:
                breached.append({"id": t.id, "label": t.label, "threshold": t.threshold, "buffer": t.buffer})

        await self.store.save(state)

        result = RunResult(price=price, now_ms=now_ms, breached=breached, state=state)
        if not breached:
            self.outputs.set_output("alert_needed", "false")
            self.console.no_alerts(price, iso_utc(now_ms))
            return result

        result.subject = format_alert_subject(price, breached, self.product)
        result.body = format_alert_body(price, breached, now_ms, self.product, self.run_url)
        self.outputs.set_output("alert_needed", "true")
        self.outputs.set_output("alert_subject", result.subject)
        self.outputs.set_output("alert_body", result.body)
        self.console.alert(result.subject, result.body)
        return result
