# src/pricealert/alerts/notifiers.py
from __future__ import annotations
import os
import secrets
from typing import Optional, Protocol

import structlog

log = structlog.get_logger("notifier")

class RunOutputs(Protocol):
    def set_output(self, name: str, value: str) -> None: ...


class GithubOutputs:
    """
    Append-only key/value sink in the $GITHUB_OUTPUT format:

        name<<DELIM
        value (may span lines)
        DELIM

    A fresh random delimiter per record keeps multi-line values safe.
    No path configured -> every write is a no-op.
    """
    def __init__(self, path: Optional[str] = None):
        self.path = path

    @classmethod
    def from_env(cls) -> "GithubOutputs":
        return cls(os.getenv("GITHUB_OUTPUT") or None)

    @staticmethod
    def _delimiter(value: str) -> str:
        while True:
            d = f"__D_{secrets.token_hex(8)}__"
            if d not in value:
                return d

    def set_output(self, name: str, value: str) -> None:
        if not self.path:
            return
        d = self._delimiter(value)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{d}\n{value}\n{d}\n")


class MemoryOutputs:
    """Collects outputs in a dict; later writes win, like the runner's parsing."""
    def __init__(self):
        self.values: dict[str, str] = {}

    def set_output(self, name: str, value: str) -> None:
        self.values[name] = value


class ConsoleNotifier:
    """Echo the decision to the log so it shows up in the job transcript."""

    def no_alerts(self, price: float, iso_time: str) -> None:
        log.info("no_alerts", price=price, time=iso_time)

    def alert(self, subject: str, body: str) -> None:
        log.info("alert_needed", subject=subject)
        print(body, flush=True)
