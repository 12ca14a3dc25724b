from __future__ import annotations

from typing import TypedDict, Literal, Optional

# ---- state wire shapes (JSON on disk / in Redis) ----

Zone = Literal["above", "below"]

class TargetRecordDict(TypedDict, total=False):
    armed: bool
    lastState: Zone
    lastAlertAtMs: Optional[int]

class StateDict(TypedDict, total=False):
    version: int
    targets: dict[str, TargetRecordDict]

# ---- alerting domain ----

class BreachedTarget(TypedDict):
    id: str
    label: str
    threshold: float
    buffer: float
