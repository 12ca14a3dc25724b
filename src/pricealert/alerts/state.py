from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Optional

from pricealert.utils.types import StateDict, TargetRecordDict, Zone

STATE_VERSION = 1

def _epoch_ms_or_none(x: Any) -> Optional[int]:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return None
    return int(x) if math.isfinite(x) else None

@dataclass(slots=True, frozen=True)
class TargetState:
    armed: bool = True                   # eligible to fire a new below-threshold alert
    last_alert_at_ms: Optional[int] = None
    last_state: Optional[Zone] = None    # informational only

    def to_dict(self) -> TargetRecordDict:
        d: TargetRecordDict = {"armed": self.armed}
        if self.last_state is not None:
            d["lastState"] = self.last_state
        d["lastAlertAtMs"] = self.last_alert_at_ms
        return d

    @classmethod
    def from_dict(cls, raw: Any) -> "TargetState":
        """Lenient decode: anything malformed falls back to the default for that field."""
        if not isinstance(raw, dict):
            return cls()
        armed = raw.get("armed")
        last_alert = raw.get("lastAlertAtMs")
        last_state = raw.get("lastState")
        return cls(
            armed=armed if isinstance(armed, bool) else True,
            last_alert_at_ms=_epoch_ms_or_none(last_alert),
            last_state=last_state if last_state in ("above", "below") else None,
        )

# whole-run container; stale ids are carried through untouched
@dataclass(slots=True)
class StateDocument:
    version: int = STATE_VERSION
    targets: dict[str, TargetState] = field(default_factory=dict)

    def get(self, target_id: str) -> TargetState:
        st = self.targets.get(target_id)
        return st if st is not None else TargetState()

    def put(self, target_id: str, st: TargetState) -> None:
        self.targets[target_id] = st

    def to_dict(self) -> StateDict:
        return {
            "version": self.version,
            "targets": {tid: st.to_dict() for tid, st in self.targets.items()},
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "StateDocument":
        if not isinstance(raw, dict):
            return cls()
        version = raw.get("version")
        targets = raw.get("targets")
        if not isinstance(targets, dict):
            targets = {}
        return cls(
            version=version if isinstance(version, int) and not isinstance(version, bool) else STATE_VERSION,
            targets={str(k): TargetState.from_dict(v) for k, v in targets.items()},
        )
