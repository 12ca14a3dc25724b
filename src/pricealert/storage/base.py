from __future__ import annotations

from typing import Protocol

from pricealert.alerts.state import StateDocument


class StateStore(Protocol):
    """
    Durable target-id -> TargetState mapping, read once before and written once after a run.
    - load(): never raises for missing/corrupt data; returns an empty document instead
    - save(): raises StateStoreError on failure
    """

    async def load(self) -> StateDocument: ...

    async def save(self, doc: StateDocument) -> None: ...


class MemoryStateStore:
    """In-process store; round-trips through the wire shape like the real stores."""
    def __init__(self, doc: StateDocument | None = None):
        self.doc = doc or StateDocument()
        self.saves = 0

    async def load(self) -> StateDocument:
        return StateDocument.from_dict(self.doc.to_dict())

    async def save(self, doc: StateDocument) -> None:
        self.doc = StateDocument.from_dict(doc.to_dict())
        self.saves += 1
