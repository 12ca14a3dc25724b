# src/pricealert/storage/json_state.py
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import structlog

from pricealert.alerts.state import StateDocument
from pricealert.errors import StateStoreError

log = structlog.get_logger("state_store")

DEFAULT_STATE_PATH = "state/btc-alert-state.json"


def dumps_state(doc: StateDocument) -> str:
    return json.dumps(doc.to_dict(), indent=2) + "\n"


def loads_state(text: str) -> StateDocument:
    return StateDocument.from_dict(json.loads(text))


class JsonStateStore:
    """
    State as a pretty-printed JSON file.
    Missing or unparseable file -> empty state (first run / self-heal).
    Writes go to a temp file in the same directory, then os.replace().
    """
    def __init__(self, path: str | os.PathLike = DEFAULT_STATE_PATH):
        self.path = Path(path)

    async def load(self) -> StateDocument:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.info("state_missing", path=str(self.path))
            return StateDocument()
        except OSError as e:
            log.warning("state_load_failed", path=str(self.path), err=str(e))
            return StateDocument()
        try:
            return loads_state(text)
        except ValueError as e:
            log.warning("state_load_failed", path=str(self.path), err=str(e))
            return StateDocument()

    async def save(self, doc: StateDocument) -> None:
        text = dumps_state(doc)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StateStoreError(f"Failed to write state to {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        log.info("state_saved", path=str(self.path), targets=len(doc.targets))
