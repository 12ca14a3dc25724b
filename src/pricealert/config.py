from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pricealert.alerts.rules import ThresholdTarget, parse_targets, to_finite
from pricealert.errors import ConfigError
from pricealert.ingest.price_source import DEFAULT_PRODUCT, PriceSourceConfig
from pricealert.storage.json_state import DEFAULT_STATE_PATH
from pricealert.storage.redis_state import DEFAULT_STATE_KEY

DEFAULT_CONFIG_PATH = "config/btc-targets.json"


@dataclass(slots=True)
class Settings:
    config_path: str = DEFAULT_CONFIG_PATH
    state_path: str = DEFAULT_STATE_PATH
    state_redis_url: Optional[str] = None     # set -> RedisStateStore instead of the JSON file
    state_redis_key: str = DEFAULT_STATE_KEY
    price: PriceSourceConfig = field(default_factory=PriceSourceConfig)
    github_output: Optional[str] = None
    run_url: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[dict[str, str]] = None) -> "Settings":
        e = os.environ if env is None else env

        timeout_raw = e.get("PRICE_TIMEOUT_S") or "10"
        timeout_s = to_finite(timeout_raw, "PRICE_TIMEOUT_S")
        if timeout_s <= 0:
            raise ConfigError(f"Invalid PRICE_TIMEOUT_S: {timeout_raw!r} (must be > 0)")

        return cls(
            config_path=e.get("ALERT_CONFIG_PATH") or DEFAULT_CONFIG_PATH,
            state_path=e.get("ALERT_STATE_PATH") or DEFAULT_STATE_PATH,
            state_redis_url=e.get("STATE_REDIS_URL") or None,
            state_redis_key=e.get("STATE_REDIS_KEY") or DEFAULT_STATE_KEY,
            price=PriceSourceConfig(
                product=(e.get("PRICE_PRODUCT") or DEFAULT_PRODUCT).strip().upper(),
                url=e.get("PRICE_URL") or None,
                timeout_s=timeout_s,
            ),
            github_output=e.get("GITHUB_OUTPUT") or None,
            run_url=run_url_from_env(e),
        )


def run_url_from_env(e) -> Optional[str]:
    repo = e.get("GITHUB_REPOSITORY")
    run_id = e.get("GITHUB_RUN_ID")
    if not repo or not run_id:
        return None
    server = (e.get("GITHUB_SERVER_URL") or "https://github.com").rstrip("/")
    return f"{server}/{repo}/actions/runs/{run_id}"


def load_targets(path: str | os.PathLike) -> list[ThresholdTarget]:
    """Read and validate the targets file. Missing, unreadable or invalid -> ConfigError."""
    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"{p} not found; it must define targets[]") from None
    except (OSError, ValueError) as e:
        raise ConfigError(f"{p} could not be read: {e}") from e
    try:
        return parse_targets(raw)
    except ConfigError as e:
        raise ConfigError(f"{p}: {e}") from None
