import json
from pathlib import Path
import pytest

from pricealert.config import Settings, load_targets, run_url_from_env
from pricealert.errors import ConfigError


def test_defaults_from_empty_env():
    s = Settings.from_env({})
    assert s.config_path == "config/btc-targets.json"
    assert s.state_path == "state/btc-alert-state.json"
    assert s.state_redis_url is None
    assert s.price.product == "BTC-USD"
    assert s.price.timeout_s == 10.0
    assert s.github_output is None
    assert s.run_url is None


def test_env_overrides():
    s = Settings.from_env({
        "ALERT_CONFIG_PATH": "c.json",
        "ALERT_STATE_PATH": "s.json",
        "STATE_REDIS_URL": "redis://localhost:6379/0",
        "STATE_REDIS_KEY": "k",
        "PRICE_PRODUCT": "eth-usd",
        "PRICE_URL": "http://localhost/p",
        "PRICE_TIMEOUT_S": "2.5",
        "GITHUB_OUTPUT": "/tmp/out",
    })
    assert (s.config_path, s.state_path) == ("c.json", "s.json")
    assert s.state_redis_url == "redis://localhost:6379/0"
    assert s.state_redis_key == "k"
    assert s.price.product == "ETH-USD"
    assert s.price.resolved_url == "http://localhost/p"
    assert s.price.timeout_s == 2.5
    assert s.github_output == "/tmp/out"


@pytest.mark.parametrize("bad", ["abc", "0", "-1", "nan"])
def test_bad_timeout(bad):
    with pytest.raises(ConfigError):
        Settings.from_env({"PRICE_TIMEOUT_S": bad})


def test_run_url():
    assert run_url_from_env({"GITHUB_REPOSITORY": "o/r"}) is None
    assert run_url_from_env({"GITHUB_REPOSITORY": "o/r", "GITHUB_RUN_ID": "7"}) == \
        "https://github.com/o/r/actions/runs/7"
    assert run_url_from_env({
        "GITHUB_SERVER_URL": "https://ghe.example/",
        "GITHUB_REPOSITORY": "o/r",
        "GITHUB_RUN_ID": "7",
    }) == "https://ghe.example/o/r/actions/runs/7"


def test_load_targets(tmp_path):
    p = tmp_path / "targets.json"
    p.write_text(json.dumps({"targets": [{"id": "a", "threshold": "100", "buffer": 5}]}))
    [t] = load_targets(p)
    assert (t.id, t.label, t.threshold, t.buffer) == ("a", "a", 100.0, 5.0)


def test_load_targets_missing_or_invalid(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_targets(tmp_path / "nope.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{oops")
    with pytest.raises(ConfigError):
        load_targets(bad)

    empty = tmp_path / "empty.json"
    empty.write_text('{"targets": []}')
    with pytest.raises(ConfigError, match="empty.json"):
        load_targets(empty)


def test_shipped_example_config_is_valid():
    repo_root = Path(__file__).resolve().parents[2]
    targets = load_targets(repo_root / "config" / "btc-targets.json")
    assert [t.id for t in targets] == ["btc-60k", "btc-55k", "btc-50k"]
