import math
import pytest

from pricealert.alerts.rules import ThresholdTarget, parse_target, parse_targets, to_finite
from pricealert.errors import ConfigError


def test_parse_target_defaults():
    t = parse_target({"id": "t1", "threshold": 60000})
    assert t == ThresholdTarget(id="t1", label="t1", threshold=60000.0, buffer=0.0)
    assert t.rearm_above == 60000.0


def test_parse_target_numeric_strings():
    t = parse_target({"id": "t1", "label": "Sixty", "threshold": " 60000.5 ", "buffer": "2000"})
    assert t.label == "Sixty"
    assert t.threshold == pytest.approx(60000.5)
    assert t.rearm_above == pytest.approx(62000.5)


@pytest.mark.parametrize("raw", [
    {"id": "t1"},
    {"id": "t1", "threshold": None},
    {"id": "t1", "threshold": "abc"},
    {"id": "t1", "threshold": "NaN"},
    {"id": "t1", "threshold": math.inf},
    {"id": "t1", "threshold": True},
    {"id": "t1", "threshold": 1, "buffer": "x"},
    {"id": "t1", "threshold": 1, "buffer": -5},
    {"threshold": 1},
    {"id": "", "threshold": 1},
    "not-an-object",
])
def test_parse_target_rejects_bad_entries(raw):
    with pytest.raises(ConfigError):
        parse_target(raw)


def test_error_message_names_target():
    with pytest.raises(ConfigError, match="threshold for btc-60k"):
        parse_target({"id": "btc-60k", "threshold": "sixty"})


def test_parse_targets_keeps_order():
    ts = parse_targets({"targets": [
        {"id": "b", "threshold": 2},
        {"id": "a", "threshold": 1},
    ]})
    assert [t.id for t in ts] == ["b", "a"]


@pytest.mark.parametrize("cfg", [None, {}, {"targets": []}, {"targets": {}}, []])
def test_parse_targets_requires_non_empty_list(cfg):
    with pytest.raises(ConfigError):
        parse_targets(cfg)


def test_parse_targets_rejects_duplicate_ids():
    with pytest.raises(ConfigError, match="duplicate"):
        parse_targets({"targets": [{"id": "a", "threshold": 1}, {"id": "a", "threshold": 2}]})


def test_to_finite_accepts_ints():
    assert to_finite(3, "x") == 3.0
