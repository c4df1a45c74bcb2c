"""
SANITIZER METRICS
=================
Prometheus-backed counters for sanitization outcomes.
"""

from __future__ import annotations

from typing import Dict

from prometheus_client import Counter

from Security.sanitizer_config import feature_enabled


_SANITIZER_EVENTS = None
_SANITIZER_THREATS = None


def _init_metrics() -> None:
    global _SANITIZER_EVENTS, _SANITIZER_THREATS
    if _SANITIZER_EVENTS is not None or not feature_enabled("sanitization-metrics", True):
        return
    _SANITIZER_EVENTS = Counter(
        "sanitizer_events_total",
        "Count of sanitizer calls on write paths",
        ["sanitizer", "outcome"],
    )
    _SANITIZER_THREATS = Counter(
        "sanitizer_threats_total",
        "Count of inputs matching each XSS removal rule",
        ["rule"],
    )


def increment_sanitizer_event(sanitizer: str, modified: bool) -> None:
    _init_metrics()
    if _SANITIZER_EVENTS is None:
        return
    outcome = "modified" if modified else "unchanged"
    _SANITIZER_EVENTS.labels(sanitizer=sanitizer, outcome=outcome).inc()


def increment_threats(rules: list[str]) -> None:
    _init_metrics()
    if _SANITIZER_THREATS is None:
        return
    for rule in rules:
        _SANITIZER_THREATS.labels(rule=rule).inc()


def _counter_value(counter, **labels) -> int:
    if counter is None:
        return 0
    return int(counter.labels(**labels)._value.get())


def get_sanitizer_metrics_snapshot(sanitizers: list[str], rules: list[str]) -> Dict[str, Dict[str, int]]:
    _init_metrics()
    snapshot: Dict[str, Dict[str, int]] = {}
    for sanitizer in sanitizers:
        snapshot[sanitizer] = {
            "modified": _counter_value(_SANITIZER_EVENTS, sanitizer=sanitizer, outcome="modified"),
            "unchanged": _counter_value(_SANITIZER_EVENTS, sanitizer=sanitizer, outcome="unchanged"),
        }
    snapshot["threats"] = {rule: _counter_value(_SANITIZER_THREATS, rule=rule) for rule in rules}
    return snapshot
