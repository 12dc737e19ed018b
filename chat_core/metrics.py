"""Minimal in-memory metrics collector.

Purpose:
    - Counters and simple latency samples for the chat service.
    - Zero external deps; can be swapped by a Prometheus exporter later.

Core API (intentionally tiny):
    inc(name, labels=None, value=1)
    observe(name, value, labels=None)
    snapshot() -> dict (copy for safe reading)

Thread-safety: coarse RLock; overhead negligible for low event volume.

Histograms keep only the last HIST_MAX_SAMPLES values per series (min/max/p50
are over that window); "count" is the total number of observations.

Metric names (documented for discoverability):
    - api_request_total{route,method}
    - api_request_latency_ms{route,method}
    - api_request_errors_total{route,method,status}
    - chat_turns_total{status}
    - inference_request_total{model,status}
    - inference_latency_ms{model}
    - sessions_created_total{reason}
    - sessions_deleted_total{current}
    - env_override_total{path}
"""
from __future__ import annotations

from collections import deque
from threading import RLock
from time import time
from typing import Dict, Tuple, Any

_COUNTERS: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], float] = {}
HIST_MAX_SAMPLES = 1024

_HIST: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], deque] = {}
_HIST_COUNT: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], int] = {}
_LOCK = RLock()


def _norm_labels(labels: dict[str, Any] | None) -> Tuple[Tuple[str, str], ...]:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _label_str(labels: Tuple[Tuple[str, str], ...]) -> str:
    if not labels:
        return ""
    return "{" + ",".join(f"{k}={v}" for k, v in labels) + "}"


def inc(
    name: str,
    labels: dict[str, Any] | None = None,
    value: float = 1.0,
) -> None:
    key = (name, _norm_labels(labels))
    with _LOCK:
        _COUNTERS[key] = _COUNTERS.get(key, 0.0) + value


def observe(
    name: str,
    value: float,
    labels: dict[str, Any] | None = None,
) -> None:
    key = (name, _norm_labels(labels))
    with _LOCK:
        _HIST.setdefault(key, deque(maxlen=HIST_MAX_SAMPLES)).append(value)
        _HIST_COUNT[key] = _HIST_COUNT.get(key, 0) + 1


def snapshot() -> dict[str, Any]:
    with _LOCK:
        counters: dict[str, float] = {}
        for (name, labels), v in _COUNTERS.items():
            counters[name + _label_str(labels)] = v
        hist = {}
        for key, vals in _HIST.items():
            if not vals:
                continue
            name, labels = key
            hist[name + _label_str(labels)] = {
                "count": _HIST_COUNT.get(key, len(vals)),
                "samples": len(vals),
                "min": min(vals),
                "max": max(vals),
                "p50": sorted(vals)[len(vals) // 2],
                "last": vals[-1],
            }
        return {
            "ts": time(),
            "counters": counters,
            "histograms": hist,
        }


def counter_value(name: str, labels: dict[str, Any] | None = None) -> float:
    """Return the current value of one counter (0.0 if never incremented)."""
    with _LOCK:
        return _COUNTERS.get((name, _norm_labels(labels)), 0.0)


def reset_for_tests() -> None:  # pragma: no cover
    with _LOCK:
        _COUNTERS.clear()
        _HIST.clear()
        _HIST_COUNT.clear()


__all__ = [
    "inc",
    "observe",
    "snapshot",
    "counter_value",
    "reset_for_tests",
]
