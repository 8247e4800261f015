"""Lightweight in-memory metrics collector."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Dict


@dataclass
class MetricSnapshot:
    total_turns: int
    turns_by_stage: Dict[str, int]
    turns_by_mode: Dict[str, int]
    gateway_failures: Dict[str, int]
    ratings: Dict[str, int]


class MetricsCollector:
    """Thread-safe counter storage for basic service metrics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total_turns = 0
        self._stages: Counter[str] = Counter()
        self._modes: Counter[str] = Counter()
        self._gateway_failures: Counter[str] = Counter()
        self._ratings: Counter[str] = Counter()

    def record_turn(self, mode: str, stage: str) -> None:
        with self._lock:
            self._total_turns += 1
            self._modes[mode] += 1
            self._stages[stage] += 1

    def record_gateway_failure(self, operation: str) -> None:
        with self._lock:
            self._gateway_failures[operation] += 1

    def record_rating(self, rating: str) -> None:
        with self._lock:
            self._ratings[rating] += 1

    def snapshot(self) -> MetricSnapshot:
        with self._lock:
            return MetricSnapshot(
                total_turns=self._total_turns,
                turns_by_stage=dict(self._stages),
                turns_by_mode=dict(self._modes),
                gateway_failures=dict(self._gateway_failures),
                ratings=dict(self._ratings),
            )
