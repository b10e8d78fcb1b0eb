"""Container for classifier outputs keyed by prediction step."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import numpy as np


class ClassifierResult:
    """Actual bucket values plus a probability vector per future step.

    ``actual_values[i]`` is the value represented by bucket ``i`` (usually
    taken from an encoder's ``get_bucket_values()``), and ``get_stats(step)``
    holds one probability per bucket.
    """

    def __init__(self, actual_values: Sequence[Any] = ()) -> None:
        self._actual_values: List[Any] = list(actual_values)
        self._probabilities: Dict[int, np.ndarray] = {}

    def set_actual_values(self, values: Sequence[Any]) -> None:
        self._actual_values = list(values)

    def get_actual_values(self) -> List[Any]:
        return list(self._actual_values)

    def get_actual_value(self, bucket_index: int) -> Any:
        return self._actual_values[bucket_index]

    def get_actual_value_count(self) -> int:
        return len(self._actual_values)

    def set_stats(self, step: int, votes: Sequence[float]) -> None:
        self._probabilities[int(step)] = np.asarray(votes, dtype=np.float64)

    def get_stats(self, step: int) -> np.ndarray:
        return self._probabilities[int(step)]

    def get_stat(self, step: int, bucket_index: int) -> float:
        return float(self._probabilities[int(step)][bucket_index])

    def get_stat_count(self, step: int) -> int:
        return int(self._probabilities[int(step)].size)

    def get_step_count(self) -> int:
        return len(self._probabilities)

    def step_set(self) -> List[int]:
        return sorted(self._probabilities)

    def most_probable_value(self, step: int) -> Any:
        """Actual value of the highest-probability bucket for ``step``."""

        return self._actual_values[int(np.argmax(self._probabilities[int(step)]))]
