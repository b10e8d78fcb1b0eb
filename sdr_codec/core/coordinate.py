"""Coordinate encoder for unbounded integer coordinate spaces.

Every integer coordinate gets a stable pseudo-random *order* and a stable
*bit*, both derived from a hash of its components. Encoding a coordinate with
a radius takes the Chebyshev neighbourhood around it, keeps the ``w``
neighbours with the highest order and switches on their bits, so nearby
coordinates share most of their active bits.

Each hash query builds its own generator from the coordinate hash; nothing is
shared between calls, which keeps results reproducible across calls, threads
and processes.
"""

from __future__ import annotations

import hashlib
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .base import Encoder
from .errors import ConfigurationError, DimensionMismatch, DomainError

LOGGER = logging.getLogger(__name__)


def hash_coordinate(coordinate: Sequence[int]) -> int:
    """Hash a coordinate to a 64 bit integer."""

    text = ",".join(str(int(component)) for component in coordinate)
    return int(hashlib.md5(text.encode("utf-8")).hexdigest(), 16) % (2**64)


def order_for_coordinate(coordinate: Sequence[int]) -> float:
    """Return the order of a coordinate, a value in ``[0, 1)``."""

    rng = np.random.default_rng(hash_coordinate(coordinate))
    return float(rng.random())


def bit_for_coordinate(coordinate: Sequence[int], n: int) -> int:
    """Return the SDR bit index in ``[0, n)`` owned by a coordinate."""

    rng = np.random.default_rng(hash_coordinate(coordinate))
    return int(rng.integers(n))


def neighbors(coordinate: Sequence[int], radius: float) -> np.ndarray:
    """Return every coordinate within ``floor(radius)`` along each axis.

    The result includes ``coordinate`` itself and has
    ``(2 * floor(radius) + 1) ** len(coordinate)`` rows.
    """

    reach = int(math.floor(radius))
    ranges = [range(int(component) - reach, int(component) + reach + 1) for component in coordinate]
    return np.array(list(itertools.product(*ranges)), dtype=np.int64).reshape(-1, len(coordinate))


def top_w_coordinates(coordinates: np.ndarray, w: int) -> np.ndarray:
    """Return the ``w`` coordinates with the highest order, lowest first."""

    orders = np.array([order_for_coordinate(coordinate) for coordinate in coordinates.tolist()])
    indices = np.argsort(orders, kind="stable")[-w:]
    return coordinates[indices]


@dataclass(frozen=True)
class CoordinateEncoderConfig:
    n: int
    w: int
    dimensions: Optional[int] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> CoordinateEncoderConfig:
        dimensions = payload.get("dimensions")
        name = payload.get("name")
        return cls(
            n=int(payload["n"]),
            w=int(payload["w"]),
            dimensions=int(dimensions) if dimensions is not None else None,
            name=str(name) if name is not None else None,
        )

    def validate(self) -> None:
        if self.w <= 0 or self.w % 2 == 0:
            raise ConfigurationError(f"w must be a positive odd integer, got {self.w}")
        if self.n <= 6 * self.w:
            raise ConfigurationError(
                f"n ({self.n}) must be strictly greater than 6*w ({6 * self.w}); "
                "for good results n should exceed 11*w"
            )
        if self.dimensions is not None and self.dimensions <= 0:
            raise ConfigurationError("dimensions must be positive when specified")


class CoordinateEncoder(Encoder):
    """Encode ``(coordinate, radius)`` pairs into ``n``-bit SDRs."""

    def __init__(self, config: CoordinateEncoderConfig) -> None:
        config.validate()
        name = config.name if config.name is not None else f"[{config.n}:{config.w}]"
        super().__init__(config.n, config.w, name)
        self._config = config
        self._dimensions = config.dimensions

    @property
    def config(self) -> CoordinateEncoderConfig:
        return self._config

    @property
    def dimensions(self) -> Optional[int]:
        return self._dimensions

    def get_description(self) -> List[Tuple[str, int]]:
        return [("coordinate", 0), ("radius", 1)]

    def encode_into_array(self, value: Any, output: np.ndarray) -> None:
        self._check_output(output)
        if value is None:
            output[:] = 0
            return
        coordinate, radius = value
        coordinate = self._coerce_coordinate(coordinate)
        if radius < 0:
            raise DomainError(f"radius must be non-negative, got {radius}")
        output[:] = 0

        winners = top_w_coordinates(neighbors(coordinate, radius), self.w)
        bits = [bit_for_coordinate(winner, self.n) for winner in winners.tolist()]
        LOGGER.debug("coordinate %s radius %s -> %d winners", coordinate.tolist(), radius, len(bits))
        output[bits] = 1

    def _coerce_coordinate(self, coordinate: Sequence[int]) -> np.ndarray:
        array = np.asarray(coordinate)
        if array.ndim != 1 or array.size == 0:
            raise DimensionMismatch(f"coordinate must be a non-empty 1-D sequence, got shape {array.shape}")
        if not np.issubdtype(array.dtype, np.integer):
            raise TypeError(f"coordinate components must be integers, got dtype {array.dtype}")
        if self._dimensions is None:
            self._dimensions = int(array.size)
        elif array.size != self._dimensions:
            raise DimensionMismatch(f"expected a {self._dimensions}-D coordinate, got {array.size}-D")
        return array.astype(np.int64)
