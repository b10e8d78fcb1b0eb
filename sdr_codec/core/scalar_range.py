"""Numeric mapping between a scalar value domain and bucket/bit space.

The model owns no buffers and performs no I/O. It derives the missing pair of
``n``/``radius``/``resolution`` from whichever one was supplied, then answers
bucket and bit-offset questions for the encoder and decoder.

Bucket conventions:

* periodic encoders have ``n`` buckets; bucket ``i`` is the centre bit of the
  active window and represents ``min_val + (i + 0.5) * resolution``.
* non-periodic encoders have ``n - w + 1`` buckets; bucket ``i`` is the first
  active bit and represents ``min_val + i * resolution``, so ``min_val`` and
  ``max_val`` themselves reconstruct exactly.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

import numpy as np

from .base import is_missing
from .errors import ConfigurationError, DomainError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalarEncoderConfig:
    """Parameters for a scalar encoder.

    Exactly one of ``n``, ``radius`` or ``resolution`` is authoritative. A
    second one may be supplied only if it agrees with the derived value.
    ``forced`` skips the ``n > 6 * w`` sanity check for small hand-built
    encoders.
    """

    w: int
    min_val: float
    max_val: float
    n: int = 0
    radius: float = 0.0
    resolution: float = 0.0
    periodic: bool = False
    clip_input: bool = False
    forced: bool = False
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ScalarEncoderConfig:
        name = payload.get("name")
        return cls(
            w=int(payload["w"]),
            min_val=float(payload["minVal"]),
            max_val=float(payload["maxVal"]),
            n=int(payload.get("n", 0)),
            radius=float(payload.get("radius", 0.0)),
            resolution=float(payload.get("resolution", 0.0)),
            periodic=bool(payload.get("periodic", False)),
            clip_input=bool(payload.get("clipInput", False)),
            forced=bool(payload.get("forced", False)),
            name=str(name) if name is not None else None,
        )

    def validate(self) -> None:
        if self.w <= 0 or self.w % 2 == 0:
            raise ConfigurationError(f"w must be a positive odd integer, got {self.w}")
        if self.n < 0 or self.radius < 0 or self.resolution < 0:
            raise ConfigurationError("n, radius and resolution must be non-negative")
        if not self.min_val < self.max_val:
            raise ConfigurationError(
                f"min_val ({self.min_val}) must be strictly less than max_val ({self.max_val})"
            )


class ScalarRangeModel:
    """Pure bucket arithmetic for one validated configuration."""

    def __init__(self, config: ScalarEncoderConfig) -> None:
        config.validate()
        self.min_val = float(config.min_val)
        self.max_val = float(config.max_val)
        self.periodic = config.periodic
        self.clip_input = config.clip_input
        self.w = config.w
        self.halfwidth = (config.w - 1) // 2
        # Bits outside the value range on each side of a non-periodic encoder.
        self.padding = 0 if self.periodic else self.halfwidth
        self.range_internal = self.max_val - self.min_val

        if config.n:
            self.n = config.n
            if self.n <= self.w:
                raise ConfigurationError(f"n ({self.n}) must be greater than w ({self.w})")
            divisor = self.n if self.periodic else self.n - self.w
            self.resolution = self.range_internal / divisor
            self.radius = self.w * self.resolution
            self._check_agrees(config.resolution, self.resolution, "resolution")
            self._check_agrees(config.radius, self.radius, "radius")
        else:
            self.resolution = self._resolution_from(config)
            span = self.range_internal if self.periodic else self.range_internal + self.resolution
            # round() absorbs float noise such as 7 / (1 / 7) == 49.00000000000001
            self.n = int(math.ceil(round(span / self.resolution + 2 * self.padding, 9)))
            if self.periodic:
                # n buckets must tile the circle exactly
                self.resolution = self.range_internal / self.n
            self.radius = self.w * self.resolution
            if self.n <= self.w:
                raise ConfigurationError(f"derived n ({self.n}) must be greater than w ({self.w})")

        if not config.forced and self.n <= 6 * self.w:
            raise ConfigurationError(
                f"n ({self.n}) must be strictly greater than 6*w ({6 * self.w}); "
                "pass forced=True to override"
            )

        self.span = self.range_internal if self.periodic else self.range_internal + self.resolution
        self.n_internal = self.n - 2 * self.padding
        self.num_buckets = self.n if self.periodic else self.n - self.w + 1

    def _resolution_from(self, config: ScalarEncoderConfig) -> float:
        if config.radius and config.resolution:
            if not math.isclose(config.radius, config.resolution * config.w):
                raise ConfigurationError(
                    f"radius ({config.radius}) disagrees with resolution ({config.resolution}) * w ({config.w})"
                )
            return float(config.resolution)
        if config.radius:
            return float(config.radius) / config.w
        if config.resolution:
            return float(config.resolution)
        raise ConfigurationError("One of n, radius or resolution must be specified")

    @staticmethod
    def _check_agrees(given: float, derived: float, label: str) -> None:
        if given and not math.isclose(given, derived):
            raise ConfigurationError(f"{label} ({given}) disagrees with the value derived from n ({derived})")

    def resolve(self, value: float) -> float:
        """Wrap periodic values; clip or reject out-of-range ones otherwise."""

        value = float(value)
        if self.periodic:
            return self.min_val + (value - self.min_val) % self.range_internal
        if value < self.min_val or value > self.max_val:
            bound = self.min_val if value < self.min_val else self.max_val
            if not self.clip_input:
                raise DomainError(f"input ({value}) outside range ({self.min_val} - {self.max_val})")
            LOGGER.debug("clipped input %.4f to %.4f", value, bound)
            return bound
        return value

    def bucket_index(self, value: Any) -> Optional[int]:
        if is_missing(value):
            return None
        resolved = self.resolve(value)
        if self.periodic:
            bucket = int((resolved - self.min_val) * self.n_internal / self.span) % self.n
        else:
            bucket = int(((resolved - self.min_val) + self.resolution / 2) / self.resolution)
        return min(max(bucket, 0), self.num_buckets - 1)

    def bucket_for_decoded(self, value: float) -> int:
        """Bucket for a value produced by :meth:`position_to_value`.

        Periodic decoded values sit on a bucket's lower edge, so they are
        moved to its centre before bucketing.
        """

        if self.periodic:
            value = value + self.resolution / 2
        else:
            value = min(max(value, self.min_val), self.max_val)
        return self.bucket_index(value)

    def window(self, bucket: int) -> np.ndarray:
        """Indices of the ``w`` active bits for ``bucket``."""

        if not 0 <= bucket < self.num_buckets:
            raise IndexError(f"bucket {bucket} out of range [0, {self.num_buckets})")
        start = bucket - self.halfwidth if self.periodic else bucket
        indices = np.arange(start, start + self.w)
        if self.periodic:
            indices %= self.n
        return indices

    def bucket_value(self, bucket: int) -> float:
        if self.periodic:
            return self.min_val + (bucket + 0.5) * self.resolution
        return min(self.min_val + bucket * self.resolution, self.max_val)

    def bucket_values(self) -> List[float]:
        return [self.bucket_value(bucket) for bucket in range(self.num_buckets)]

    def position_to_value(self, position: float) -> float:
        """Map a (centre) bit position back into input space."""

        if self.periodic:
            return (position - self.padding) * self.span / self.n_internal + self.min_val
        return (position - self.padding) * self.resolution + self.min_val
