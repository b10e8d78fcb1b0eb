"""Shared encoder capability and result containers.

Every encoder exposes the same small surface: a fixed output width, an
``encode``/``encode_into_array`` pair writing into a ``uint8`` buffer, a
``(name, offset)`` description used by the composite encoder, and an
optional ``decode`` for encoders that can invert their output.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatch

SENTINEL_VALUE_FOR_MISSING_DATA = None


def is_missing(value: Any) -> bool:
    """Return True for the missing-data sentinel (``None`` or NaN)."""

    if value is SENTINEL_VALUE_FOR_MISSING_DATA:
        return True
    return isinstance(value, float) and math.isnan(value)


@dataclass
class EncoderResult:
    """Top-down reconstruction of a single bucket."""

    value: Any
    scalar: Optional[float]
    encoding: np.ndarray
    bucket: Optional[int] = None


@dataclass
class RangeList:
    """Ascending, disjoint ``(min, max)`` spans plus a printable summary."""

    ranges: List[Tuple[float, float]] = field(default_factory=list)
    description: str = ""

    def __len__(self) -> int:
        return len(self.ranges)

    def __getitem__(self, index: int) -> Tuple[float, float]:
        return self.ranges[index]

    def __iter__(self):
        return iter(self.ranges)


@dataclass
class DecodeResult:
    fields: Dict[str, RangeList] = field(default_factory=dict)
    field_names: List[str] = field(default_factory=list)

    def get_ranges(self, field_name: str) -> RangeList:
        return self.fields[field_name]


def decoded_to_str(decoded: DecodeResult) -> str:
    """Render a decode result as ``name:[ranges], other:[ranges]``."""

    parts = [f"{name}:[{decoded.fields[name].description}]" for name in decoded.field_names]
    return ", ".join(parts)


class Encoder(ABC):
    """Base class for all encoders."""

    supports_decode = False

    def __init__(self, n: int, w: int, name: str) -> None:
        self._n = n
        self._w = w
        self._name = name
        self._name_locked = False

    @property
    def n(self) -> int:
        return self._n

    @property
    def w(self) -> int:
        return self._w

    @property
    def width(self) -> int:
        return self._n

    @property
    def name(self) -> str:
        return self._name

    def get_width(self) -> int:
        return self.width

    def get_n(self) -> int:
        return self._n

    def get_w(self) -> int:
        return self._w

    def set_name(self, name: str) -> None:
        """Relabel the encoder for decode output; only allowed once."""

        if self._name_locked:
            raise AttributeError(f"Encoder name already set to '{self._name}'")
        self._name = name
        self._name_locked = True

    def get_description(self) -> List[Tuple[str, int]]:
        return [(self._name, 0)]

    def encode(self, value: Any) -> np.ndarray:
        output = np.zeros(self.width, dtype=np.uint8)
        self.encode_into_array(value, output)
        return output

    @abstractmethod
    def encode_into_array(self, value: Any, output: np.ndarray) -> None:
        raise NotImplementedError

    def get_bucket_values(self) -> Optional[List[float]]:
        return None

    def decode(self, encoded: Sequence[int], parent_field_name: str = "") -> DecodeResult:
        raise NotImplementedError(f"{type(self).__name__} does not support decoding")

    def _check_output(self, output: np.ndarray) -> None:
        if output.ndim != 1 or output.shape[0] != self.width:
            raise DimensionMismatch(f"Expected output buffer of width {self.width}, got shape {output.shape}")
