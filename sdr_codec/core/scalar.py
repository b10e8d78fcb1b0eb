"""Scalar encoder and decoder.

A scalar is mapped to a contiguous window of ``w`` active bits whose position
tracks the value; periodic encoders wrap the window around the end of the
buffer. Decoding inverts this for noisy or partial inputs by filling small
holes, collecting runs of active bits and reporting every value range the
runs are consistent with.
"""

from __future__ import annotations

import logging
import numbers
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .base import DecodeResult, Encoder, EncoderResult, RangeList
from .errors import DimensionMismatch
from .scalar_range import ScalarEncoderConfig, ScalarRangeModel

LOGGER = logging.getLogger(__name__)


def _format_bound(value: float) -> str:
    return f"{value:g}"


class ScalarEncoder(Encoder):
    """Encode floats into contiguous ``w``-bit windows of an ``n``-bit SDR."""

    supports_decode = True

    def __init__(self, config: ScalarEncoderConfig) -> None:
        model = ScalarRangeModel(config)
        name = config.name
        if name is None:
            name = f"[{_format_bound(model.min_val)}:{_format_bound(model.max_val)}]"
        super().__init__(model.n, model.w, name)
        self._config = config
        self._model = model
        self._top_down_mapping: Optional[np.ndarray] = None
        self._bucket_values: Optional[List[float]] = None

    @property
    def config(self) -> ScalarEncoderConfig:
        return self._config

    @property
    def model(self) -> ScalarRangeModel:
        return self._model

    @property
    def min_val(self) -> float:
        return self._model.min_val

    @property
    def max_val(self) -> float:
        return self._model.max_val

    @property
    def resolution(self) -> float:
        return self._model.resolution

    @property
    def radius(self) -> float:
        return self._model.radius

    @property
    def periodic(self) -> bool:
        return self._model.periodic

    @property
    def num_buckets(self) -> int:
        return self._model.num_buckets

    def encode_into_array(self, value: Any, output: np.ndarray) -> None:
        if value is not None and not isinstance(value, numbers.Number):
            raise TypeError(f"Expected a scalar input but got input of type {type(value)}")
        self._check_output(output)
        output[:] = 0
        bucket = self._model.bucket_index(value)
        if bucket is None:
            return
        output[self._model.window(bucket)] = 1

    def get_bucket_indices(self, value: Any) -> List[Optional[int]]:
        if value is not None and not isinstance(value, numbers.Number):
            raise TypeError(f"Expected a scalar input but got input of type {type(value)}")
        return [self._model.bucket_index(value)]

    def get_bucket_info(self, buckets: Sequence[Optional[int]]) -> List[EncoderResult]:
        if buckets[0] is None:
            # missing data has no bucket
            return [EncoderResult(value=None, scalar=None, encoding=np.zeros(self.n, dtype=np.uint8), bucket=None)]
        bucket = int(buckets[0])
        encoding = self._get_top_down_mapping()[bucket].copy()
        value = self._model.bucket_value(bucket)
        return [EncoderResult(value=value, scalar=value, encoding=encoding, bucket=bucket)]

    def get_bucket_values(self) -> List[float]:
        if self._bucket_values is None:
            self._bucket_values = self._model.bucket_values()
        return list(self._bucket_values)

    def _get_top_down_mapping(self) -> np.ndarray:
        """One row per bucket holding that bucket's canonical encoding."""

        if self._top_down_mapping is None:
            mapping = np.zeros((self.num_buckets, self.n), dtype=np.uint8)
            for bucket in range(self.num_buckets):
                mapping[bucket, self._model.window(bucket)] = 1
            self._top_down_mapping = mapping
        return self._top_down_mapping

    def decode(self, encoded: Sequence[int], parent_field_name: str = "") -> DecodeResult:
        bits = self._binarise(encoded)
        if not bits.any():
            return DecodeResult()

        filled = self._fill_holes(bits)
        runs = self._find_runs(filled)
        LOGGER.debug("decode %s: runs=%s", self.name, runs)

        ranges: List[Tuple[float, float]] = []
        for start, length in runs:
            if self.periodic and length == self.n:
                # a saturated ring is consistent with every value
                ranges.append((self.min_val, self.max_val))
                continue
            if length <= self.w:
                left = right = start + length // 2
            else:
                # every w-wide placement inside the run is a candidate centre
                left = start + self._model.halfwidth
                right = start + length - 1 - self._model.halfwidth
            ranges.extend(self._span_to_ranges(left, right))
        ranges = _merge_ranges(ranges)

        if parent_field_name:
            field_name = f"{parent_field_name}.{self.name}"
        else:
            field_name = self.name
        range_list = RangeList(ranges=ranges, description=_describe_ranges(ranges))
        return DecodeResult(fields={field_name: range_list}, field_names=[field_name])

    def top_down_compute(self, encoded: Sequence[int]) -> List[EncoderResult]:
        """Reconstruct one representative bucket per decoded range.

        When nothing decodes, the bucket whose canonical encoding overlaps
        ``encoded`` the most is returned instead.

        Periodic results report the bucket centre while ``decode`` reports
        its lower edge, so decoding a returned encoding yields a range within
        ``resolution / 2`` of its scalar rather than one containing it.
        """

        decoded = self.decode(encoded)
        results: List[EncoderResult] = []
        seen = set()
        for field_name in decoded.field_names:
            for low, high in decoded.fields[field_name]:
                bucket = self._model.bucket_for_decoded((low + high) / 2.0)
                # both halves of a range split at the wrap point may land here
                if bucket in seen:
                    continue
                seen.add(bucket)
                results.extend(self.get_bucket_info([bucket]))
        if not results:
            overlaps = self._get_top_down_mapping().astype(np.int64) @ self._binarise(encoded).astype(np.int64)
            results = self.get_bucket_info([int(np.argmax(overlaps))])
        return results

    def closeness_scores(
        self,
        expected: Sequence[float],
        actual: Sequence[float],
        fractional: bool = True,
    ) -> np.ndarray:
        """Element-wise distance between expected and actual values.

        Periodic encoders use circular distance. With ``fractional`` the
        distances are divided by the largest distance the domain allows and
        clipped to ``[0, 1]``.
        """

        expected_arr = np.asarray(expected, dtype=np.float64)
        actual_arr = np.asarray(actual, dtype=np.float64)
        if expected_arr.shape != actual_arr.shape:
            raise DimensionMismatch(
                f"expected and actual values differ in shape: {expected_arr.shape} vs {actual_arr.shape}"
            )
        width = self._model.range_internal
        if self.periodic:
            expected_arr = np.mod(expected_arr - self.min_val, width)
            actual_arr = np.mod(actual_arr - self.min_val, width)
        err = np.abs(expected_arr - actual_arr)
        if self.periodic:
            err = np.minimum(err, width - err)
        if fractional:
            limit = width / 2.0 if self.periodic else width
            return np.clip(err / limit, 0.0, 1.0)
        return err

    def _binarise(self, encoded: Sequence[int]) -> np.ndarray:
        bits = np.asarray(encoded)
        if bits.ndim != 1 or bits.shape[0] != self.n:
            raise DimensionMismatch(f"Expected an encoding of width {self.n}, got shape {bits.shape}")
        return (bits > 0).astype(np.uint8)

    def _fill_holes(self, bits: np.ndarray) -> np.ndarray:
        """Fill gaps of up to ``halfwidth`` zeros bordered by active bits."""

        filled = bits.copy()
        active = np.flatnonzero(bits)
        halfwidth = self._model.halfwidth
        gaps = np.diff(active) - 1
        fillable = (gaps >= 1) & (gaps <= halfwidth)
        if fillable.any():
            # +1 at each gap start, -1 past its end; positive prefix sums are inside a gap
            delta = np.zeros(self.n + 1, dtype=np.int64)
            np.add.at(delta, active[:-1][fillable] + 1, 1)
            np.add.at(delta, active[1:][fillable], -1)
            filled[np.cumsum(delta[: self.n]) > 0] = 1
        if self.periodic and active.size:
            wrap_gap = int(active[0]) + self.n - int(active[-1]) - 1
            if 1 <= wrap_gap <= halfwidth:
                filled[active[-1] + 1 :] = 1
                filled[: active[0]] = 1
        return filled

    def _find_runs(self, bits: np.ndarray) -> List[Tuple[int, int]]:
        """Return ``(start, length)`` for each run of ones."""

        active = np.flatnonzero(bits)
        runs: List[List[int]] = []
        run = [int(active[0]), 1]
        for index in active[1:]:
            if index == run[0] + run[1]:
                run[1] += 1
            else:
                runs.append(run)
                run = [int(index), 1]
        runs.append(run)

        # periodic runs touching both edges are one run
        if self.periodic and len(runs) > 1 and runs[0][0] == 0 and runs[-1][0] + runs[-1][1] == self.n:
            runs[-1][1] += runs[0][1]
            runs = runs[1:]
        return [(start, length) for start, length in runs]

    def _span_to_ranges(self, left: int, right: int) -> List[Tuple[float, float]]:
        model = self._model
        low = model.position_to_value(left)
        high = model.position_to_value(right)
        if self.periodic and low >= self.max_val:
            low -= model.span
            high -= model.span
        low = max(low, self.min_val)
        high = max(high, self.min_val)
        if self.periodic and high >= self.max_val:
            return [(low, self.max_val), (self.min_val, high - model.span)]
        return [(min(low, self.max_val), min(high, self.max_val))]


def _merge_ranges(ranges: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
    merged: List[Tuple[float, float]] = []
    for low, high in sorted(ranges):
        if merged and low <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], high))
        else:
            merged.append((low, high))
    return merged


def _describe_ranges(ranges: List[Tuple[float, float]]) -> str:
    parts = []
    for low, high in ranges:
        if low != high:
            parts.append(f"{low:.2f}-{high:.2f}")
        else:
            parts.append(f"{low:.2f}")
    return ", ".join(parts)
