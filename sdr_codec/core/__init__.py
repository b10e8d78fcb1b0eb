"""Scalar and coordinate encoders producing sparse distributed representations."""

from .base import (
    SENTINEL_VALUE_FOR_MISSING_DATA,
    DecodeResult,
    Encoder,
    EncoderResult,
    RangeList,
    decoded_to_str,
)
from .classifier import ClassifierResult
from .coordinate import (
    CoordinateEncoder,
    CoordinateEncoderConfig,
    bit_for_coordinate,
    hash_coordinate,
    neighbors,
    order_for_coordinate,
    top_w_coordinates,
)
from .errors import ConfigurationError, DimensionMismatch, DomainError, EncoderError
from .multi import MultiEncoder
from .scalar import ScalarEncoder
from .scalar_range import ScalarEncoderConfig, ScalarRangeModel

__all__ = [
    "SENTINEL_VALUE_FOR_MISSING_DATA",
    "ClassifierResult",
    "ConfigurationError",
    "CoordinateEncoder",
    "CoordinateEncoderConfig",
    "DecodeResult",
    "DimensionMismatch",
    "DomainError",
    "Encoder",
    "EncoderError",
    "EncoderResult",
    "MultiEncoder",
    "RangeList",
    "ScalarEncoder",
    "ScalarEncoderConfig",
    "ScalarRangeModel",
    "bit_for_coordinate",
    "decoded_to_str",
    "hash_coordinate",
    "neighbors",
    "order_for_coordinate",
    "top_w_coordinates",
]
