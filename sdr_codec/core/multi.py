"""Composite encoder that concatenates named sub-encoders into one SDR."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..utils import EncoderSchemaValidator
from .base import DecodeResult, Encoder
from .coordinate import CoordinateEncoder, CoordinateEncoderConfig
from .scalar import ScalarEncoder
from .scalar_range import ScalarEncoderConfig

LOGGER = logging.getLogger(__name__)

EncoderFactory = Callable[[Mapping[str, Any]], Encoder]

ENCODER_REGISTRY: Dict[str, EncoderFactory] = {
    "ScalarEncoder": lambda params: ScalarEncoder(ScalarEncoderConfig.from_dict(params)),
    "CoordinateEncoder": lambda params: CoordinateEncoder(CoordinateEncoderConfig.from_dict(params)),
}


@dataclass(frozen=True)
class EncoderSlot:
    name: str
    encoder: Encoder
    offset: int


class MultiEncoder(Encoder):
    """Route each field of a record to its own encoder.

    Sub-encoders are laid out back to back in insertion order; a field's bits
    always occupy ``[offset, offset + width)`` of the combined output.
    """

    supports_decode = True

    def __init__(self, name: str = "") -> None:
        super().__init__(0, 0, name)
        self._slots: List[EncoderSlot] = []

    @property
    def n(self) -> int:
        return self.width

    @property
    def w(self) -> int:
        return self.width

    @property
    def width(self) -> int:
        return sum(slot.encoder.width for slot in self._slots)

    def get_n(self) -> int:
        return self.width

    def get_w(self) -> int:
        return self.width

    def get_encoders(self) -> List[EncoderSlot]:
        return list(self._slots)

    def get_description(self) -> List[Tuple[str, int]]:
        return [(slot.name, slot.offset) for slot in self._slots]

    def add_encoder(self, name: str, encoder: Encoder) -> None:
        if any(slot.name == name for slot in self._slots):
            raise ValueError(f"Field '{name}' already has an encoder")
        slot = EncoderSlot(name=name, encoder=encoder, offset=self.width)
        self._slots.append(slot)
        LOGGER.debug("added encoder %s for field %s at offset %d (width %d)", encoder.name, name, slot.offset, encoder.width)

    def add_multiple_encoders(
        self,
        definitions: Mapping[str, Mapping[str, Any]],
        validator: Optional[EncoderSchemaValidator] = None,
    ) -> None:
        """Build and add encoders from ``{key: {"fieldname", "type", **params}}``.

        Keys are processed in sorted order so the layout does not depend on
        mapping order.
        """

        validator = validator or EncoderSchemaValidator()
        validator.validate_multi(definitions)
        for key in sorted(definitions):
            params = dict(definitions[key])
            field_name = str(params.pop("fieldname"))
            encoder_type = str(params.pop("type"))
            params.setdefault("name", field_name)
            factory = ENCODER_REGISTRY.get(encoder_type)
            if factory is None:
                raise KeyError(f"Invalid encoder: {encoder_type}")
            self.add_encoder(field_name, factory(params))

    def encode_into_array(self, value: Any, output: np.ndarray) -> None:
        self._check_output(output)
        for slot in self._slots:
            scratch = np.zeros(slot.encoder.width, dtype=output.dtype)
            slot.encoder.encode_into_array(self._get_input_value(value, slot.name), scratch)
            output[slot.offset : slot.offset + slot.encoder.width] = scratch

    def encode_field(self, field_name: str, value: Any) -> np.ndarray:
        return self._slot(field_name).encoder.encode(value)

    def encode_each_field(self, record: Any) -> List[np.ndarray]:
        return [slot.encoder.encode(self._get_input_value(record, slot.name)) for slot in self._slots]

    def decode(self, encoded: Sequence[int], parent_field_name: str = "") -> DecodeResult:
        """Decode every sub-encoder that supports it and merge the fields."""

        bits = np.asarray(encoded)
        result = DecodeResult()
        for slot in self._slots:
            if not slot.encoder.supports_decode:
                continue
            sub_result = slot.encoder.decode(
                bits[slot.offset : slot.offset + slot.encoder.width], parent_field_name=parent_field_name
            )
            result.fields.update(sub_result.fields)
            result.field_names.extend(sub_result.field_names)
        return result

    def get_bucket_values(self) -> Optional[List[float]]:
        return None

    def _slot(self, field_name: str) -> EncoderSlot:
        for slot in self._slots:
            if slot.name == field_name:
                return slot
        raise KeyError(f"No encoder registered for field '{field_name}'")

    @staticmethod
    def _get_input_value(record: Any, field_name: str) -> Any:
        if isinstance(record, Mapping):
            return record[field_name]
        return getattr(record, field_name)
