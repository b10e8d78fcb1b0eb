"""Helpers for loading and validating encoder definition schemas.

This module centralises JSON Schema loading so every declarative encoder
definition is checked against the contracts shipped in ``sdr_codec/contracts``
before any encoder is built from it.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Dict, Mapping

from jsonschema import Draft7Validator

# Encoder ``type`` discriminator -> contract name.
ENCODER_CONTRACTS: Dict[str, str] = {
    "ScalarEncoder": "scalar",
    "CoordinateEncoder": "coordinate",
}

CONTRACTS_DIR = Path(__file__).resolve().parents[1] / "contracts"


@dataclass(frozen=True)
class _SchemaRecord:
    """Container for compiled schema validators."""

    name: str
    validator: Draft7Validator


class EncoderSchemaValidator:
    """Validate encoder definitions against the packaged JSON Schemas.

    The validator infers the schema file from the definition ``type`` field,
    e.g. ``ScalarEncoder`` → ``contracts/scalar.schema.json``.
    """

    def __init__(self, contracts_dir: Path = CONTRACTS_DIR) -> None:
        if not contracts_dir.exists():
            raise FileNotFoundError(f"Expected contracts directory at {contracts_dir}.")
        self._validators: Dict[str, _SchemaRecord] = {}
        for schema_path in contracts_dir.glob("*.schema.json"):
            with schema_path.open("r", encoding="utf-8") as handle:
                schema = json.load(handle)
            name = schema_path.stem.replace(".schema", "")
            self._validators[name] = _SchemaRecord(name=name, validator=Draft7Validator(schema))

    def validate(self, definition: Mapping[str, object]) -> None:
        """Validate one encoder definition by inspecting its ``type`` discriminator."""

        encoder_type = definition.get("type")
        if not encoder_type or not isinstance(encoder_type, str):
            raise ValueError("Encoder definition missing string 'type' field for schema lookup.")
        logical_name = ENCODER_CONTRACTS.get(encoder_type)
        if logical_name is None:
            raise KeyError(f"Invalid encoder type '{encoder_type}'.")
        self.get_validator(logical_name).validate(definition)

    def validate_multi(self, definitions: Mapping[str, object]) -> None:
        """Validate a ``{key: definition}`` mapping and every definition in it."""

        self.get_validator("multi").validate(definitions)
        for definition in definitions.values():
            self.validate(definition)  # type: ignore[arg-type]

    def get_validator(self, logical_name: str) -> Draft7Validator:
        """Return a compiled validator for advanced checks (tests)."""

        record = self._validators.get(logical_name)
        if record is None:
            raise KeyError(f"Unknown schema '{logical_name}'.")
        return record.validator

    @property
    def schema_names(self) -> Dict[str, Draft7Validator]:
        """Expose available schemas (mainly for tests)."""

        return {name: record.validator for name, record in self._validators.items()}
