"""Schema validation tests for declarative encoder definitions."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import jsonschema
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sdr_codec.utils import EncoderSchemaValidator


@pytest.fixture(scope="module")
def validator() -> EncoderSchemaValidator:
    return EncoderSchemaValidator()


def _scalar_definition() -> dict:
    return {"type": "ScalarEncoder", "fieldname": "day", "w": 7, "minVal": 0, "maxVal": 7, "radius": 1.0, "periodic": True}


def _coordinate_definition() -> dict:
    return {"type": "CoordinateEncoder", "fieldname": "position", "n": 999, "w": 25, "dimensions": 2}


def test_contracts_are_loaded(validator: EncoderSchemaValidator) -> None:
    assert set(validator.schema_names) == {"scalar", "coordinate", "multi"}


@pytest.mark.parametrize("definition_factory", [_scalar_definition, _coordinate_definition])
def test_definitions_validate(validator: EncoderSchemaValidator, definition_factory) -> None:
    validator.validate(definition_factory())


def test_scalar_definition_needs_n_radius_or_resolution(validator: EncoderSchemaValidator) -> None:
    definition = _scalar_definition()
    del definition["radius"]
    with pytest.raises(jsonschema.ValidationError):
        validator.validate(definition)


def test_missing_or_unknown_type(validator: EncoderSchemaValidator) -> None:
    with pytest.raises(ValueError):
        validator.validate({"fieldname": "x"})
    with pytest.raises(KeyError):
        validator.validate({"type": "SDRCategoryEncoder", "fieldname": "x"})
    with pytest.raises(KeyError):
        validator.get_validator("category")


def test_example_definitions_validate(validator: EncoderSchemaValidator) -> None:
    path = REPO_ROOT / "examples" / "weekday_position.json"
    with path.open("r", encoding="utf-8") as handle:
        validator.validate_multi(json.load(handle))


def test_missing_contracts_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        EncoderSchemaValidator(tmp_path / "absent")
