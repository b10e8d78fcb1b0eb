"""CLI entry point for encoding a record with a declarative encoder definition."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

import numpy as np

from sdr_codec.core import MultiEncoder, decoded_to_str


def _load_definitions(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _field_summary(encoder: MultiEncoder, output: np.ndarray) -> Dict[str, Dict[str, Any]]:
    fields: Dict[str, Dict[str, Any]] = {}
    for slot in encoder.get_encoders():
        chunk = output[slot.offset : slot.offset + slot.encoder.width]
        fields[slot.name] = {
            "offset": slot.offset,
            "width": slot.encoder.width,
            "indices": np.flatnonzero(chunk).astype(int).tolist(),
        }
    return fields


def run(definitions: Mapping[str, Any], record: Mapping[str, Any], decode: bool = False) -> Dict[str, Any]:
    """Encode ``record`` and return a JSON-friendly summary."""

    encoder = MultiEncoder()
    encoder.add_multiple_encoders(definitions)
    output = encoder.encode(record)
    summary: Dict[str, Any] = {
        "width": encoder.width,
        "indices": np.flatnonzero(output).astype(int).tolist(),
        "fields": _field_summary(encoder, output),
    }
    if decode:
        decoded = encoder.decode(output)
        summary["decoded"] = {
            name: [[float(low), float(high)] for low, high in decoded.fields[name]] for name in decoded.field_names
        }
        summary["description"] = decoded_to_str(decoded)
    return summary


def main(argv: Sequence[str] | None = None) -> Dict[str, Any]:
    parser = argparse.ArgumentParser(description="Encode a JSON record into an SDR.")
    parser.add_argument("definitions", help="Path to a JSON file mapping keys to encoder definitions.")
    parser.add_argument("record", help='JSON object of field values, e.g. \'{"day": 3, "pos": [[1, 2], 1]}\'.')
    parser.add_argument("--decode", action="store_true", help="Also decode the SDR back into value ranges.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    summary = run(_load_definitions(Path(args.definitions)), json.loads(args.record), decode=args.decode)
    print(json.dumps(summary, indent=2))
    return summary


if __name__ == "__main__":
    main()
