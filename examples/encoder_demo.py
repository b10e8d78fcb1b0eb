"""Encoder walkthrough demo.

Run this module to encode a handful of weekday/position/temperature records
with the definitions in ``weekday_position.json``, then print how much the
SDRs of neighbouring records overlap and what the scalar fields decode to.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

# Allow running the script directly without setting PYTHONPATH.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sdr_codec.core import MultiEncoder, decoded_to_str

DEFINITIONS = Path(__file__).resolve().with_name("weekday_position.json")


def build_records(count: int) -> List[Dict[str, Any]]:
    """A walk that advances one day and one grid step per record."""

    return [
        {"day_of_week": float(step % 7), "position": ([step, 2 * step], 3), "temperature": 12.0 + step}
        for step in range(count)
    ]


def main(argv: list[str] | None = None) -> dict[str, Any]:
    parser = argparse.ArgumentParser(description="Run the encoder walkthrough demo.")
    parser.add_argument("--records", type=int, default=8, help="Number of records to encode (default: 8)")
    args = parser.parse_args(argv)

    with DEFINITIONS.open("r", encoding="utf-8") as handle:
        definitions = json.load(handle)
    encoder = MultiEncoder()
    encoder.add_multiple_encoders(definitions)

    previous = None
    overlaps: List[int] = []
    decoded: List[str] = []
    for record in build_records(args.records):
        sdr = encoder.encode(record)
        if previous is not None:
            overlaps.append(int(np.sum(sdr & previous)))
        decoded.append(decoded_to_str(encoder.decode(sdr)))
        previous = sdr

    summary = {"width": encoder.width, "overlaps": overlaps, "decoded": decoded}
    print(json.dumps(summary, indent=2))
    return summary


if __name__ == "__main__":
    main()
