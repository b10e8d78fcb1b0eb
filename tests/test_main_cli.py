"""Smoke tests for the command line entry point."""

from __future__ import annotations

import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from main import main


def test_cli_encodes_and_decodes(tmp_path: Path, capsys) -> None:
    definitions = {
        "day": {
            "type": "ScalarEncoder",
            "fieldname": "day",
            "w": 3,
            "n": 14,
            "minVal": 1,
            "maxVal": 8,
            "periodic": True,
            "forced": True,
        },
        "position": {"type": "CoordinateEncoder", "fieldname": "position", "n": 99, "w": 5},
    }
    path = tmp_path / "encoders.json"
    path.write_text(json.dumps(definitions), encoding="utf-8")

    summary = main([str(path), json.dumps({"day": 3, "position": [[1, 2], 1]}), "--decode"])

    assert summary["width"] == 113
    assert summary["fields"]["day"]["indices"] == [3, 4, 5]
    assert summary["fields"]["position"]["offset"] == 14
    assert 1 <= len(summary["fields"]["position"]["indices"]) <= 5
    assert summary["decoded"] == {"day": [[3.0, 3.0]]}
    assert summary["description"] == "day:[3.00]"
    assert json.loads(capsys.readouterr().out) == summary
