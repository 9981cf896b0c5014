# validate_schema.py
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Union

from aave_positions.schema import validate_snapshot

Json = Union[Dict[str, Any], List[Any], str, int, float, bool, None]


def fail(msg: str, code: int = 1) -> NoReturn:
    print(f"ERROR: {msg}")
    sys.exit(code)


def load_json(path: Path, label: str) -> Json:
    if not path.exists():
        fail(f"{label} not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        fail(f"Failed to read {label} at {path}: {e}")
    try:
        return json.loads(text)
    except ValueError as e:
        fail(f"Failed to parse {label} at {path}: {e}")


def main(argv: List[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        fail("Usage: python validate_schema.py SNAPSHOT.json")

    data_path = Path(argv[0])
    if not data_path.is_absolute():
        data_path = (Path.cwd() / data_path).resolve()

    data = load_json(data_path, "snapshot")
    if not isinstance(data, dict):
        fail("Snapshot root must be a JSON object (dict).")

    problems = validate_snapshot(data)
    if problems:
        print("❌ Snapshot does NOT match schema.")
        for line in problems[:15]:
            print(f" - {line}")
        if len(problems) > 15:
            print(f" ... and {len(problems) - 15} more errors")
        sys.exit(2)

    print("✅ OK: snapshot matches schema.")
    print(f"address={data.get('address')}")
    for name, report in data["networks"].items():
        print(f" • {name}: {len(report)} reserves")
    for name, message in data["errors"].items():
        print(f" • {name}: failed ({message})")


if __name__ == "__main__":
    main()
