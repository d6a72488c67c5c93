from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .contracts import StatementResult


def serialize_statement_result(result: StatementResult) -> str:
    """
    Stable JSON serialization for review artifacts.
    """

    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_statement_json_artifact(*, result: StatementResult, out_file: Path) -> None:
    """
    Write a statement result to a JSON file. Callers provide an explicit output path.
    """

    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_statement_result(result), encoding="utf-8")
