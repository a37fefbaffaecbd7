"""Decoding of JSON blobs passed on the command line, in files or via the editor."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from formscli.domain.exceptions import EntityNotFoundError, InvalidJsonError


def decode_json_option(raw: str, option: str) -> dict[str, Any]:
    """Decode a ``--<option>=<json>`` value into a non-empty object."""
    data = decode_json_text(raw, f"--{option}")
    if not isinstance(data, dict) or not data:
        raise InvalidJsonError(f"{option} must be a non-empty JSON object")
    return data


def decode_json_text(raw: str, source: str) -> Any:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidJsonError(f"{source} is not valid JSON: {exc}") from exc
    if not data:
        raise InvalidJsonError(f"{source} is empty")
    return data


def read_json_file(path: str | Path) -> Any:
    file_path = Path(path)
    if not file_path.is_file():
        raise EntityNotFoundError(f"File not found: {file_path}")
    return decode_json_text(file_path.read_text(encoding="utf-8"), str(file_path))


def records_in(data: Any) -> list[dict[str, Any]]:
    """The records held by an export file.

    Accepts a JSON array, an object of numbered records (other keys, such
    as ``version``, are ignored) or a single record object.
    """
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        items = [data[key] for key in data if str(key).isdigit()] or [data]
    else:
        items = []
    records = [item for item in items if isinstance(item, dict)]
    if not records:
        raise InvalidJsonError("The file does not contain any records")
    return records
