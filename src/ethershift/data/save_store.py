"""Key-value storage for serialized session records."""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Protocol

from ethershift.data.errors import DataLoadError

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class SaveStore(Protocol):
    """Minimal key-value contract used by the persistence service."""

    def exists(self, key: str) -> bool: ...

    def read(self, key: str) -> Dict[str, Any] | None: ...

    def write(self, key: str, payload: Dict[str, Any]) -> None: ...

    def delete(self, key: str) -> None: ...


def _validate_key(key: str) -> None:
    if not _VALID_KEY.match(key):
        raise ValueError(f"Invalid save key: {key!r}")


def _decode(text: str, source: str) -> Dict[str, Any]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Corrupt save record in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise DataLoadError(f"Save record in {source} must be a JSON object.")
    return payload


class JsonFileStore:
    """Stores each key as a JSON file inside a directory."""

    def __init__(self, base_dir: Path | str) -> None:
        self._base_dir = Path(base_dir)

    def exists(self, key: str) -> bool:
        _validate_key(key)
        return self._path(key).exists()

    def read(self, key: str) -> Dict[str, Any] | None:
        _validate_key(key)
        path = self._path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise DataLoadError(f"Unable to read save record: {path}") from exc
        return _decode(text, str(path))

    def write(self, key: str, payload: Dict[str, Any]) -> None:
        _validate_key(key)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        _validate_key(key)
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return

    def _path(self, key: str) -> Path:
        return self._base_dir / f"{key}.json"


class InMemoryStore:
    """Holds records as JSON text so reads never alias the writer's objects."""

    def __init__(self) -> None:
        self._records: Dict[str, str] = {}

    def exists(self, key: str) -> bool:
        _validate_key(key)
        return key in self._records

    def read(self, key: str) -> Dict[str, Any] | None:
        _validate_key(key)
        text = self._records.get(key)
        if text is None:
            return None
        return _decode(text, f"memory:{key}")

    def write(self, key: str, payload: Dict[str, Any]) -> None:
        _validate_key(key)
        self._records[key] = json.dumps(payload, sort_keys=True)

    def write_raw(self, key: str, text: str) -> None:
        """Store raw text as-is (lets callers plant damaged records)."""
        _validate_key(key)
        self._records[key] = text

    def delete(self, key: str) -> None:
        _validate_key(key)
        self._records.pop(key, None)
