from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping

from .errors import DictionaryError


def lang_path(lang_dir: Path, lang: str) -> Path:
    return lang_dir / f"{lang}.json"


def load_dictionary(path: Path) -> dict[str, str]:
    """Read a `<lang>.json` file; a missing file is an empty dictionary."""
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DictionaryError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise DictionaryError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def save_dictionary(path: Path, data: Mapping[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dict(data), f, ensure_ascii=False, indent=2)


def merge_base(existing: Mapping[str, str], extracted: Mapping[str, str]) -> dict[str, str]:
    """
    Add newly extracted keys to the base-language dictionary.

    Entries already on disk keep their values, so hand-edited source strings
    are never reset to the raw key.
    """
    merged = dict(existing)
    for key, value in extracted.items():
        merged.setdefault(key, value)
    return merged


def missing_keys(extracted: Iterable[str], existing: Mapping[str, str]) -> list[str]:
    return [key for key in extracted if key not in existing]
