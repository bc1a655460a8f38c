"""
Blade template scanning.

Finds `.blade.php` files under a project root and pulls the literal keys out
of translation calls:

    __('Welcome back')
    __("Hello, :name", ['name' => $user->name])
    @lang('Log out')

Only literal string arguments are collected; calls built from variables or
concatenation are ignored.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from .errors import InputError

BLADE_SUFFIX = ".blade.php"
BLADE_GLOB = "*" + BLADE_SUFFIX

# Directories never worth scanning for templates.
SKIPPED_DIRS = frozenset({"vendor", "node_modules", ".git"})

# Same quote on both sides; the key may be followed by replacement arguments.
CALL_RE = re.compile(
    r"""(?:(?<![\w$])__|@lang)\(\s*(['"`])((?:\\.|(?!\1)[^\\\n])*)\1\s*[,)]"""
)
ESCAPED_QUOTE_RE = re.compile(r"""\\(['"`\\])""")


# ── File collection ────────────────────────────────────────────────────────────

def _walk_templates(base: Path) -> Iterable[Path]:
    for path in base.rglob(BLADE_GLOB):
        if not path.is_file():
            continue
        if SKIPPED_DIRS.intersection(path.relative_to(base).parts[:-1]):
            continue
        yield path


def collect_files(root: Path, pattern: str) -> list[Path]:
    """
    Resolve a file selector into template paths relative to `root`.

    `*` selects every template in the project, `some/dir/*` every template
    below that directory, anything else a single template file.
    """
    pattern = pattern.strip()
    if not pattern:
        raise InputError("No file selector given.")

    if pattern == "*":
        found = [path.relative_to(root) for path in _walk_templates(root)]
    elif pattern.endswith("/*"):
        rel_dir = Path(pattern[:-2])
        dir_path = root / rel_dir
        if not dir_path.is_dir():
            raise InputError(f"Invalid folder path: {rel_dir.as_posix()}")
        found = [rel_dir / path.relative_to(dir_path) for path in _walk_templates(dir_path)]
    else:
        file_path = root / pattern
        if not (file_path.is_file() and file_path.name.endswith(BLADE_SUFFIX)):
            raise InputError(f"Invalid Blade file path: {pattern}")
        found = [Path(pattern)]

    return sorted(set(found))


# ── Key extraction ─────────────────────────────────────────────────────────────

def _unescape(key: str) -> str:
    return ESCAPED_QUOTE_RE.sub(r"\1", key)


def extract_keys(content: str) -> list[str]:
    """Return translation keys in first-occurrence order, without duplicates."""
    keys: list[str] = []
    seen: set[str] = set()
    for match in CALL_RE.finditer(content):
        key = _unescape(match.group(2))
        if key and key not in seen:
            seen.add(key)
            keys.append(key)
    return keys


def extract_from_files(root: Path, files: Iterable[Path]) -> dict[str, str]:
    """Map every key found in `files` to itself (base-language seed)."""
    found: dict[str, str] = {}
    for rel in files:
        try:
            content = (root / rel).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(f"Cannot read {rel.as_posix()}: {exc}") from exc
        for key in extract_keys(content):
            found.setdefault(key, key)
    return found
