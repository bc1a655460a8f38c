"""
Extract → seed → back-fill.

1. Collect Blade templates and extract their translation keys.
2. Merge the keys into the base-language dictionary (`en.json`).
3. For every target language, translate only the keys its dictionary is
   missing and merge the results into `<lang>.json`.

Existing entries are never overwritten. A string that cannot be translated
falls back to its source text so the dictionary stays complete.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .dictionary import lang_path, load_dictionary, merge_base, missing_keys, save_dictionary
from .errors import ConfigError, TranslationError
from .extract import collect_files, extract_from_files
from .providers import DEFAULT_BACKOFF, DEFAULT_RETRIES, TranslationProvider, translate_with_retry

DEFAULT_LANG_DIR = Path("resources") / "lang"
DEFAULT_BASE_LANG = "en"
DEFAULT_DELAY_MS = 200


@dataclass
class SyncOptions:
    root: Path
    languages: list[str]
    files: str = "*"
    lang_dir: Path = DEFAULT_LANG_DIR
    base_lang: str = DEFAULT_BASE_LANG
    delay_ms: int = DEFAULT_DELAY_MS
    retries: int = DEFAULT_RETRIES
    backoff: float = DEFAULT_BACKOFF
    dry_run: bool = False

    @property
    def lang_root(self) -> Path:
        return self.root / self.lang_dir


@dataclass
class LanguageResult:
    lang: str
    missing: int = 0
    translated: int = 0
    fallbacks: int = 0


@dataclass
class SyncReport:
    files: int = 0
    keys: int = 0
    new_base_keys: int = 0
    languages: list[LanguageResult] = field(default_factory=list)

    @property
    def translated(self) -> int:
        return sum(r.translated for r in self.languages)

    @property
    def fallbacks(self) -> int:
        return sum(r.fallbacks for r in self.languages)


def target_languages(languages: list[str], base_lang: str) -> list[str]:
    """Trim, drop blanks and the base language, keep first occurrence."""
    result: list[str] = []
    for lang in languages:
        lang = lang.strip()
        if lang and lang != base_lang and lang not in result:
            result.append(lang)
    return result


def _translate_language(
    lang: str,
    keys: list[str],
    existing: dict[str, str],
    options: SyncOptions,
    provider: Optional[TranslationProvider],
    sleep: Callable[[float], None],
) -> LanguageResult:
    path = lang_path(options.lang_root, lang)
    todo = missing_keys(keys, existing)
    result = LanguageResult(lang=lang, missing=len(todo))

    print(f"[lang] {lang}: {len(todo)} new string(s)", flush=True)
    if options.dry_run:
        return result
    if todo and provider is None:
        raise ConfigError(f"A translation provider is required to fill {path.name}.")

    translated = dict(existing)
    total = len(todo)
    for i, key in enumerate(todo, start=1):
        print(f"  [{i}/{total}] {lang}", end="\r", flush=True)
        try:
            translated[key] = translate_with_retry(
                provider,
                key,
                lang,
                retries=options.retries,
                backoff=options.backoff,
                sleep=sleep,
            )
            result.translated += 1
        except TranslationError as exc:
            print(f"  [WARN] Translation failed for {lang}: {exc}", file=sys.stderr)
            translated[key] = key
            result.fallbacks += 1
        sleep(options.delay_ms / 1000)

    if total:
        print(f"  Done - {result.translated} translated, {result.fallbacks} fallback(s).", flush=True)

    save_dictionary(path, translated)
    return result


def run_sync(
    options: SyncOptions,
    provider: Optional[TranslationProvider],
    sleep: Callable[[float], None] = time.sleep,
) -> SyncReport:
    """Run one extract-and-translate pass. `provider` may be None for dry runs."""
    report = SyncReport()

    files = collect_files(options.root, options.files)
    report.files = len(files)
    print(f"[scan] {len(files)} Blade file(s) matched '{options.files}'", flush=True)

    extracted = extract_from_files(options.root, files)
    report.keys = len(extracted)
    if not extracted:
        print("[WARN] No translatable strings found.", file=sys.stderr)
        return report
    print(f"[scan] {len(extracted)} unique key(s) found", flush=True)

    # Target dictionaries are all read before en.json is written.
    languages = target_languages(options.languages, options.base_lang)
    existing = {lang: load_dictionary(lang_path(options.lang_root, lang)) for lang in languages}

    base_path = lang_path(options.lang_root, options.base_lang)
    existing_base = load_dictionary(base_path)
    merged_base = merge_base(existing_base, extracted)
    report.new_base_keys = len(merged_base) - len(existing_base)
    print(f"[base] {options.base_lang}: {report.new_base_keys} new key(s)", flush=True)
    if not options.dry_run:
        options.lang_root.mkdir(parents=True, exist_ok=True)
        save_dictionary(base_path, merged_base)

    keys = list(extracted)
    for lang in languages:
        report.languages.append(
            _translate_language(lang, keys, existing[lang], options, provider, sleep)
        )

    return report
