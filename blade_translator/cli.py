"""
blade-translator

Scans Laravel Blade templates for `__('...')` / `@lang('...')` calls, seeds
resources/lang/en.json with the keys found, and fills in every requested
<lang>.json through Google Cloud Translation or DeepL.

Usage:
    blade-translator --langs ja,fr                          # all templates
    blade-translator --files "resources/views/mail/*" --langs de
    blade-translator --files resources/views/welcome.blade.php --langs es
    blade-translator --langs ja --provider deepl --api-key KEY
    blade-translator --langs ja,fr --dry-run                # counts only

The provider, API key and request delay default to the environment variables
BLADE_TRANSLATOR_PROVIDER, BLADE_TRANSLATOR_API_KEY and
BLADE_TRANSLATOR_DELAY_MS.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .errors import BladeTranslatorError, ConfigError
from .providers import DEFAULT_RETRIES, PROVIDERS, create_provider
from .sync import DEFAULT_BASE_LANG, DEFAULT_DELAY_MS, DEFAULT_LANG_DIR, SyncOptions, run_sync

ENV_PROVIDER = "BLADE_TRANSLATOR_PROVIDER"
ENV_API_KEY = "BLADE_TRANSLATOR_API_KEY"
ENV_DELAY_MS = "BLADE_TRANSLATOR_DELAY_MS"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_FALLBACKS = 2


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from None


def parse_languages(value: str) -> list[str]:
    return [lang.strip() for lang in value.split(",") if lang.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blade-translator",
        description="Extract Blade translation keys and machine-translate missing entries.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Laravel project root (default: current directory).",
    )
    parser.add_argument(
        "--files",
        default="*",
        metavar="SELECTOR",
        help='Template selector: "*" for all, "dir/*" for a folder, or one .blade.php path.',
    )
    parser.add_argument(
        "--langs",
        type=parse_languages,
        default=[],
        metavar="LANGS",
        help="Comma-separated target languages, e.g. ja,fr.",
    )
    parser.add_argument(
        "--provider",
        default=os.environ.get(ENV_PROVIDER, "google"),
        help=f"Translation API: {', '.join(sorted(PROVIDERS))} (env {ENV_PROVIDER}).",
    )
    parser.add_argument(
        "--api-key",
        default=os.environ.get(ENV_API_KEY),
        help=f"API key for the provider (env {ENV_API_KEY}).",
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help=f"Pause between API requests in ms (env {ENV_DELAY_MS}, default {DEFAULT_DELAY_MS}).",
    )
    parser.add_argument(
        "--lang-dir",
        type=Path,
        default=DEFAULT_LANG_DIR,
        help="Language directory relative to the root (default: resources/lang).",
    )
    parser.add_argument(
        "--base-lang",
        default=DEFAULT_BASE_LANG,
        help="Base language whose dictionary maps keys to themselves (default: en).",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=DEFAULT_RETRIES,
        help="Attempts per string when the API rate-limits (default: 3).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Extract and show counts without calling the API or writing files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> SyncOptions:
    delay_ms = args.delay_ms if args.delay_ms is not None else _env_int(ENV_DELAY_MS, DEFAULT_DELAY_MS)
    if delay_ms < 0:
        raise ConfigError("--delay-ms must not be negative.")
    if args.retries < 1:
        raise ConfigError("--retries must be at least 1.")

    root = args.root.resolve()
    if not root.is_dir():
        raise ConfigError(f"Project root does not exist: {root}")

    return SyncOptions(
        root=root,
        languages=args.langs,
        files=args.files,
        lang_dir=args.lang_dir,
        base_lang=args.base_lang,
        delay_ms=delay_ms,
        retries=args.retries,
        dry_run=args.dry_run,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        options = options_from_args(args)
        provider = None if options.dry_run else create_provider(args.provider, args.api_key)
        report = run_sync(options, provider)
    except BladeTranslatorError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return EXIT_ERROR

    print(
        f"\nDone. {report.files} file(s) scanned, "
        f"{report.keys} key(s) found, "
        f"{report.new_base_keys} new in {options.base_lang}, "
        f"{report.translated} string(s) translated, "
        f"{report.fallbacks} fallback(s)."
    )
    return EXIT_FALLBACKS if report.fallbacks else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
