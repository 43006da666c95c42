"""Command-line interface for translatehub."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from . import __version__
from .errors import BatchTranslationError, MalformedInputError, TranslationServiceError
from .locale_store import LocaleStore
from .pipeline import collect_strings, translate_documents
from .translator import BACKENDS, LibreTranslateTranslator, create_translator
from .utils import load_context, load_json_file, write_json_file


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="translatehub",
        description="Translate every string in one or more JSON documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Translate two payloads together to French, writing to ./out
  translatehub frontend.json backend.json -t fr -o ./out

  # Use the last selected language and print the result
  translatehub frontend.json

  # Use OpenAI instead of LibreTranslate, with a glossary
  translatehub frontend.json -t de --backend openai -c ./translation-context.json

  # Count the strings that would be translated
  translatehub frontend.json backend.json --dry-run

Environment Variables:
  LIBRETRANSLATE_URL        LibreTranslate server (default: https://translate.fedilab.app/)
  OPENAI_API_KEY            Your OpenAI API key (required for --backend openai)
  TRANSLATEHUB_LOCALE_FILE  Where the selected language is remembered
        """,
    )

    parser.add_argument(
        "files",
        type=Path,
        nargs="*",
        help="JSON files to translate; all files share one batch of translations",
    )

    parser.add_argument(
        "-t",
        "--target-locale",
        type=str,
        default=None,
        metavar="CODE",
        help="Target language code. If not specified, uses the last selected language.",
    )

    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="libretranslate",
        help="Translation backend (default: libretranslate)",
    )

    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="LibreTranslate server URL (overrides LIBRETRANSLATE_URL)",
    )

    parser.add_argument(
        "-c",
        "--context-file",
        type=Path,
        default=None,
        help="Path to JSON file containing translation context and glossary (openai backend)",
    )

    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Write <name>.<lang>.json files here instead of printing to stdout",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be translated without making API calls",
    )

    parser.add_argument(
        "--list-languages",
        action="store_true",
        help="List the languages supported by the LibreTranslate server and exit",
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


async def _list_languages(url: str | None) -> None:
    async with LibreTranslateTranslator(base_url=url) as translator:
        languages = await translator.get_languages()
    for language in languages:
        print(f"  {language.code:8} {language.name}")


async def _translate_files(args: argparse.Namespace, target_language: str) -> None:
    documents = {path.stem: load_json_file(path) for path in args.files}

    if args.dry_run:
        table = collect_strings(documents)
        print("Dry run mode - no translations will be performed.")
        print(f"Would translate {len(table)} distinct strings to {target_language} from:")
        for path in args.files:
            print(f"  - {path}")
        return

    if args.backend == "openai":
        translator = create_translator("openai", context=load_context(args.context_file))
        translated = await translate_documents(documents, target_language, translator)
    else:
        async with LibreTranslateTranslator(base_url=args.url) as translator:
            translated = await translate_documents(documents, target_language, translator)

    if args.output_dir is None:
        print(json.dumps(translated, ensure_ascii=False, indent=2))
        return

    for name, tree in translated.items():
        output_file = args.output_dir / f"{name}.{target_language}.json"
        write_json_file(output_file, tree)
        print(f"Written to {output_file}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    # Load environment variables from .env file in current working directory
    load_dotenv(find_dotenv(usecwd=True))

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.list_languages:
            asyncio.run(_list_languages(args.url))
            return 0

        if not args.files:
            parser.error("at least one JSON file is required")

        for path in args.files:
            if not path.is_file():
                print(f"Error: File does not exist: {path}", file=sys.stderr)
                return 1

        stems = [path.stem for path in args.files]
        if len(set(stems)) != len(stems):
            print("Error: Input files must have distinct names", file=sys.stderr)
            return 1

        if args.context_file and not args.context_file.exists():
            print(f"Error: Context file not found: {args.context_file}", file=sys.stderr)
            return 1

        store = LocaleStore()
        if args.target_locale:
            target_language = args.target_locale
            if not args.dry_run:
                store.set_locale_language(target_language)
        else:
            target_language = store.get_locale_language(persist=not args.dry_run)
            print(f"Using selected language: {target_language}", file=sys.stderr)

        asyncio.run(_translate_files(args, target_language))
        return 0
    except BatchTranslationError as e:
        print(f"Error: {e}", file=sys.stderr)
        for text, error in e.failures:
            print(f"  {text!r}: {error}", file=sys.stderr)
        return 1
    except (TranslationServiceError, MalformedInputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON input: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
