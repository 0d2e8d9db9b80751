"""Command line entry point: scan poems from files or standard input."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from scansion.config import ClassifierSettings
from scansion.core import DictionaryLoadError, MeterAnalyzer, PronunciationStore, format_poem_analysis
from scansion.utils.logging_config import configure_logging
from scansion.utils.observability import get_logger

_LOG_LEVELS = ("debug", "info", "warning", "error")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scansion",
        description="Detect a poem's meter and print a stress scansion for each line.",
    )
    parser.add_argument(
        "poems",
        nargs="*",
        metavar="POEM",
        help="Text files holding one poem each. Reads standard input when omitted.",
    )
    parser.add_argument(
        "--dictionary",
        metavar="PATH",
        help="CMU-format pronouncing dictionary (defaults to the one bundled with pronouncing).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit one JSON object per poem instead of the text report.",
    )
    parser.add_argument(
        "--pretty-json",
        action="store_true",
        help="Indent JSON output for readability (implies --json).",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        help="Log level for scansion messages on stderr (default: $SCANSION_LOG_LEVEL or warning).",
    )
    return parser


def _read_poems(paths: Sequence[str], stdin: TextIO) -> List[str]:
    if not paths:
        return [stdin.read()]
    return [Path(path).read_text(encoding="utf-8") for path in paths]


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    store: Optional[PronunciationStore] = None,
) -> int:
    args = _build_parser().parse_args(argv)
    out = stdout or sys.stdout
    configure_logging(args.log_level)
    logger = get_logger(__name__).bind(component="cli")

    analyzer = MeterAnalyzer(store if store is not None else PronunciationStore(), ClassifierSettings.from_env())
    try:
        analyzer.load_dictionary(args.dictionary)
        poems = _read_poems(args.poems, stdin or sys.stdin)
    except (DictionaryLoadError, OSError) as exc:
        logger.error("Cannot start scansion", context={"error": str(exc)})
        print(f"scansion: {exc}", file=sys.stderr)
        return 2

    for index, text in enumerate(poems):
        analysis = analyzer.analyze_poem(text)
        if args.json or args.pretty_json:
            indent = 2 if args.pretty_json else None
            json.dump(analysis.to_dict(), out, indent=indent, ensure_ascii=False, sort_keys=True)
            out.write("\n")
            continue
        if index:
            out.write("\n")
        if len(poems) > 1:
            out.write(f"== {args.poems[index]} ==\n")
        out.write(format_poem_analysis(analysis))
        out.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
