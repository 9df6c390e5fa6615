"""Command-line interface for vhighlight."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vhighlight.errors import ConfigError, PatternError
from vhighlight.filetypes import EXTENSIONS, is_v_source
from vhighlight.keywords import KeywordConfig

logger = logging.getLogger(__name__)

FORMATS = ("spans", "json", "html")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    output_format: str
    region: tuple[int, int] | None
    outline: bool
    config: KeywordConfig
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="vhighlight",
        description="Classify V source code for syntax highlighting",
    )
    p.add_argument("input", help="Input V source file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default="spans",
        help="Output format (default: spans)",
    )
    p.add_argument(
        "--region",
        metavar="START:END",
        help="Classify only the offsets START..END (default: whole file)",
    )
    p.add_argument(
        "--outline",
        action="store_true",
        help="Print declaration sites and TODO markers instead of spans",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover vhighlight.toml)",
    )
    p.add_argument(
        "-k",
        "--keyword",
        action="append",
        default=[],
        metavar="SET=WORD",
        help="Add a word to a keyword set (repeatable)",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and reclassify")
    p.add_argument("--debug", action="store_true", help="Dump spans to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def parse_keyword_arg(s: str) -> tuple[str, str]:
    """Parse a SET=WORD string into (set name, word)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"invalid keyword format (expected SET=WORD): {s}")
    name, _, word = s.partition("=")
    return name, word


def parse_region_arg(s: str) -> tuple[int, int]:
    """Parse a START:END string into an offset pair."""
    start, sep, end = s.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"invalid region format (expected START:END): {s}")
    try:
        region = (int(start), int(end))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid region offsets: {s}") from None
    if region[0] < 0 or region[1] < region[0]:
        raise argparse.ArgumentTypeError(f"invalid region offsets: {s}")
    return region


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "vhighlight.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Keyword sets: config replaces wholesale, CLI appends
    keywords = KeywordConfig()
    cfg_keywords = config.get("keywords")
    if cfg_keywords is not None:
        if not isinstance(cfg_keywords, dict):
            raise ConfigError("[keywords] must be a table")
        keywords = KeywordConfig.from_mapping(cfg_keywords)
    for raw in args.keyword:
        name, word = parse_keyword_arg(raw)
        keywords = keywords.with_words(name, [word])

    region = parse_region_arg(args.region) if args.region else None
    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=args.format,
        region=region,
        outline=args.outline,
        config=keywords,
        watch=args.watch,
        debug=args.debug,
    )


def highlight_file(options: CliOptions) -> str:
    """Read and classify a V file, returning the formatted output."""
    from vhighlight.debug import dump_spans
    from vhighlight.highlighter import Highlighter
    from vhighlight.render import render

    if not is_v_source(options.input_file):
        logger.warning(
            "%s does not have a V extension (%s)", options.input_file, ", ".join(EXTENSIONS)
        )

    source = options.input_file.read_text(encoding="utf-8")
    highlighter = Highlighter(options.config)

    if options.outline:
        entries = highlighter.outline(source)
        return "".join(f"{e.offset}\t{e.kind}\t{e.label}\n" for e in entries)

    spans = highlighter.classify(source, options.region)

    if options.debug:
        dump_spans(source, spans, file=sys.stderr)

    if options.output_format == "json":
        records = [
            {
                "start": s.start,
                "end": s.end,
                "category": s.category.value,
                "text": s.text(source),
            }
            for s in spans
        ]
        return json.dumps(records, indent=2) + "\n"
    if options.output_format == "html":
        return render(source, spans, standalone=True)
    return "".join(f"{s.start}\t{s.end}\t{s.category.value}\n" for s in spans)


def _write(options: CliOptions, text: str) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, reclassify on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    # Output is produced in full before anything is written
                    _write(options, highlight_file(options))
                    print(f"Classified {options.input_file}", file=sys.stderr)
                except (ConfigError, PatternError) as exc:
                    print(str(exc), file=sys.stderr)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 1

    if options.watch:
        watch_loop(options)
        return 0

    try:
        output = highlight_file(options)
    except (ConfigError, PatternError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _write(options, output)
    return 0
