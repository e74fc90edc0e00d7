"""xcheck CLI — command-line interface for the cross-check pass.

Commands:
  xcheck instrument <file>            — Instrument a source file, print or write the result
  xcheck id <name>...                 — Print the check identifier derived from each name
  xcheck tags                         — List verification tags and their runtime names
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from typing import Optional

from xcheck import __version__
from xcheck.config import load_config
from xcheck.driver import instrument_file
from xcheck.errors import CompileError
from xcheck.hashing import djb2
from xcheck.tags import Tag


def cmd_instrument(args: argparse.Namespace) -> int:
    """Instrument one source file."""
    source_path = args.file
    if not os.path.exists(source_path):
        print(json.dumps({"error": f"File not found: {source_path}"}))
        return 1

    try:
        options = load_config(args.config, start_dir=os.path.dirname(os.path.abspath(source_path)))
        if args.check_args:
            options.check_args = True
        if args.enable_all:
            options.enabled_by_default = True
        if args.no_expand_raw:
            options.expand_raw = False
        result = instrument_file(source_path, options=options, output=args.output)
    except CompileError as e:
        print(e.to_json())
        return 1
    except OSError as e:
        print(json.dumps({"error": f"Cannot instrument {source_path}: {e}"}))
        return 1

    if args.json:
        print(json.dumps({
            "status": "instrumented",
            "file": source_path,
            "output": args.output,
            "options": asdict(options),
        }, indent=2))
    elif not args.output:
        sys.stdout.write(result)
    return 0


def cmd_id(args: argparse.Namespace) -> int:
    """Print the check identifier of each name."""
    for name in args.names:
        check_id = djb2(name)
        if args.json:
            print(json.dumps({"name": name, "id": check_id}))
        else:
            print(f"{name}\t{check_id}\t{check_id:#010x}")
    return 0


def cmd_tags(args: argparse.Namespace) -> int:
    """List verification tags."""
    for tag in Tag:
        print(f"{tag.value}\t{tag.name}\t{tag.runtime_name}")
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="xcheck",
        description="xcheck — cross-check instrumentation pass",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress (-v) or every rewritten declaration (-vv)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # instrument
    p_instrument = subparsers.add_parser("instrument", help="Insert cross-check calls into a source file")
    p_instrument.add_argument("file", help="Source file")
    p_instrument.add_argument("-o", "--output", help="Write the instrumented source here instead of stdout")
    p_instrument.add_argument("--config", help="Config file (default: nearest .xcheckrc.yml)")
    p_instrument.add_argument("--check-args", action="store_true", dest="check_args",
                              help="Also cross-check every argument value on entry")
    p_instrument.add_argument("--enable-all", action="store_true", dest="enable_all",
                              help="Instrument unannotated files as if they had @!cross_check")
    p_instrument.add_argument("--no-expand-raw", action="store_true", dest="no_expand_raw",
                              help="Leave cross_check_raw() calls unexpanded")
    p_instrument.add_argument("--json", action="store_true", help="Print a JSON status record")
    p_instrument.set_defaults(func=cmd_instrument)

    # id
    p_id = subparsers.add_parser("id", help="Print the check identifier derived from a name")
    p_id.add_argument("names", nargs="+", help="Function or annotation names")
    p_id.add_argument("--json", action="store_true", help="Print JSON records")
    p_id.set_defaults(func=cmd_id)

    # tags
    p_tags = subparsers.add_parser("tags", help="List verification tags")
    p_tags.set_defaults(func=cmd_tags)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
