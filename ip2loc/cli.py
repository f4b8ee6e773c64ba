from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from ip2loc import __version__
from ip2loc.config import load_config
from ip2loc.errors import ConfigError
from ip2loc.orchestrators import MODE_BULK, investigate
from ip2loc.reporting.console import render_json, render_results
from ip2loc.utils.env import load_env
from ip2loc.utils.logging import logger, set_stream as set_log_stream


log = logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ip2loc",
        description="Geolocate IP addresses with ipstack. No target looks up your own public IP; "
        "two or more targets need a premium plan.",
    )
    parser.add_argument("targets", nargs="*", metavar="TARGET", help="IP address or hostname")
    parser.add_argument("-o", "--format", choices=["console", "json"], default="console", help="Output format")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Config file (default: ~/.config/ip2loc.json)")
    parser.add_argument("-V", "--version", action="version", version=f"ip2loc {__version__}")
    return parser


def _parse_args(argv: Optional[Sequence[str]], out: TextIO, err: TextIO) -> argparse.Namespace:
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        return build_parser().parse_args(argv)


def run(argv: Optional[Sequence[str]] = None, *, out: TextIO, err: TextIO) -> int:
    """Run one lookup, writing results to ``out`` and failures to ``err``."""
    try:
        args = _parse_args(argv, out, err)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 2

    set_log_stream(err)
    try:
        return _lookup(args, out, err)
    finally:
        set_log_stream(None)


def _lookup(args: argparse.Namespace, out: TextIO, err: TextIO) -> int:
    try:
        credentials = load_config(args.config)
    except ConfigError as e:
        log["debug"]("config load failed", error=str(e))
        err.write(f"{e}\n")
        return 1

    targets: List[str] = list(args.targets)
    res = asyncio.run(investigate(targets, credentials))
    if not res.ok:
        err.write(f"{res.error}\n")
        return 1

    if args.format == "json":
        out.write(render_json(res.results, bulk=(res.mode == MODE_BULK)))
    else:
        out.write(render_results(res.results))
    return 0


def main() -> None:
    # Load .env if present
    load_env()
    code = run(sys.argv[1:], out=sys.stdout, err=sys.stderr)
    raise SystemExit(code)


if __name__ == "__main__":
    main()
