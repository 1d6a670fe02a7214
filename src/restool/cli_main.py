"""restool CLI: preferred-value resistor combination finder.

Commands:
    combine: Approximate a resistance with a parallel pair and a series pair.
    ratio: Find resistors matching a ratio (one value) or a set of weights.
    divider: Find resistors for a divider; the first voltage is the input.
    round: Show the floor, nearest and ceiling series values of a resistance.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TextIO

from pydantic import ValidationError

from . import __version__
from .api import (
    CombinationRequest,
    DividerRequest,
    RatioRequest,
    RoundRequest,
    find_combinations,
    find_divider_set,
    find_ratio_set,
    round_value,
)
from .config import COLOR_MODES, RestoolConfig, RestoolConfigError, load_config
from .errors import InvalidInputError, SeriesInvariantError
from .search import (
    Candidate,
    MatchCallback,
    SearchResult,
    Topology,
    find_parallel_pair,
    find_series_pair,
    target_in_series,
)
from .series import SERIES_NAMES, get_series
from .units import format_error, format_si, parse_error_threshold

logger = logging.getLogger(__name__)

BOLD = "\033[1m"
NORMAL = "\033[0m"

_SEPARATORS: dict[Topology, str] = {
    Topology.PARALLEL: " || ",
    Topology.SERIES: " + ",
    Topology.RATIO: " : ",
    Topology.WEIGHTED: " : ",
    Topology.DIVIDER: " : ",
}

_TITLES: dict[Topology, str] = {
    Topology.PARALLEL: "The best parallel resistor combination:",
    Topology.SERIES: "The best series resistor combination:",
    Topology.RATIO: "The closest ratio found:",
    Topology.WEIGHTED: "The closest match found:",
    Topology.DIVIDER: "The closest match found:",
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the restool CLI."""
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument(
        "-s",
        "--series",
        type=_series_arg,
        default=None,
        help=f"Series of values to use, one of {', '.join(SERIES_NAMES)} (default: E24)",
    )
    shared.add_argument(
        "-e",
        "--error",
        type=_threshold_arg,
        default=None,
        help="Maximum relative error (e.g. 0.01 or 1%%); every result within it is printed",
    )
    shared.add_argument("--json", action="store_true", default=None, help="Output results as JSON")
    shared.add_argument("--color", choices=COLOR_MODES, default=None, help="Highlight summaries")
    shared.add_argument("--config", type=Path, default=None, help="Path to a restool.yaml config file")
    shared.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )

    parser = argparse.ArgumentParser(
        prog="restool",
        description="Find combinations of preferred-series resistors approximating a target",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    combine = subparsers.add_parser(
        "combine",
        help="Approximate a resistance with two resistors in parallel or in series",
        parents=[shared],
    )
    combine.add_argument("target", help="Target resistance, e.g. 12.34k or 12k34")

    ratio = subparsers.add_parser(
        "ratio",
        help="Find resistors with a given ratio (one value, read as N:1) or relative weights",
        parents=[shared],
    )
    ratio.add_argument("values", nargs="+", help="Ratio, or weights of each resistor in the set")

    divider = subparsers.add_parser(
        "divider",
        help="Find resistors for a divider; voltages in decreasing order, input first",
        parents=[shared],
    )
    divider.add_argument("voltages", nargs="+", help="Input voltage followed by output voltages")

    round_cmd = subparsers.add_parser(
        "round",
        help="Show the floor, nearest and ceiling series values of a resistance",
        parents=[shared],
    )
    round_cmd.add_argument("value", help="Resistance to round")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the restool CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv).

    Returns:
        Exit code (0 for success, 2 for invalid input, 1 for other errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.WARNING
    if args.verbose >= 1:
        log_level = logging.INFO
    if args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    try:
        config = load_config(args.config)
    except RestoolConfigError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 2
    _apply_config(args, config)

    try:
        if args.command == "combine":
            return _cmd_combine(args)
        elif args.command == "ratio":
            return _cmd_ratio(args)
        elif args.command == "divider":
            return _cmd_divider(args)
        elif args.command == "round":
            return _cmd_round(args)
        else:
            parser.error(f"Unknown command: {args.command}")
            return 2
    except (InvalidInputError, ValidationError) as e:
        sys.stderr.write(f"Error: {_describe_error(e)}\n")
        return 2
    except SeriesInvariantError:
        raise
    except Exception as e:
        logger.error("%s", e)
        if args.verbose >= 2:
            import traceback

            traceback.print_exc()
        return 1


# =============================================================================
# Command Handlers
# =============================================================================


def _cmd_combine(args: argparse.Namespace) -> int:
    """Handle combine command."""
    request = CombinationRequest(target=args.target, series=args.series, threshold=args.error)
    if args.json:
        _emit_json(find_combinations(request).to_dict())
        return 0

    printer = _Printer(sys.stdout, args.color)
    if target_in_series(request.target, request.series):
        printer.note(
            "The input value is present in the selected series of values.\n"
            "Attempting to find combinations without 0R or open circuit.\n"
        )
    parallel = find_parallel_pair(
        request.target,
        request.series,
        request.threshold,
        on_match=printer.match_printer(Topology.PARALLEL),
    )
    printer.best(parallel)
    printer.blank()
    series = find_series_pair(
        request.target,
        request.series,
        request.threshold,
        on_match=printer.match_printer(Topology.SERIES),
    )
    printer.best(series)
    return 0


def _cmd_ratio(args: argparse.Namespace) -> int:
    """Handle ratio command."""
    request = RatioRequest(weights=args.values, series=args.series, threshold=args.error)
    return _run_set_search(args, lambda on_match: find_ratio_set(request, on_match))


def _cmd_divider(args: argparse.Namespace) -> int:
    """Handle divider command."""
    request = DividerRequest(voltages=args.voltages, series=args.series, threshold=args.error)
    return _run_set_search(args, lambda on_match: find_divider_set(request, on_match))


def _cmd_round(args: argparse.Namespace) -> int:
    """Handle round command."""
    report = round_value(RoundRequest(value=args.value, series=args.series))
    if args.json:
        _emit_json(report.to_dict())
        return 0
    lines = [
        f"Series: {report.nearest.series.name}",
        f"Floor:   {format_si(report.floor.evaluate())}",
        f"Nearest: {format_si(report.nearest.evaluate())}",
        f"Ceil:    {format_si(report.ceil.evaluate())}",
    ]
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


def _run_set_search(
    args: argparse.Namespace,
    search: Callable[[MatchCallback | None], SearchResult],
) -> int:
    if args.json:
        result: SearchResult = search(None)
        _emit_json(result.to_dict())
        return 0
    printer = _Printer(sys.stdout, args.color)
    result = search(printer.match_printer(Topology.RATIO))
    printer.best(result)
    return 0


# =============================================================================
# Output
# =============================================================================


class _Printer:
    """Writes matches and summaries in the classic restool text format."""

    def __init__(self, stream: TextIO, color: str) -> None:
        self.stream = stream
        self.bold = color == "always" or (color == "auto" and stream.isatty())

    def match_printer(self, topology: Topology) -> MatchCallback:
        def _print(candidate: Candidate) -> None:
            self.stream.write(self._line(candidate, topology) + "\n")

        return _print

    def best(self, result: SearchResult) -> None:
        text = f"{_TITLES[result.topology]}\n{self._line(result.best, result.topology)}\n"
        self._write_bold(text)

    def note(self, text: str) -> None:
        self._write_bold(text + "\n")

    def blank(self) -> None:
        self.stream.write("\n")

    def _line(self, candidate: Candidate, topology: Topology) -> str:
        parts = _SEPARATORS[topology].join(format_si(value) for value in candidate.evaluated())
        return f"{parts}\tError: {format_error(candidate.error)}"

    def _write_bold(self, text: str) -> None:
        if self.bold:
            self.stream.write(f"{BOLD}{text}{NORMAL}")
        else:
            self.stream.write(text)


def _emit_json(payload: dict[str, Any]) -> None:
    sys.stdout.write(
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False) + "\n"
    )


# =============================================================================
# Helpers
# =============================================================================


def _apply_config(args: argparse.Namespace, config: RestoolConfig) -> None:
    if args.series is None:
        args.series = config.series
    if args.error is None:
        args.error = config.error_threshold
    if args.color is None:
        args.color = config.color
    if args.json is None:
        args.json = config.output == "json"


def _series_arg(value: str) -> str:
    try:
        return get_series(value).name
    except InvalidInputError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _threshold_arg(value: str) -> float:
    try:
        return parse_error_threshold(value)
    except InvalidInputError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _describe_error(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in item['loc']) or 'input'}: {item['msg']}" for item in error.errors()
        )
    return str(error)


if __name__ == "__main__":
    raise SystemExit(main())
