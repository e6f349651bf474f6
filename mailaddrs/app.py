"""
Command-line address header parser with:
- positional header values or --file input (one value per line, '-' for stdin)
- --header for full 'To: ...' lines
- text or JSON output, configurable through the environment or a .env file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv
from tqdm import tqdm

from .address_list import AddressList
from .config import LOG_FORMAT, OUTPUT_FORMATS, get_log_level, get_output_format, get_separator
from .errors import InvalidArgumentError
from .headers import header_from_string

load_dotenv()

logger = logging.getLogger(__name__)


def _read_lines(path: str) -> list[str]:
    """Read non-blank input lines from a file path or stdin ('-')."""
    if path == "-":
        lines = sys.stdin.read().splitlines()
    else:
        with open(path, encoding="utf-8") as fh:
            lines = fh.read().splitlines()
    return [line for line in lines if line.strip()]


def parse_inputs(
    values: Sequence[str], as_header: bool = False, progress: bool = False
) -> list[AddressList]:
    """Parse each raw value into its own AddressList.

    Args:
        values: Header values, or full header lines when ``as_header`` is set.
        as_header: Treat each value as a ``Field: value`` line.
        progress: Show a progress bar on stderr.

    Returns:
        One AddressList per input value, in order.
    """
    results: list[AddressList] = []
    for value in tqdm(values, desc="Parsing headers", disable=not progress):
        if as_header:
            results.append(header_from_string(value).address_list)
        else:
            results.append(AddressList.from_string(value))
    return results


def _to_records(address_list: AddressList) -> list[dict[str, Optional[str]]]:
    return [
        {"email": a.email, "name": a.name, "comment": a.comment}
        for a in address_list
    ]


def render(lists: Sequence[AddressList], output: str, separator: str) -> str:
    """Render parsed lists as text (one header value per line) or JSON."""
    if output == "json":
        return json.dumps([_to_records(lst) for lst in lists], indent=2)
    return "\n".join(lst.to_string(separator) for lst in lists)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint for parsing address headers."""
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)
    parser = argparse.ArgumentParser(
        description="Parse RFC 5322 address headers into unique address lists."
    )
    parser.add_argument("values", nargs="*", help="Header values to parse")
    parser.add_argument(
        "--file",
        help="Read header values from a file, one per line ('-' for stdin)",
    )
    parser.add_argument(
        "--header",
        action="store_true",
        help="Inputs are full header lines such as 'To: a@example.com'",
    )
    parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        default=get_output_format(),
        help="Output format",
    )
    parser.add_argument(
        "--json",
        dest="output",
        action="store_const",
        const="json",
        help="Shortcut for --output json",
    )
    parser.add_argument(
        "--dedupe-across",
        action="store_true",
        help="Merge all inputs into one list (first occurrence wins)",
    )
    args = parser.parse_args(argv)

    values = list(args.values)
    if args.file:
        lines = _read_lines(args.file)
        logger.info(f"Read {len(lines)} header values from {args.file}.")
        values.extend(lines)
    if not values:
        parser.error("no header values given")

    try:
        lists = parse_inputs(values, as_header=args.header, progress=bool(args.file))
    except InvalidArgumentError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.dedupe_across:
        merged = AddressList()
        for lst in lists:
            merged.merge(lst)
        lists = [merged]

    logger.info(f"Parsed {sum(len(lst) for lst in lists)} addresses.")
    print(render(lists, args.output, get_separator()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
