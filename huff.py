"""
huff: Huffman encoder/decoder for files

How to run:
  huff notes.txt e notes.huff
  huff notes.huff d notes.out
  huff legacy.txt e legacy.huff --stop-at-nul

Exit codes: 0 on success, 1 when the operation is neither 'e' nor 'd',
2 when encoding/decoding fails (bad input, malformed file, I/O error).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, List, Optional

from codec import CodecConfig, decode_file, encode_file
from errors import HuffmanError, InvalidOperationError

EXIT_OK = 0
EXIT_INVALID_OPERATION = 1
EXIT_FAILURE = 2


def encode_command(args: argparse.Namespace) -> None:
    encode_file(args.input, args.output, CodecConfig(stop_at_nul=args.stop_at_nul))


def decode_command(args: argparse.Namespace) -> None:
    # everything decode needs is in the file header
    decode_file(args.input, args.output)


OPERATIONS = {
    "e": encode_command,
    "d": decode_command,
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huff", description="An implementation of the Huffman encoder/decoder")
    ap.add_argument("input", help="The file to encode or to decode")
    ap.add_argument("operation", help="Use 'e' to encode, 'd' to decode")
    ap.add_argument("output", help="Where to save the result")
    ap.add_argument("--stop-at-nul", action="store_true",
                    help="Stop reading the input at the first zero code unit (encoding only, compatibility with older encoders)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log codec details")
    return ap


def select_operation(operation: str) -> Callable[[argparse.Namespace], None]:
    fn = OPERATIONS.get(operation)
    if fn is None:
        raise InvalidOperationError(f"unknown operation {operation!r}, use 'e' to encode or 'd' to decode")
    return fn


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        fn = select_operation(args.operation)
    except InvalidOperationError as e:
        print(f"usage error: {e}", file=sys.stderr)
        return EXIT_INVALID_OPERATION

    try:
        fn(args)
    except (HuffmanError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    in_size = os.path.getsize(args.input)
    out_size = os.path.getsize(args.output)
    print(f"{args.input} ({in_size} bytes) -> {args.output} ({out_size} bytes)")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
