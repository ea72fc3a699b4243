import argparse
import logging
import sys

from respirator.config import DEFAULT_MAX_DEPTH, DecoderConfig
from respirator.exceptions import DecodeError
from respirator.resp.decoder import RESPDecoder


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decode a capture of pipelined RESP units and print each value."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="File with raw RESP bytes, '-' for stdin",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum array nesting depth",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )

    return parser.parse_args(argv)


def read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()

    with open(path, "rb") as file:
        return file.read()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = DecoderConfig(max_depth=args.max_depth)
    except ValueError as e:
        logging.error(str(e))
        return 2

    try:
        data = read_input(args.path)
    except OSError as e:
        logging.error(f"Cannot read {args.path}: {e}")
        return 2

    decoder = RESPDecoder(config)
    decoded = 0

    try:
        for value in decoder.iter_decode(data):
            print(f"{type(value)!r} {value.dump()!r}")
            decoded += 1
    except DecodeError as e:
        logging.error(f"{e.kind} after {decoded} value(s): {e}")
        return 1

    logging.info(f"Decoded {decoded} value(s) from {len(data)} bytes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
