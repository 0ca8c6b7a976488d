import argparse
import json
import logging
import sys

from dynawire.bootstrap.deps import get_encoder, get_decoder
from dynawire.core.helpers.utils import setup_logging
from dynawire.core.models.errors import DynawireError
from dynawire.infra.format_renderer import JsonRenderer, YamlRenderer

RENDERERS: dict[str, type[JsonRenderer | YamlRenderer]] = {
    "json": JsonRenderer,
    "yaml": YamlRenderer,
}


def get_cli_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dynawire",
        description=(
            "Convert between plain JSON values and the service's typed\n"
            "attribute-value wire format."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-f", "--format",
        type=str,
        default="json",
        choices=sorted(RENDERERS),
        help="Output format (default: json)."
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default: WARNING)."
    )

    commands = parser.add_subparsers(dest="command", required=True)

    encode = commands.add_parser("encode", help="Encode a JSON value into wire form.")
    encode.add_argument("value", nargs="?", help="JSON text; read from stdin when omitted.")
    encode.add_argument(
        "--root",
        action="store_true",
        help="Encode a JSON object as an item (attribute name -> tagged value)."
    )

    decode = commands.add_parser("decode", help="Decode a wire value, item or response.")
    decode.add_argument("value", nargs="?", help="JSON text; read from stdin when omitted.")
    decode.add_argument(
        "--list-sets",
        action="store_true",
        help="Decode SS/NS/BS into lists in wire order instead of sets."
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = get_cli_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger("bootstrap.cli")

    raw = args.value if args.value is not None else sys.stdin.read()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as ex:
        print(f"Invalid JSON input: {ex}", file=sys.stderr)
        return 1

    try:
        if args.command == "encode":
            encoder = get_encoder()
            result = encoder.encode_root(data) if args.root else encoder.encode(data)
        else:
            result = get_decoder().decode(data, sets=False if args.list_sets else None)
    except DynawireError as ex:
        logger.debug(f"{args.command} failed", exc_info=ex)
        print(str(ex), file=sys.stderr)
        return 1

    print(RENDERERS[args.format]().render(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
