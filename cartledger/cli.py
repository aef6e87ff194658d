import argparse
import json
import logging
import sys

from cartledger.cart import Cart
from cartledger.config import Settings
from cartledger.report import format_receipt, receipt_json
from cartledger.result import Err, Ok, Result
from cartledger.script import ScriptError, load_script, replay


def _replay_file(path: str) -> Result[Cart, ScriptError]:
    match load_script(path):
        case Err() as err:
            return err
        case Ok(commands):
            return replay(commands)


def handle_replay(path: str, settings: Settings, *, as_json: bool) -> int:
    """Replay a command script and print the resulting receipt."""
    match _replay_file(path):
        case Err(e):
            print(f"Error in {path}: {e}", file=sys.stderr)
            return 1
        case Ok(cart):
            pass

    if as_json:
        print(json.dumps(receipt_json(cart), indent=2))
    else:
        print(format_receipt(cart, settings), end="")
    return 0


def handle_total(path: str, settings: Settings) -> int:
    match _replay_file(path):
        case Err(e):
            print(f"Error in {path}: {e}", file=sys.stderr)
            return 1
        case Ok(cart):
            print(settings.money(cart.get_total_amount()))
            return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the console script."""
    parser = argparse.ArgumentParser(
        prog="cartledger",
        description="Replay shopping-cart command scripts and print receipts",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Command: replay
    replay_parser = subparsers.add_parser(
        "replay",
        help="Apply a command script to an empty cart and print the receipt.",
    )
    replay_parser.add_argument("file", metavar="FILE", help="Command script to replay.")
    replay_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the receipt as JSON instead of text.",
    )
    replay_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Log every cart operation (DEBUG level).",
    )

    # Command: total
    total_parser = subparsers.add_parser(
        "total", help="Apply a command script and print only the total amount."
    )
    total_parser.add_argument("file", metavar="FILE", help="Command script to replay.")

    args = parser.parse_args(argv)

    match Settings.from_env():
        case Ok(settings):
            pass
        case Err(e):
            print(f"Configuration error: {e}", file=sys.stderr)
            return 1

    level = logging.DEBUG if getattr(args, "verbose", False) else settings.log_level_number
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    match args.command:
        case "replay":
            return handle_replay(args.file, settings, as_json=args.json)
        case "total":
            return handle_total(args.file, settings)
        case None:
            parser.print_help()
            return 1
        case _:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            parser.print_help()
            return 1


if __name__ == "__main__":
    sys.exit(main())
