"""Plain-text command scripts that drive a Cart.

One command per line; ``#`` starts a comment and blank lines are skipped:

    add A 10 2
    remove A 1
    promo PROMO10 A 10 [MIN_PRICE]
    bogo FREE3 C 2
    activate PROMO10
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .cart import Cart
from .errors import CartError
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)


class ScriptError(Exception):
    def __init__(self, line_no: int, message: str) -> None:
        super().__init__(f"line {line_no}: {message}")
        self.line_no = line_no
        self.message = message


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AddCommand:
    line_no: int
    reference: str
    price: float
    quantity: int


@dataclass(frozen=True)
class RemoveCommand:
    line_no: int
    reference: str
    quantity: int


@dataclass(frozen=True)
class PromoCommand:
    line_no: int
    code: str
    reference: str
    percent: int
    min_price: float | None = None


@dataclass(frozen=True)
class BogoCommand:
    line_no: int
    code: str
    reference: str
    threshold: int


@dataclass(frozen=True)
class ActivateCommand:
    line_no: int
    code: str


Command = AddCommand | RemoveCommand | PromoCommand | BogoCommand | ActivateCommand

_USAGE = {
    "add": "add REFERENCE PRICE QUANTITY",
    "remove": "remove REFERENCE QUANTITY",
    "promo": "promo CODE REFERENCE PERCENT [MIN_PRICE]",
    "bogo": "bogo CODE REFERENCE THRESHOLD",
    "activate": "activate CODE",
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _number(token: str) -> float:
    # Integral prices stay ints so they print and compare naturally.
    try:
        return int(token)
    except ValueError:
        return float(token)


def parse_line(line: str, line_no: int) -> Result[Command | None, ScriptError]:
    """Parse one script line. Returns Ok(None) for blank and comment lines."""
    tokens = line.split("#", 1)[0].split()
    if not tokens:
        return Ok(None)

    name, args = tokens[0].lower(), tokens[1:]
    if name not in _USAGE:
        return Err(ScriptError(line_no, f"unknown command {tokens[0]!r}"))

    try:
        match name, args:
            case "add", [reference, price, quantity]:
                return Ok(AddCommand(line_no, reference, _number(price), int(quantity)))
            case "remove", [reference, quantity]:
                return Ok(RemoveCommand(line_no, reference, int(quantity)))
            case "promo", [code, reference, percent]:
                return Ok(PromoCommand(line_no, code, reference, int(percent)))
            case "promo", [code, reference, percent, min_price]:
                return Ok(
                    PromoCommand(line_no, code, reference, int(percent), _number(min_price))
                )
            case "bogo", [code, reference, threshold]:
                return Ok(BogoCommand(line_no, code, reference, int(threshold)))
            case "activate", [code]:
                return Ok(ActivateCommand(line_no, code))
            case _:
                return Err(ScriptError(line_no, f"usage: {_USAGE[name]}"))
    except ValueError as e:
        return Err(ScriptError(line_no, f"bad number in {name!r}: {e}"))


def parse_script(text: str) -> Result[list[Command], ScriptError]:
    commands: list[Command] = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        match parse_line(line, line_no):
            case Ok(None):
                continue
            case Ok(command):
                commands.append(command)
            case Err(e):
                return Err(e)
    return Ok(commands)


def load_script(path: str) -> Result[list[Command], ScriptError]:
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return Err(ScriptError(0, f"could not read {path}: {e}"))
    return parse_script(text)


# ---------------------------------------------------------------------------
# Replay
# ---------------------------------------------------------------------------


def apply_command(cart: Cart, command: Command) -> None:
    """Apply a single command, letting CartError propagate."""
    match command:
        case AddCommand(_, reference, price, quantity):
            cart.add(reference, price, quantity)
        case RemoveCommand(_, reference, quantity):
            cart.remove(reference, quantity)
        case PromoCommand(_, code, reference, percent, min_price):
            cart.register_promotion(code, reference, percent, min_price)
        case BogoCommand(_, code, reference, threshold):
            cart.register_buy_n_get_one_promotion(code, reference, threshold)
        case ActivateCommand(line_no, code):
            if not cart.activate_promotion(code):
                logger.warning("line %d: promotion %r was not activated", line_no, code)


def replay(commands: Iterable[Command], cart: Cart | None = None) -> Result[Cart, ScriptError]:
    """Apply commands in order, stopping at the first rejected one.

    Commands before the failing one stay applied to the cart.
    """
    cart = cart if cart is not None else Cart()
    for command in commands:
        try:
            apply_command(cart, command)
        except CartError as e:
            return Err(ScriptError(command.line_no, str(e)))
    return Ok(cart)
