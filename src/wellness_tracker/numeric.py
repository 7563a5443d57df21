"""Numeric coercion, rounding and display helpers."""

import math
import re
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

_ACRONYMS = {"USDA", "FNDDS", "SR", "ID"}
_SMALL_WORDS = {
    "and",
    "or",
    "the",
    "of",
    "in",
    "with",
    "a",
    "an",
    "to",
    "for",
    "on",
    "at",
    "by",
    "from",
}
_TOKEN_SPLIT = re.compile(r"(\s+|[-–—:/,&()])")
_SEPARATOR = re.compile(r"^(\s+|[-–—:/,&()])$")


def safe_number(value: object, fallback: float = 0.0) -> float:
    """Return value as a finite float, or the fallback."""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int | float):
        number = float(value)
        return number if math.isfinite(number) else fallback
    if isinstance(value, str):
        if not value.strip():
            return fallback
        try:
            number = float(value)
        except ValueError:
            return fallback
        return number if math.isfinite(number) else fallback
    return fallback


def round_half_up(value: object, decimals: int = 0) -> float:
    """Round half-up at the given number of decimals.

    The float is rounded through its shortest decimal representation, so
    ``round_half_up(2.345, 2)`` is 2.35 even though the binary value sits
    just below the midpoint. Midpoints go toward positive infinity, so
    ``round_half_up(-2.5)`` is -2.
    """
    number = safe_number(value, math.nan)
    if not math.isfinite(number):
        return 0.0
    quantum = Decimal(1).scaleb(-decimals)
    try:
        shifted = Decimal(repr(number)) + quantum / 2
        rounded = shifted.quantize(quantum, rounding=ROUND_FLOOR)
    except InvalidOperation:
        # Too many digits for the decimal context; already beyond the precision.
        return number
    return float(rounded)


def format_factor(value: float, is_energy_factor: bool = False) -> str:
    """Format a wellness factor for display.

    Fiber, protein and wellness factors render as whole numbers; the energy
    factor keeps one decimal because its values sit close to 1.
    """
    if not isinstance(value, int | float) or not math.isfinite(value):
        return "∞"
    if is_energy_factor:
        return f"{round_half_up(value, 1):.1f}"
    return str(int(round_half_up(value)))


def tidy_text(value: object) -> str:
    """Title-case a food description while keeping acronyms and small words."""
    raw = str(value if value is not None else "").strip()
    if not raw:
        return ""
    tokens = []
    for index, token in enumerate(_TOKEN_SPLIT.split(raw.lower())):
        if not token or _SEPARATOR.match(token):
            tokens.append(token)
            continue
        if token.upper() in _ACRONYMS:
            tokens.append(token.upper())
        elif token in _SMALL_WORDS and index != 0:
            tokens.append(token)
        else:
            tokens.append(token[0].upper() + token[1:])
    return re.sub(r"\s+", " ", "".join(tokens)).strip()
