"""Free-text ingredient line parsing."""

import re
from dataclasses import dataclass
from enum import Enum

from recipecart.logging_config import get_logger
from recipecart.normalize.labels import normalize_label
from recipecart.normalize.units import is_measure_word, normalize_measure_text

logger = get_logger(__name__)


UNICODE_FRACTIONS: dict[str, float] = {
    "¼": 0.25,
    "½": 0.5,
    "¾": 0.75,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}

_INTEGER_PATTERN = re.compile(r"[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[0-9]+\.[0-9]+")
_FRACTION_PATTERN = re.compile(r"([0-9]+)/([0-9]+)")

# Filler word allowed between the unit and the label ("2 cups of flour")
_OF = "of"


@dataclass(frozen=True)
class ParsedIngredient:
    """Result of parsing one ingredient line."""

    label: str
    normalized_label: str
    quantity_text: str
    amount_value: float | None
    measure_text: str


EMPTY_INGREDIENT = ParsedIngredient(
    label="",
    normalized_label="",
    quantity_text="",
    amount_value=None,
    measure_text="",
)


class ParseState(str, Enum):
    """Parser position within an ingredient line."""

    NUMBER = "number"
    UNIT = "unit"
    OF = "of"
    LABEL = "label"


def parse_numeric_token(token: str) -> float | None:
    """
    Parse one quantity token.

    Handles:
    - "2"
    - "1.5"
    - "1/2" (a zero denominator is not a number)
    - "½" and the other single vulgar-fraction glyphs
    """
    if token in UNICODE_FRACTIONS:
        return UNICODE_FRACTIONS[token]

    if _INTEGER_PATTERN.fullmatch(token) or _DECIMAL_PATTERN.fullmatch(token):
        return float(token)

    fraction = _FRACTION_PATTERN.fullmatch(token)
    if fraction:
        numerator = int(fraction.group(1))
        denominator = int(fraction.group(2))
        if denominator == 0:
            logger.debug(f"Ignoring fraction with zero denominator: {token!r}")
            return None
        return numerator / denominator

    return None


def format_label(value: str) -> str:
    """Capitalize the first character of every word ("baby spinach" -> "Baby Spinach")."""
    return " ".join(word[0].upper() + word[1:] for word in value.split())


def parse_ingredient(raw_value: str) -> ParsedIngredient:
    """
    Split an ingredient line into quantity, unit and label.

    Tokens are consumed left to right: numbers first, then unit words (only
    after a number), then a single optional "of", then the label.

    Examples:
        "2 1/2 cups of flour" -> amount 2.5, measure "cup", label "Flour"
        "salt to taste" -> no amount, label "Salt To Taste"
        "3" -> amount 3, label "3"
    """
    trimmed = raw_value.strip() if raw_value else ""
    if not trimmed:
        return EMPTY_INGREDIENT

    tokens = trimmed.split()
    cursor = 0
    state = ParseState.NUMBER

    amount_value: float | None = None
    number_tokens: list[str] = []
    unit_tokens: list[str] = []

    while state is not ParseState.LABEL and cursor < len(tokens):
        token = tokens[cursor]

        if state is ParseState.NUMBER:
            value = parse_numeric_token(token)
            if value is None:
                state = ParseState.UNIT if amount_value is not None else ParseState.LABEL
                continue
            amount_value = (amount_value or 0.0) + value
            number_tokens.append(token)

        elif state is ParseState.UNIT:
            if not is_measure_word(token):
                state = ParseState.OF
                continue
            unit_tokens.append(token)

        elif state is ParseState.OF:
            if token.lower() == _OF:
                cursor += 1
            state = ParseState.LABEL
            continue

        cursor += 1

    label_raw = " ".join(tokens[cursor:]) or trimmed
    label = format_label(label_raw)

    measure_raw = " ".join(unit_tokens)
    measure_text = normalize_measure_text(measure_raw) or measure_raw

    return ParsedIngredient(
        label=label,
        normalized_label=normalize_label(label),
        quantity_text=" ".join(number_tokens + unit_tokens),
        amount_value=amount_value,
        measure_text=measure_text,
    )
