"""Unit vocabulary, measure normalization and quantity display."""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal
from types import MappingProxyType
from typing import Mapping

# Quantities within this distance of 1 display as singular
PLURAL_TOLERANCE = 1e-9

# Wide enough for the exact decimal expansion of any finite float
_ROUNDING_CONTEXT = Context(prec=400)


# =============================================================================
# Measure Definitions
# =============================================================================


@dataclass(frozen=True)
class MeasureDefinition:
    """A canonical measure with its recognized spellings."""

    canonical: str
    aliases: tuple[str, ...]
    plural: str | None = None

    @property
    def plural_form(self) -> str:
        return self.plural or f"{self.canonical}s"


@dataclass(frozen=True)
class MeasureInfo:
    """Lookup result for a measure alias."""

    canonical: str
    plural: str


# Declaration order is the picklist order shown to users.
MEASURE_DEFINITIONS: tuple[MeasureDefinition, ...] = (
    MeasureDefinition("bag", ("bag", "bags")),
    MeasureDefinition("bottle", ("bottle", "bottles")),
    MeasureDefinition("bunch", ("bunch", "bunches"), plural="bunches"),
    MeasureDefinition("can", ("can", "cans")),
    MeasureDefinition("clove", ("clove", "cloves")),
    MeasureDefinition("cup", ("cup", "cups")),
    MeasureDefinition("dash", ("dash", "dashes"), plural="dashes"),
    MeasureDefinition("ear", ("ear", "ears")),
    MeasureDefinition("gram", ("gram", "grams", "g")),
    MeasureDefinition("handful", ("handful", "handfuls")),
    MeasureDefinition("head", ("head", "heads")),
    MeasureDefinition("kilogram", ("kilogram", "kilograms", "kg")),
    MeasureDefinition("pound", ("pound", "pounds", "lb", "lbs")),
    MeasureDefinition("liter", ("liter", "liters", "l")),
    MeasureDefinition("milliliter", ("milliliter", "milliliters", "ml")),
    MeasureDefinition("ounce", ("ounce", "ounces", "oz")),
    MeasureDefinition("package", ("package", "packages")),
    MeasureDefinition("pack", ("pack", "packs")),
    MeasureDefinition("pinch", ("pinch", "pinches"), plural="pinches"),
    MeasureDefinition("pint", ("pint", "pints")),
    MeasureDefinition("quart", ("quart", "quarts")),
    MeasureDefinition("slice", ("slice", "slices")),
    MeasureDefinition("sprig", ("sprig", "sprigs")),
    MeasureDefinition("stick", ("stick", "sticks")),
    MeasureDefinition("tablespoon", ("tablespoon", "tablespoons", "tbsp", "tbsps")),
    MeasureDefinition("teaspoon", ("teaspoon", "teaspoons", "tsp", "tsps")),
)


def _build_lookup(definitions: tuple[MeasureDefinition, ...]) -> Mapping[str, MeasureInfo]:
    lookup: dict[str, MeasureInfo] = {}
    for definition in definitions:
        info = MeasureInfo(canonical=definition.canonical, plural=definition.plural_form)
        for alias in (definition.canonical, *definition.aliases):
            key = alias.lower()
            existing = lookup.get(key)
            if existing is not None and existing != info:
                raise ValueError(
                    f"Measure alias {alias!r} maps to both "
                    f"{existing.canonical!r} and {info.canonical!r}"
                )
            lookup[key] = info
    return MappingProxyType(lookup)


MEASURE_LOOKUP: Mapping[str, MeasureInfo] = _build_lookup(MEASURE_DEFINITIONS)

MEASURE_WORDS: frozenset[str] = frozenset(MEASURE_LOOKUP)

MEASURE_OPTIONS: tuple[dict[str, str], ...] = tuple(
    MappingProxyType({"value": d.canonical, "label": d.plural_form})
    for d in MEASURE_DEFINITIONS
)


# =============================================================================
# Lookup and Normalization
# =============================================================================


def canonical_of(token: str) -> MeasureInfo | None:
    """Look up a single unit token (case-insensitive, exact match only)."""
    if not token:
        return None
    return MEASURE_LOOKUP.get(token.lower())


def is_measure_word(token: str) -> bool:
    """Check whether a token is a recognized unit alias."""
    return bool(token) and token.lower() in MEASURE_WORDS


def measure_options() -> list[dict[str, str]]:
    """
    Get the unit picklist for UI selectors.

    Returns:
        ``{"value": canonical, "label": plural}`` pairs in declaration order.
    """
    return [dict(option) for option in MEASURE_OPTIONS]


def normalize_measure_text(value: str) -> str:
    """
    Normalize a free-text unit phrase to canonical unit names.

    Each whitespace-separated token is replaced by its canonical unit when it
    is a known alias and lower-cased otherwise.

    Examples:
        "Tablespoons" -> "tablespoon"
        "TBSP" -> "tablespoon"
        "heaping cups" -> "heaping cup"
    """
    if not value:
        return ""

    normalized = []
    for token in value.split():
        info = canonical_of(token)
        normalized.append(info.canonical if info else token.lower())

    return " ".join(normalized)


def get_measure_display(value: str, quantity: float) -> str:
    """
    Get the display form of a unit for a quantity.

    Known units use their declared singular or plural. Units outside the
    vocabulary get an ``s`` appended when plural, unless they already end in ``s``.
    """
    if not value:
        return ""

    needs_plural = abs(quantity - 1) > PLURAL_TOLERANCE
    info = canonical_of(value)

    if info is None:
        if not needs_plural:
            return value
        return value if value.endswith("s") else f"{value}s"

    return info.plural if needs_plural else info.canonical


pluralize = get_measure_display


# =============================================================================
# Quantity Formatting
# =============================================================================


def round_quantity(value: float) -> float:
    """Round to 2 decimals, halves away from zero on the exact binary value."""
    if not math.isfinite(value):
        return value
    return float(
        Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT)
    )


def format_amount(value: float) -> str:
    """Format a rounded amount without trailing zeros."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_quantity(value: float, measure_text: str) -> str:
    """
    Format an amount and unit for display.

    Examples:
        (2.5, "cup") -> "2.5 cups"
        (3, "") -> "3"
        (1.0, "tablespoon") -> "1 tablespoon"
    """
    rounded = round_quantity(value)
    base = format_amount(rounded)

    if not measure_text:
        return base

    return f"{base} {get_measure_display(measure_text, rounded)}".strip()
