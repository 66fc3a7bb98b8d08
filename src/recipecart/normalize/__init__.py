"""Parse ingredient lines and normalize units and labels."""

from recipecart.normalize.labels import normalize_label, singularize
from recipecart.normalize.parser import (
    ParsedIngredient,
    parse_ingredient,
    parse_numeric_token,
)
from recipecart.normalize.units import (
    MEASURE_DEFINITIONS,
    MEASURE_OPTIONS,
    MeasureDefinition,
    MeasureInfo,
    canonical_of,
    format_quantity,
    get_measure_display,
    measure_options,
    normalize_measure_text,
    pluralize,
)

__all__ = [
    "MEASURE_DEFINITIONS",
    "MEASURE_OPTIONS",
    "MeasureDefinition",
    "MeasureInfo",
    "ParsedIngredient",
    "canonical_of",
    "format_quantity",
    "get_measure_display",
    "measure_options",
    "normalize_label",
    "normalize_measure_text",
    "parse_ingredient",
    "parse_numeric_token",
    "pluralize",
    "singularize",
]
