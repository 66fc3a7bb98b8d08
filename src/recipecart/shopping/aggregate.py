"""Combine the quantities contributed to one shopping-list line."""

import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from recipecart.logging_config import get_logger
from recipecart.normalize.units import format_quantity, normalize_measure_text

logger = get_logger(__name__)

# Shown when a line has no quantities at all
EMPTY_SUMMARY = "—"

# Shown in place of an entry without quantity text
AS_LISTED = "As listed"


def new_entry_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class QuantityEntry:
    """One occurrence of an ingredient, e.g. from one recipe."""

    quantity_text: str = ""
    amount_value: float | None = None
    measure_text: str = ""
    source_recipe_id: str | None = None
    source_recipe_title: str | None = None
    id: str = field(default_factory=new_entry_id)

    @property
    def is_measured(self) -> bool:
        return self.amount_value is not None


def can_aggregate(entries: Sequence[QuantityEntry]) -> bool:
    """
    Check if entries can be summed into one quantity.

    True when every entry has an amount and all share one canonical unit
    (an empty unit counts as a unit, so unit-less counts sum together).
    """
    if not entries:
        return False

    if not all(entry.is_measured for entry in entries):
        return False

    first_measure = normalize_measure_text(entries[0].measure_text)
    return all(normalize_measure_text(entry.measure_text) == first_measure for entry in entries)


def summarize_entries(entries: Sequence[QuantityEntry]) -> str:
    """
    Build the quantity display for one shopping-list line.

    Compatible entries are summed ("1 cup" + "2 cups" -> "3 cups"); anything
    else is listed in order ("As listed + 1/2 cup").
    """
    if not entries:
        return EMPTY_SUMMARY

    if can_aggregate(entries):
        measure = normalize_measure_text(entries[0].measure_text)
        total = sum(entry.amount_value or 0.0 for entry in entries)
        return format_quantity(total, measure)

    logger.debug(f"Cannot aggregate {len(entries)} entries, listing quantities")
    return " + ".join(entry.quantity_text or AS_LISTED for entry in entries)


def _source_title(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        return entry.get("source_recipe_title")
    return getattr(entry, "source_recipe_title", None)


def collect_source_titles(entries: Iterable[Any]) -> list[str]:
    """
    Collect the distinct recipe titles behind a line.

    Titles are trimmed, empty ones dropped, and the first occurrence wins.
    Entries may be ``QuantityEntry`` objects or mappings.
    """
    titles: list[str] = []
    seen: set[str] = set()

    for entry in entries:
        title = _source_title(entry)
        if not isinstance(title, str):
            continue
        title = title.strip()
        if title and title not in seen:
            seen.add(title)
            titles.append(title)

    return titles
