"""Shopping list state: grouping ingredient lines by normalized label."""

import json
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from recipecart.config import get_settings
from recipecart.logging_config import get_logger
from recipecart.normalize.labels import normalize_label
from recipecart.normalize.parser import parse_ingredient
from recipecart.normalize.units import normalize_measure_text
from recipecart.schemas import (
    IncomingIngredient,
    SerializedEntry,
    SerializedRecord,
    ShoppingListEntryRow,
    StoredListRecord,
    StoredQuantityEntry,
)
from recipecart.shopping.aggregate import (
    AS_LISTED,
    QuantityEntry,
    collect_source_titles,
    new_entry_id,
    summarize_entries,
)

logger = get_logger(__name__)


@dataclass
class ShoppingListRecord:
    """All entries for one ingredient, keyed by its normalized label."""

    label: str
    entries: list[QuantityEntry] = field(default_factory=list)
    order: int = 0
    crossed_off_at: datetime | None = None

    @property
    def is_crossed_off(self) -> bool:
        return self.crossed_off_at is not None


@dataclass
class ShoppingListItem:
    """A display row for one shopping-list line."""

    key: str
    label: str
    unit_summary: str
    occurrences: int
    sources: list[str] = field(default_factory=list)
    order: int = 0
    crossed_off_at: datetime | None = None


def build_manual_entry(
    label: str,
    quantity_text: str,
    source_titles: Sequence[str] | None = None,
) -> QuantityEntry:
    """
    Build the entry that replaces a line's quantities after a manual edit.

    The typed quantity is parsed in front of the label so "2 cups" on
    "Flour" becomes a measured 2 cup entry; free text like "a few" stays
    unmeasured.
    """
    settings = get_settings()
    trimmed = quantity_text.strip()
    parsed = parse_ingredient(f"{trimmed} {label}".strip() if trimmed else label)

    if source_titles:
        source_title = settings.source_title_separator.join(source_titles)
    else:
        source_title = settings.manual_adjustment_title

    return QuantityEntry(
        quantity_text=trimmed or AS_LISTED,
        amount_value=parsed.amount_value if trimmed and parsed.quantity_text else None,
        measure_text=parsed.measure_text,
        source_recipe_title=source_title,
    )


def normalize_list_label(raw_label: str) -> str:
    """
    Clean a user-supplied shopping list name.

    Raises:
        ValueError: If the name is empty after trimming.
    """
    trimmed = (raw_label or "").strip()
    if not trimmed:
        raise ValueError("List name cannot be empty")
    return trimmed[: get_settings().list_label_max_length]


def _revive_entry(value: Any) -> QuantityEntry | None:
    if not isinstance(value, Mapping):
        logger.debug(f"Skipping stored entry of type {type(value).__name__}")
        return None

    stored = StoredQuantityEntry.model_validate(value)
    measure_text = stored.measure_text or ""

    return QuantityEntry(
        id=stored.id or new_entry_id(),
        quantity_text=stored.quantity_text or "",
        amount_value=stored.amount_value,
        measure_text=normalize_measure_text(measure_text) or measure_text,
        source_recipe_id=stored.source_recipe_id,
        source_recipe_title=stored.source_recipe_title,
    )


@dataclass
class ShoppingList:
    """
    One owner's shopping list.

    Lines are keyed by normalized label, so "2 tomatoes" from one recipe and
    "1 Tomato" from another land on the same line.
    """

    records: dict[str, ShoppingListRecord] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, key: object) -> bool:
        return key in self.records

    def _max_order(self) -> int:
        return max((record.order for record in self.records.values()), default=-1)

    def _min_order(self) -> int | None:
        return min((record.order for record in self.records.values()), default=None)

    def resolve_key(self, key_or_label: str) -> str:
        """Map a raw label ("2 Tomatoes") to its record key ("tomato")."""
        if key_or_label in self.records:
            return key_or_label
        parsed = parse_ingredient(key_or_label)
        return parsed.normalized_label or normalize_label(key_or_label)

    def add_ingredients(
        self,
        ingredients: Iterable[IncomingIngredient | Mapping[str, Any] | str],
        position: Literal["start", "end"] = "end",
    ) -> int:
        """
        Add ingredient lines, merging them into existing lines by label.

        New lines go after the last line (or before the first when
        ``position="start"``). Adding to an existing line uncrosses it.

        Returns:
            Number of entries added.

        Raises:
            pydantic.ValidationError: If an ingredient payload is malformed.
        """
        order_cursor = self._max_order()
        lowest_order = self._min_order()
        prepend_cursor = (lowest_order if lowest_order is not None else 0) - 1
        added = 0

        for raw in ingredients:
            incoming = IncomingIngredient.model_validate(raw)
            parsed = parse_ingredient(incoming.value)
            if not parsed.label:
                continue

            key = parsed.normalized_label or normalize_label(parsed.label)
            entry = QuantityEntry(
                quantity_text=parsed.quantity_text,
                amount_value=parsed.amount_value,
                measure_text=parsed.measure_text,
                source_recipe_id=incoming.recipe_id,
                source_recipe_title=incoming.recipe_title,
            )

            existing = self.records.get(key)
            if existing is not None:
                existing.label = parsed.label
                existing.entries.append(entry)
                if existing.is_crossed_off:
                    logger.debug(f"Restoring crossed-off line {key!r}")
                    existing.crossed_off_at = None
            else:
                if position == "start":
                    assigned_order = prepend_cursor
                    prepend_cursor -= 1
                else:
                    order_cursor += 1
                    assigned_order = order_cursor
                self.records[key] = ShoppingListRecord(
                    label=parsed.label,
                    entries=[entry],
                    order=assigned_order,
                )
            added += 1

        if added:
            logger.info(f"Added {added} entries, list now has {len(self.records)} lines")
        return added

    def remove(self, key_or_label: str) -> bool:
        """Remove a line by key or raw label."""
        key = self.resolve_key(key_or_label)
        if key not in self.records:
            return False
        del self.records[key]
        logger.debug(f"Removed line {key!r}")
        return True

    def clear(self) -> bool:
        """Remove every line."""
        if not self.records:
            return False
        self.records.clear()
        return True

    def reorder(self, ordered_keys: Sequence[str]) -> bool:
        """
        Apply a new line order.

        Keys are placed first in the given order; unknown keys are ignored and
        lines not mentioned follow in their current order.

        Returns:
            True if any line's order changed.
        """
        if not ordered_keys:
            return False

        provided = [key for key in dict.fromkeys(ordered_keys) if key in self.records]
        provided_set = set(provided)
        missing = [key for key in self.records if key not in provided_set]

        updated = False
        for index, key in enumerate(provided + missing):
            record = self.records[key]
            if record.order != index:
                record.order = index
                updated = True
        return updated

    def set_crossed_off(self, key: str, crossed_off_at: datetime | None) -> bool:
        """Cross a line off (with a timestamp) or restore it (``None``)."""
        record = self.records.get(key)
        if record is None or record.crossed_off_at == crossed_off_at:
            return False
        record.crossed_off_at = crossed_off_at
        return True

    def override_quantity(self, key: str, quantity_text: str) -> bool:
        """Replace a line's entries with a single manually typed quantity."""
        record = self.records.get(key)
        if record is None:
            return False

        manual_entry = build_manual_entry(
            record.label,
            quantity_text,
            collect_source_titles(record.entries),
        )
        if len(record.entries) == 1:
            current = record.entries[0]
            if (
                current.quantity_text == manual_entry.quantity_text
                and current.amount_value == manual_entry.amount_value
                and current.measure_text == manual_entry.measure_text
            ):
                return False

        record.entries = [manual_entry]
        logger.debug(f"Quantity for {key!r} overridden with {manual_entry.quantity_text!r}")
        return True

    def items(self) -> list[ShoppingListItem]:
        """Get display rows sorted by order, then label."""
        rows = [
            ShoppingListItem(
                key=key,
                label=record.label,
                unit_summary=summarize_entries(record.entries),
                occurrences=len(record.entries),
                sources=collect_source_titles(record.entries),
                order=record.order,
                crossed_off_at=record.crossed_off_at,
            )
            for key, record in self.records.items()
        ]
        return sorted(rows, key=lambda row: (row.order, row.label.casefold()))

    def dump(self) -> dict[str, dict[str, Any]]:
        """Dump to a JSON-compatible mapping of key -> record, readable by ``revive``."""
        return {
            key: StoredListRecord(
                label=record.label,
                entries=[
                    StoredQuantityEntry(
                        id=entry.id,
                        quantity_text=entry.quantity_text,
                        amount_value=entry.amount_value,
                        measure_text=entry.measure_text,
                        source_recipe_id=entry.source_recipe_id,
                        source_recipe_title=entry.source_recipe_title,
                    ).model_dump(mode="json")
                    for entry in record.entries
                ],
                order=record.order,
                crossed_off_at=record.crossed_off_at,
            ).model_dump(mode="json", exclude={"quantity"})
            for key, record in self.records.items()
        }

    def serialize(self) -> str:
        """Serialize to a stable JSON snapshot for change detection."""
        snapshot = [
            SerializedRecord(
                key=key,
                order=record.order,
                crossed_off_at=record.crossed_off_at,
                entries=[
                    SerializedEntry(
                        quantity_text=entry.quantity_text,
                        amount_value=entry.amount_value,
                        measure_text=entry.measure_text,
                        source_recipe_id=entry.source_recipe_id,
                        source_recipe_title=entry.source_recipe_title,
                    )
                    for entry in record.entries
                ],
            ).model_dump(mode="json")
            for key, record in sorted(self.records.items())
        ]
        return json.dumps(snapshot, ensure_ascii=False)

    @classmethod
    def revive(cls, payload: Mapping[str, Any] | str | None) -> "ShoppingList":
        """
        Rebuild a list from a stored mapping of key -> record.

        Invalid records and entries are skipped. Records without an order are
        numbered in the order they are read.
        """
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                logger.warning(f"Stored shopping list is not valid JSON: {e}")
                return cls()

        if not isinstance(payload, Mapping):
            return cls()

        shopping_list = cls()
        fallback_order = 0

        for key, value in payload.items():
            if not isinstance(value, Mapping):
                logger.warning(f"Skipping stored record {key!r}: not a mapping")
                continue

            stored = StoredListRecord.model_validate(value)

            label_source = stored.label or key

            if stored.entries is not None:
                entries = [
                    entry
                    for entry in (_revive_entry(item) for item in stored.entries)
                    if entry is not None
                ]
                if not entries:
                    continue
                label = parse_ingredient(label_source).label or label_source
                crossed_off_at = stored.crossed_off_at
            else:
                # Older snapshots only kept a label and a repeat count
                parsed = parse_ingredient(label_source)
                if stored.quantity is not None and math.isfinite(stored.quantity):
                    # Halves round up: a stored 2.5 is three entries
                    count = max(1, math.floor(stored.quantity + 0.5))
                else:
                    count = 1
                entries = [
                    QuantityEntry(
                        quantity_text=parsed.quantity_text or AS_LISTED,
                        amount_value=parsed.amount_value,
                        measure_text=parsed.measure_text,
                    )
                    for _ in range(count)
                ]
                label = parsed.label
                crossed_off_at = None

            if stored.order is not None:
                order = stored.order
            else:
                order = fallback_order
                fallback_order += 1

            shopping_list.records[key] = ShoppingListRecord(
                label=label,
                entries=entries,
                order=order,
                crossed_off_at=crossed_off_at,
            )

        logger.debug(f"Revived shopping list with {len(shopping_list)} lines")
        return shopping_list

    @classmethod
    def from_rows(cls, rows: Iterable[ShoppingListEntryRow | Mapping[str, Any] | Any]) -> "ShoppingList":
        """
        Group persisted entry rows into lines.

        A line takes the lowest sort order of its rows and the earliest
        crossed-off time. Rows may be models, mappings or ORM objects.
        """
        shopping_list = cls()

        for raw in rows:
            row = ShoppingListEntryRow.model_validate(raw)
            entry = QuantityEntry(
                id=row.id,
                quantity_text=row.quantity_text,
                amount_value=row.amount_value,
                measure_text=row.measure_text or "",
                source_recipe_id=row.source_recipe_id,
                source_recipe_title=row.source_recipe_title,
            )

            record = shopping_list.records.get(row.normalized_label)
            if record is None:
                shopping_list.records[row.normalized_label] = ShoppingListRecord(
                    label=row.label,
                    entries=[entry],
                    order=row.sort_order,
                    crossed_off_at=row.crossed_off_at,
                )
                continue

            record.entries.append(entry)
            record.order = min(record.order, row.sort_order)
            if row.crossed_off_at is not None:
                if record.crossed_off_at is None:
                    record.crossed_off_at = row.crossed_off_at
                else:
                    record.crossed_off_at = min(record.crossed_off_at, row.crossed_off_at)

        return shopping_list


def build_shopping_list(
    ingredients: Iterable[IncomingIngredient | Mapping[str, Any] | str],
) -> ShoppingList:
    """Build a new shopping list from ingredient lines."""
    shopping_list = ShoppingList()
    shopping_list.add_ingredients(ingredients)
    return shopping_list
