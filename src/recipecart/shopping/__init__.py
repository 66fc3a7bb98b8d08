"""Shopping list aggregation and line bookkeeping."""

from recipecart.shopping.aggregate import (
    AS_LISTED,
    EMPTY_SUMMARY,
    QuantityEntry,
    can_aggregate,
    collect_source_titles,
    summarize_entries,
)
from recipecart.shopping.shopping_list import (
    ShoppingList,
    ShoppingListItem,
    ShoppingListRecord,
    build_manual_entry,
    build_shopping_list,
    normalize_list_label,
)

__all__ = [
    "AS_LISTED",
    "EMPTY_SUMMARY",
    "QuantityEntry",
    "ShoppingList",
    "ShoppingListItem",
    "ShoppingListRecord",
    "build_manual_entry",
    "build_shopping_list",
    "can_aggregate",
    "collect_source_titles",
    "normalize_list_label",
    "summarize_entries",
]
