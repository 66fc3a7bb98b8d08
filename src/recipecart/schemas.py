"""Data schemas exchanged with the host application."""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictStr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)


class IncomingIngredient(BaseModel):
    """An ingredient line being added to a shopping list."""

    value: str
    recipe_id: str | None = None
    recipe_title: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"value": data}
        return data


class AddIngredientsRequest(BaseModel):
    """Payload for adding ingredients to an owner's list."""

    ingredients: list[IncomingIngredient] = Field(description="Ingredient lines to add")
    owner_id: str | None = None

    @field_validator("owner_id")
    @classmethod
    def _blank_owner_is_self(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class _LenientModel(BaseModel):
    """Base for stored payloads: unusable field values fall back to ``None``."""

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class StoredQuantityEntry(_LenientModel):
    """A quantity entry as persisted by the host. Values are not coerced."""

    id: StrictStr | None = None
    quantity_text: StrictStr | None = None
    amount_value: StrictFloat | None = None
    measure_text: StrictStr | None = None
    source_recipe_id: StrictStr | None = None
    source_recipe_title: StrictStr | None = None


class StoredListRecord(_LenientModel):
    """
    A shopping-list record as persisted by the host.

    Older snapshots carry a ``quantity`` count instead of ``entries``.
    """

    label: str | None = None
    entries: list[Any] | None = None
    quantity: StrictFloat | None = None
    order: int | None = None
    crossed_off_at: datetime | None = None


class ShoppingListEntryRow(BaseModel):
    """One persisted entry row, as stored by a relational host."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    normalized_label: str
    quantity_text: str = ""
    amount_value: float | None = None
    measure_text: str | None = None
    source_recipe_id: str | None = None
    source_recipe_title: str | None = None
    sort_order: int = 0
    crossed_off_at: datetime | None = None


class SerializedEntry(BaseModel):
    """Entry fields that take part in change detection."""

    quantity_text: str
    amount_value: float | None
    measure_text: str
    source_recipe_id: str | None
    source_recipe_title: str | None


class SerializedRecord(BaseModel):
    """Record snapshot used to detect list changes."""

    key: str
    order: int
    crossed_off_at: datetime | None
    entries: list[SerializedEntry]
