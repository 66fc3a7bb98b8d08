"""Pytest configuration and shared fixtures."""

import logging
from datetime import datetime, timezone

import pytest

from recipecart.config import get_settings
from recipecart.logging_config import clear_context
from recipecart.schemas import IncomingIngredient
from recipecart.shopping.aggregate import QuantityEntry

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment overrides apply per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging_context():
    """Make sure no logging context leaks between tests."""
    clear_context()
    yield
    clear_context()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and levels after configure_logging()."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    module_levels = {
        name: logging.getLogger(name).level
        for name in ("recipecart", "recipecart.normalize", "recipecart.shopping")
    }
    yield root_logger
    for name, module_level in module_levels.items():
        logging.getLogger(name).setLevel(module_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


# =============================================================================
# Ingredient Fixtures
# =============================================================================


@pytest.fixture
def weeknight_ingredients():
    """Ingredient lines from two recipes sharing flour and tomatoes."""
    return [
        IncomingIngredient(value="1 cup flour", recipe_id="r-bread", recipe_title="Bread"),
        IncomingIngredient(value="2 tomatoes", recipe_id="r-bread", recipe_title="Bread"),
        IncomingIngredient(value="2 cups of Flour", recipe_id="r-cake", recipe_title="Cake"),
        IncomingIngredient(value="1 Tomato", recipe_id="r-cake", recipe_title="Cake"),
        IncomingIngredient(value="3 tbsp olive oil", recipe_id="r-cake", recipe_title="Cake"),
        IncomingIngredient(value="salt to taste", recipe_id="r-cake", recipe_title="Cake"),
    ]


@pytest.fixture
def cup_entries():
    """Two compatible cup entries."""
    return [
        QuantityEntry(quantity_text="1 cup", amount_value=1, measure_text="cup"),
        QuantityEntry(quantity_text="2 cups", amount_value=2, measure_text="cups"),
    ]


@pytest.fixture
def crossed_off_time():
    """A fixed, timezone-aware crossed-off timestamp."""
    return datetime(2025, 1, 15, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def stored_snapshot():
    """A stored list mapping as a host would persist it."""
    return {
        "flour": {
            "label": "Flour",
            "order": 1,
            "crossed_off_at": None,
            "entries": [
                {
                    "id": "e-1",
                    "quantity_text": "1 cup",
                    "amount_value": 1,
                    "measure_text": "Cups",
                    "source_recipe_title": "Bread",
                },
                {
                    "id": "e-2",
                    "quantity_text": "2 cups",
                    "amount_value": 2,
                    "measure_text": "cup",
                    "source_recipe_title": "Cake",
                },
            ],
        },
        "salt": {
            "label": "salt",
            "order": 0,
            "crossed_off_at": "2025-01-15T18:30:00Z",
            "entries": [{"quantity_text": "", "amount_value": None, "measure_text": ""}],
        },
    }
