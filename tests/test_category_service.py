"""Tests for the category service."""

import pytest

from spendtrack.domain.category import DEFAULT_CATEGORIES, DEFAULT_RULES
from spendtrack.domain.errors import ConflictError, NotFoundError, ValidationError


def test_seed_defaults(category_service, temp_db):
    """Test the default categories and rules are created."""
    created = category_service.seed_defaults()

    assert created == (len(DEFAULT_CATEGORIES), len(DEFAULT_RULES))
    names = [cat.name for cat in category_service.list_categories()]
    assert names == ["Food", "Transport", "Shopping", "Bills", "Entertainment", "Health", "Others"]
    others = temp_db.get_category(7)
    assert others.name == "Others"
    assert others.is_default is True
    assert len(temp_db.list_rules()) == 36


def test_seed_defaults_twice(category_service):
    """Test seeding is idempotent."""
    category_service.seed_defaults()

    assert category_service.seed_defaults() == (0, 0)


def test_create_custom_category(category_service):
    """Test custom categories are appended after the defaults."""
    category_service.seed_defaults()

    category_id = category_service.create_category("Pets", color="#795548", icon="🐶")

    category = category_service.get_category(category_id)
    assert category.is_default is False
    assert category_service.list_categories()[-1].name == "Pets"


def test_create_category_conflict(category_service):
    """Test names are unique ignoring case."""
    category_service.create_category("Pets")

    with pytest.raises(ConflictError):
        category_service.create_category("pets")


def test_create_category_empty_name(category_service):
    """Test empty names are rejected."""
    with pytest.raises(ValidationError):
        category_service.create_category("  ")


def test_default_category_cannot_be_deleted(category_service):
    """Test the default set is protected."""
    category_service.seed_defaults()

    with pytest.raises(ValidationError):
        category_service.delete_category(1)


def test_delete_custom_category(category_service):
    """Test deleting custom categories, singly and in bulk."""
    category_service.seed_defaults()
    pets = category_service.create_category("Pets")
    category_service.create_category("Gifts")
    category_service.create_category("Travel")

    category_service.delete_category(pets)
    assert category_service.get_category(pets) is None

    assert category_service.delete_custom_categories() == 2
    assert len(category_service.list_categories()) == 7


def test_require_category(category_service):
    """Test lookups by name."""
    category_service.seed_defaults()

    assert category_service.require_category("food").id == 1
    with pytest.raises(NotFoundError):
        category_service.require_category("Travel")


def test_update_category(category_service):
    """Test renaming and recoloring."""
    category_id = category_service.create_category("Pets")

    category_service.update_category(category_id, name="Pet Care", color="#123456")

    category = category_service.get_category(category_id)
    assert category.name == "Pet Care"
    assert category.color == "#123456"
